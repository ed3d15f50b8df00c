"""Anomaly Routes — verifies filter forwarding and resolution payloads.

Invariants:
    - "all" filters are omitted upstream; resolved is forwarded as true/false
    - Each resolution action sends exactly its own fields plus action and notes
    - Missing action data is a 400 before any upstream call
    - Upstream success: false becomes a 502 envelope
"""

import json

RESOLVE_PATH = "/admin/anomalies/a-1/resolve"


async def test_list_omits_all_filters(client, upstream_stub):
    upstream_stub.add("GET", "/admin/anomalies", {
        "anomalies": [{"id": "a-1"}], "total": 1, "totalPages": 1,
    })

    res = await client.get("/api/anomalies")

    assert res.status_code == 200
    params = upstream_stub.last.url.params
    assert "type" not in params
    assert "severity" not in params
    assert "resolved" not in params
    assert params["page"] == "1"
    assert params["limit"] == "50"
    assert params["sortBy"] == "dateCreated"
    assert params["sortDirection"] == "desc"
    body = res.json()
    assert body["success"] is True
    assert body["anomalies"] == [{"id": "a-1"}]
    assert body["pagination"]["total"] == 1
    assert body["pagination"]["hasNextPage"] is False


async def test_list_forwards_filters(client, upstream_stub):
    upstream_stub.add("GET", "/admin/anomalies", {"anomalies": []})

    await client.get(
        "/api/anomalies",
        params={"type": "CALCULATION", "severity": "HIGH", "resolved": "unresolved",
                "search": "acme", "sortDirection": "asc"},
    )

    params = upstream_stub.last.url.params
    assert params["type"] == "CALCULATION"
    assert params["severity"] == "HIGH"
    assert params["resolved"] == "false"
    assert params["search"] == "acme"
    assert params["sortDirection"] == "asc"


async def test_list_rejects_unknown_type(client, upstream_stub):
    res = await client.get("/api/anomalies", params={"type": "NOPE"})
    assert res.status_code == 400
    assert res.json()["error"] == "Invalid request data"
    assert upstream_stub.requests == []


async def test_stats_proxies_upstream(client, upstream_stub):
    upstream_stub.add("GET", "/admin/anomalies/stats", {"total": 4, "unresolved": 3})
    res = await client.get("/api/anomalies/stats")
    assert res.json()["data"] == {"total": 4, "unresolved": 3}


async def test_resolve_mark_resolved_sends_action_and_notes_only(client, upstream_stub):
    upstream_stub.add("POST", RESOLVE_PATH, {"success": True})

    res = await client.post(
        "/api/anomalies/a-1/resolve", json={"action": "MARK_RESOLVED", "notes": "ok"},
    )

    assert res.status_code == 200
    assert json.loads(upstream_stub.last.content) == {
        "action": "MARK_RESOLVED", "notes": "ok",
    }
    assert res.json()["anomalyId"] == "a-1"
    assert res.json()["action"] == "MARK_RESOLVED"


async def test_resolve_update_submission_sends_full_block(client, upstream_stub):
    upstream_stub.add("POST", RESOLVE_PATH, {"success": True})

    await client.post("/api/anomalies/a-1/resolve", json={
        "action": "UPDATE_SUBMISSION",
        "notes": "fixed title",
        "submissionData": {"title": "Widget", "price": 12.5, "naicsCode": "334111"},
    })

    sent = json.loads(upstream_stub.last.content)
    assert sent["action"] == "UPDATE_SUBMISSION"
    assert sent["submissionData"] == {
        "title": "Widget",
        "manufacturer": "",
        "category": "",
        "description": "",
        "price": 12.5,
        "currency": "USD",
        "naicsCode": "334111",
    }
    assert "naicsCode" not in sent
    assert "price" not in sent


async def test_resolve_update_naics_code(client, upstream_stub):
    upstream_stub.add("POST", RESOLVE_PATH, {"success": True})

    await client.post("/api/anomalies/a-1/resolve", json={
        "action": "UPDATE_NAICS_CODE", "naicsCode": "541511",
    })

    assert json.loads(upstream_stub.last.content) == {
        "action": "UPDATE_NAICS_CODE", "notes": "", "naicsCode": "541511",
    }


async def test_resolve_update_price(client, upstream_stub):
    upstream_stub.add("POST", RESOLVE_PATH, {"success": True})

    await client.post("/api/anomalies/a-1/resolve", json={
        "action": "UPDATE_PRICE", "price": 99.99, "currency": "EUR",
    })

    assert json.loads(upstream_stub.last.content) == {
        "action": "UPDATE_PRICE", "notes": "", "price": 99.99, "currency": "EUR",
    }


async def test_resolve_missing_price_is_400(client, upstream_stub):
    res = await client.post(
        "/api/anomalies/a-1/resolve", json={"action": "UPDATE_PRICE"},
    )

    assert res.status_code == 400
    body = res.json()
    assert body["success"] is False
    assert body["error"] == "Invalid request data"
    assert body["details"]
    assert upstream_stub.requests == []


async def test_resolve_upstream_success_false_is_502(client, upstream_stub):
    upstream_stub.add("POST", RESOLVE_PATH, {"success": False, "error": "stale flag"})

    res = await client.post("/api/anomalies/a-1/resolve", json={"action": "MARK_RESOLVED"})

    assert res.status_code == 502
    assert res.json() == {
        "success": False, "error": "Failed to resolve anomaly", "details": "stale flag",
    }


async def test_resolve_upstream_error_mirrors_status(client, upstream_stub):
    upstream_stub.add("POST", RESOLVE_PATH, {"message": "not found"}, status_code=404)

    res = await client.post("/api/anomalies/a-1/resolve", json={"action": "MARK_RESOLVED"})

    assert res.status_code == 404
    assert res.json()["error"] == "Failed to resolve anomaly: 404"


async def test_notes_patch_sends_resolution_notes(client, upstream_stub):
    upstream_stub.add("PATCH", RESOLVE_PATH, {"id": "a-1", "resolved": True})

    res = await client.patch(
        "/api/anomalies/a-1/notes", json={"resolutionNotes": "duplicate"},
    )

    assert res.status_code == 200
    assert upstream_stub.last.method == "PATCH"
    assert json.loads(upstream_stub.last.content) == {"resolutionNotes": "duplicate"}
