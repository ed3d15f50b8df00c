"""Customer & Dashboard Routes — verifies upstream proxying and usage enrichment.

Invariants:
    - hasApiUsage reflects the 30-day report; a failed lookup counts as no usage
    - Local filters narrow the fetched page, pagination block comes from upstream
    - An unknown usage period falls back to 90 days
    - period=lastYear keeps only customers who signed up last calendar year
"""

from datetime import date

import httpx


def _customer(user_id, **fields):
    base = {
        "userId": user_id,
        "firstName": user_id.title(),
        "lastName": "Tester",
        "email": f"{user_id}@example.com",
        "organizationName": f"{user_id} Org",
        "dateCreated": "2024-01-01T00:00:00Z",
        "apiKeyCount": 1,
        "planId": "basic",
    }
    base.update(fields)
    return base


async def test_stats_wraps_upstream_payload(client, upstream_stub):
    upstream_stub.add("GET", "/admin/stats", {"totalUsers": 12})

    res = await client.get("/api/stats")

    body = res.json()
    assert body["success"] is True
    assert body["data"] == {"totalUsers": 12}
    assert "timestamp" in body


async def test_stats_upstream_error_envelope(client, upstream_stub):
    upstream_stub.add("GET", "/admin/stats", {"error": "down"}, status_code=500)

    res = await client.get("/api/stats")

    assert res.status_code == 500
    body = res.json()
    assert body["success"] is False
    assert body["error"] == "Failed to fetch dashboard stats: 500"
    assert "down" in body["details"]


async def test_stats_unreachable_upstream_is_500(client, upstream_stub):
    def refuse(request):
        raise httpx.ConnectError("connection refused", request=request)

    upstream_stub.add("GET", "/admin/stats", refuse)

    res = await client.get("/api/stats")

    assert res.status_code == 500
    assert res.json()["error"] == "Failed to fetch dashboard stats"


async def test_api_usage_forwards_days(client, upstream_stub):
    upstream_stub.add("GET", "/admin/api-usage", {"dailyUsage": []})
    await client.get("/api/api-usage", params={"days": 7})
    assert upstream_stub.last.url.params["days"] == "7"


async def test_customers_enriched_with_api_usage(client, upstream_stub):
    upstream_stub.add("GET", "/admin/customers", {
        "customers": [_customer("alice"), _customer("bob")],
        "total": 2, "totalPages": 1, "hasNextPage": False, "hasPrevPage": False,
    })
    upstream_stub.add("GET", "/admin/customers/alice/api-usage", {"totalRequests": 40})
    upstream_stub.add("GET", "/admin/customers/bob/api-usage", {"totalRequests": 0})

    res = await client.get("/api/customers")

    body = res.json()
    usage = {c["userId"]: c["hasApiUsage"] for c in body["customers"]}
    assert usage == {"alice": True, "bob": False}
    assert body["pagination"] == {
        "page": 1, "limit": 100, "total": 2, "totalPages": 1,
        "hasNextPage": False, "hasPrevPage": False,
    }
    usage_call = upstream_stub.calls_to("/admin/customers/alice/api-usage")[0]
    assert usage_call.url.params["days"] == "30"


async def test_customers_failed_usage_lookup_counts_as_no_usage(client, upstream_stub):
    upstream_stub.add("GET", "/admin/customers", {"customers": [_customer("carol")]})
    upstream_stub.add(
        "GET", "/admin/customers/carol/api-usage", {"error": "x"}, status_code=500,
    )

    res = await client.get("/api/customers")

    assert res.status_code == 200
    assert res.json()["customers"][0]["hasApiUsage"] is False


async def test_customers_only_api_users_filter(client, upstream_stub):
    upstream_stub.add("GET", "/admin/customers", {
        "customers": [_customer("alice"), _customer("bob")],
    })
    upstream_stub.add("GET", "/admin/customers/alice/api-usage", {"totalRequests": 3})
    upstream_stub.add("GET", "/admin/customers/bob/api-usage", {"totalRequests": 0})

    res = await client.get("/api/customers", params={"onlyApiUsers": "true"})

    assert [c["userId"] for c in res.json()["customers"]] == ["alice"]


async def test_customers_without_usage_skips_lookups(client, upstream_stub):
    upstream_stub.add("GET", "/admin/customers", {"customers": [_customer("alice")]})

    res = await client.get("/api/customers", params={"includeUsage": "false"})

    assert res.status_code == 200
    assert len(upstream_stub.requests) == 1
    assert "hasApiUsage" not in res.json()["customers"][0]


async def test_customers_period_narrows_by_signup_date(client, upstream_stub):
    last_year = date.today().year - 1
    upstream_stub.add("GET", "/admin/customers", {"customers": [
        _customer("alice", dateCreated=f"{last_year}-03-15T10:00:00Z"),
        _customer("bob", dateCreated=f"{last_year + 1}-01-01T00:00:00Z"),
        _customer("carol", dateCreated=f"{last_year - 1}-12-31T23:00:00Z"),
    ]})

    res = await client.get(
        "/api/customers", params={"period": "lastYear", "includeUsage": "false"},
    )

    assert [c["userId"] for c in res.json()["customers"]] == ["alice"]


async def test_customers_custom_dates_need_custom_period(client, upstream_stub):
    upstream_stub.add("GET", "/admin/customers", {"customers": [
        _customer("alice", dateCreated="2024-02-01T00:00:00Z"),
        _customer("bob", dateCreated="2024-06-01T00:00:00Z"),
    ]})
    dates = {"startDate": "2024-05-01", "endDate": "2024-12-31", "includeUsage": "false"}

    unbounded = await client.get("/api/customers", params=dates)
    custom = await client.get("/api/customers", params={**dates, "period": "custom"})

    assert len(unbounded.json()["customers"]) == 2
    assert [c["userId"] for c in custom.json()["customers"]] == ["bob"]


async def test_customers_search_forwarded_upstream(client, upstream_stub):
    upstream_stub.add("GET", "/admin/customers", {"customers": []})

    await client.get("/api/customers", params={"search": "acme", "page": 2})

    params = upstream_stub.last.url.params
    assert params["search"] == "acme"
    assert params["page"] == "2"


async def test_customer_usage_period_mapping(client, upstream_stub):
    upstream_stub.add("GET", "/admin/customers/alice/api-usage", {"totalRequests": 1})

    await client.get("/api/customers/alice/usage", params={"period": "7d"})
    assert upstream_stub.last.url.params["days"] == "7"

    res = await client.get("/api/customers/alice/usage", params={"period": "bogus"})
    assert upstream_stub.last.url.params["days"] == "90"
    assert res.json()["userId"] == "alice"
