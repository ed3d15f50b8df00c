"""CLI — argument parsing and command dispatch."""

import pytest

from cooler_admin import cli
from cooler_admin.services.traffic_generator import TrafficResult


def test_parser_requires_command():
    with pytest.raises(SystemExit):
        cli.build_parser().parse_args([])


def test_generate_traffic_defaults():
    args = cli.build_parser().parse_args(["generate-traffic"])
    assert args.count == 1
    assert args.interval == 0.0


def test_watch_requests_defaults():
    args = cli.build_parser().parse_args(["watch-requests", "--iterations", "2"])
    assert args.interval == 5.0
    assert args.iterations == 2
    assert args.user_id is None


def test_generate_traffic_exit_code_reflects_failures(monkeypatch, tmp_path):
    outcomes = iter([
        TrafficResult("Test Product 1", 10, 201, 0.1),
        TrafficResult("Test Product 2", 20, 500, 0.1),
    ])
    calls = []

    def fake_send(client, api_url, api_key, log_path):
        calls.append((api_url, log_path))
        return next(outcomes)

    monkeypatch.setattr(cli, "send_submission", fake_send)
    monkeypatch.setattr(cli, "setup_logging", lambda *a, **kw: None)

    code = cli.main([
        "generate-traffic", "--count", "2",
        "--api-url", "https://api.example", "--log-path", str(tmp_path / "t.log"),
    ])

    assert code == 1
    assert len(calls) == 2
    assert calls[0][0] == "https://api.example"


def test_watch_requests_prints_metrics(monkeypatch, capsys):
    async def fake_fetch(upstream, limit, user_id):
        return [{"success": True, "responseTime": 40, "timestamp": "2030-01-01T00:00:00Z"}]

    monkeypatch.setattr(cli, "fetch_recent_requests", fake_fetch)
    monkeypatch.setattr(cli, "setup_logging", lambda *a, **kw: None)

    code = cli.main(["watch-requests", "--iterations", "2", "--interval", "0"])

    assert code == 0
    lines = capsys.readouterr().out.strip().splitlines()
    assert len(lines) == 2
    assert lines[0].startswith("[poll 1]")
    assert '"totalRequests": 1' in lines[0]
