"""Cooler Admin CLI entry points.

Exposes the traffic generator and a terminal watcher for recent API requests.
It maps argparse commands onto the service layer.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import time
from pathlib import Path
from typing import Sequence

import httpx

from cooler_admin.api.routes.api_requests import fetch_recent_requests
from cooler_admin.config import get_settings
from cooler_admin.core.errors import CoolerAdminError
from cooler_admin.core.request_metrics import compute_request_metrics
from cooler_admin.infrastructure.observability import setup_logging
from cooler_admin.infrastructure.upstream_client import CoolerApiClient
from cooler_admin.services.traffic_generator import send_submission

logger = logging.getLogger(__name__)

DEFAULT_WATCH_INTERVAL_SECONDS = 5.0
DEFAULT_WATCH_LIMIT = 100


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser.

    Returns:
        Configured argument parser.
    """
    parser = argparse.ArgumentParser(prog="cooler-admin", description="Cooler admin tooling")
    parser.add_argument("--log-level", help="Override LOG_LEVEL for this command")
    subparsers = parser.add_subparsers(dest="command", required=True)
    _add_generate_traffic_command(subparsers)
    _add_watch_requests_command(subparsers)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the Cooler admin CLI.

    Args:
        argv: Optional argument vector.

    Returns:
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    settings = get_settings()
    setup_logging(args.log_level or settings.log_level, settings.log_format)
    if args.command == "generate-traffic":
        return _run_generate_traffic_command(args)
    if args.command == "watch-requests":
        return _run_watch_requests_command(args)
    parser.error(f"Unsupported command: {args.command}")
    return 2


def _add_generate_traffic_command(subparsers: argparse._SubParsersAction) -> None:
    parser = subparsers.add_parser(
        "generate-traffic", help="POST synthetic product submissions to the Cooler API",
    )
    parser.add_argument("--count", type=int, default=1, help="Number of submissions")
    parser.add_argument(
        "--interval", type=float, default=0.0,
        help="Seconds to wait between submissions",
    )
    parser.add_argument("--api-url", help="Override TRAFFIC_API_URL")
    parser.add_argument("--log-path", help="Override TRAFFIC_LOG_PATH")


def _add_watch_requests_command(subparsers: argparse._SubParsersAction) -> None:
    parser = subparsers.add_parser(
        "watch-requests", help="Poll recent API requests and print metrics",
    )
    parser.add_argument(
        "--interval", type=float, default=DEFAULT_WATCH_INTERVAL_SECONDS,
        help="Seconds between polls",
    )
    parser.add_argument(
        "--iterations", type=int, default=None,
        help="Stop after this many polls (default: run until interrupted)",
    )
    parser.add_argument("--limit", type=int, default=DEFAULT_WATCH_LIMIT)
    parser.add_argument("--user-id", help="Watch a single customer's requests")


def _run_generate_traffic_command(args: argparse.Namespace) -> int:
    """Send --count submissions, sleeping --interval between them.

    Returns:
        0 when every submission got a 2xx, 1 otherwise.
    """
    settings = get_settings()
    api_url = args.api_url or settings.traffic_api_url
    log_path = Path(args.log_path or settings.traffic_log_path)
    failures = 0
    with httpx.Client(timeout=settings.upstream_timeout_seconds) as client:
        for index in range(args.count):
            if index and args.interval > 0:
                time.sleep(args.interval)
            result = send_submission(client, api_url, settings.traffic_api_key, log_path)
            status = result.status_code if result.status_code is not None else "error"
            print(
                f"{result.product_name}  price={result.price}  status={status}  "
                f"time={result.elapsed_seconds:.3f}s"
            )
            if not result.ok:
                failures += 1
    return 1 if failures else 0


def _run_watch_requests_command(args: argparse.Namespace) -> int:
    try:
        asyncio.run(_watch_requests(args))
    except KeyboardInterrupt:
        return 0
    return 0


async def _watch_requests(args: argparse.Namespace) -> None:
    settings = get_settings()
    upstream = CoolerApiClient(
        settings.upstream_api_url,
        settings.upstream_admin_token,
        timeout_seconds=settings.upstream_timeout_seconds,
    )
    try:
        poll = 0
        while args.iterations is None or poll < args.iterations:
            if poll:
                await asyncio.sleep(args.interval)
            poll += 1
            try:
                data = await fetch_recent_requests(upstream, args.limit, args.user_id)
            except CoolerAdminError as e:
                print(f"[poll {poll}] {e.message}")
                continue
            requests = data if isinstance(data, list) else []
            metrics = compute_request_metrics(requests)
            print(f"[poll {poll}] {json.dumps(metrics)}")
    finally:
        await upstream.aclose()


if __name__ == "__main__":
    raise SystemExit(main())
