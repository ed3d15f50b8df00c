"""Traffic Generator — synthetic product submissions for exercising the upstream API.

Invariants:
    - One product per submission; price in [10, 1009]
    - externalId is a fresh uuid4 per product
    - Descriptions and postal codes drawn from the fixed sample lists below
    - Every attempt (success or failure) appends one line to the traffic log
"""

import logging
import random
import time
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path

import httpx

logger = logging.getLogger(__name__)

FOOTPRINT_PRODUCTS_PATH = "/v2/footprint/products"

SAMPLE_DESCRIPTIONS = (
    "Automated test traffic - Electronics",
    "Test product for monitoring - Clothing",
    "Sample item for API testing - Home & Garden",
    "Mock product data - Sports & Outdoors",
    "Test traffic generation - Books",
    "Monitoring test item - Automotive",
    "API test product - Health & Beauty",
)

SAMPLE_POSTAL_CODES = ("02062", "10001", "90210", "60601", "30309", "98101", "02101")


@dataclass(frozen=True)
class TrafficResult:
    product_name: str
    price: int
    status_code: int | None
    elapsed_seconds: float
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.status_code is not None and 200 <= self.status_code < 300


def build_product(rng: random.Random | None = None, now: float | None = None) -> dict:
    """One synthetic footprint product item."""
    rng = rng or random.Random()
    timestamp = int(now if now is not None else time.time())
    return {
        "productPrice": rng.randint(10, 1009),
        "productName": f"Test Product {timestamp}",
        "productDescription": rng.choice(SAMPLE_DESCRIPTIONS),
        "postalCode": rng.choice(SAMPLE_POSTAL_CODES),
        "newProduct": True,
        "externalId": str(uuid.UUID(int=rng.getrandbits(128), version=4)),
    }


def build_submission(rng: random.Random | None = None, now: float | None = None) -> dict:
    return {"items": [build_product(rng, now)]}


def _append_log(log_path: Path, line: str) -> None:
    log_path.parent.mkdir(parents=True, exist_ok=True)
    with log_path.open("a", encoding="utf-8") as fh:
        fh.write(line + "\n")


def send_submission(
    client: httpx.Client,
    api_url: str,
    api_key: str,
    log_path: Path,
    rng: random.Random | None = None,
) -> TrafficResult:
    """POST one synthetic submission and record the outcome in the traffic log."""
    body = build_submission(rng)
    product = body["items"][0]
    _append_log(
        log_path,
        f"{datetime.now(timezone.utc).isoformat()}: Generating test traffic - "
        f"Product: {product['productName']}, Price: {product['productPrice']}",
    )

    start = time.monotonic()
    try:
        response = client.post(
            f"{api_url.rstrip('/')}{FOOTPRINT_PRODUCTS_PATH}",
            json=body,
            headers={"accept": "application/json", "COOLER-API-KEY": api_key},
        )
    except httpx.HTTPError as e:
        elapsed = time.monotonic() - start
        logger.error(f"Traffic submission failed: {e!r}")
        _append_log(log_path, f"Error: {e}\nResponse Time: {elapsed:.3f}s\n---")
        return TrafficResult(
            product["productName"], product["productPrice"], None, elapsed, str(e),
        )

    elapsed = time.monotonic() - start
    _append_log(
        log_path,
        f"{response.text}\nResponse Time: {elapsed:.3f}s\n"
        f"HTTP Status: {response.status_code}\n---",
    )
    logger.info(
        f"Traffic submission {product['productName']} -> {response.status_code}",
        extra={"upstream_status": response.status_code,
               "duration_ms": int(elapsed * 1000)},
    )
    return TrafficResult(
        product["productName"], product["productPrice"],
        response.status_code, elapsed,
    )
