#!/usr/bin/env python3
"""Seed the asset catalog with provider ids used for live prices.

- Crypto: CoinGecko top-N coins by market cap (no API key required)
- Stocks / ETFs: TwelveData instrument lists (requires TWELVEDATA_API_KEY)

Rows are upserted by (provider, api_id, type), so the script can be re-run to
refresh names and exchanges.

Usage:
    python -m scripts.seed_assets                      # crypto only
    python -m scripts.seed_assets --stocks --etfs      # plus TwelveData lists
    python -m scripts.seed_assets --top-n 500 --exchanges NASDAQ,NYSE
"""

import argparse
import logging
import sys
import time
from pathlib import Path
from typing import Any, Callable, Optional

import httpx

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from config import settings
from database import get_session_local, init_db
from logging_config import setup_logging
from models import AssetType, PriceProvider
from services.asset_service import AssetService

logger = logging.getLogger(__name__)

COINGECKO_BASE_URL = "https://api.coingecko.com/api/v3"
TWELVEDATA_BASE_URL = "https://api.twelvedata.com"
COINGECKO_PAGE_SIZE = 250
COINGECKO_MAX_COINS = 5000

MAX_ATTEMPTS = 6
MAX_BACKOFF_SECONDS = 30.0


def _retry_delay(response: httpx.Response, attempt: int) -> float:
    """Longer of Retry-After and exponential backoff, capped."""
    backoff = min(MAX_BACKOFF_SECONDS, 2.0 ** (attempt - 1))
    try:
        retry_after = float(response.headers.get("retry-after", "0"))
    except ValueError:
        retry_after = 0.0
    return max(retry_after, backoff)


def fetch_json(
    client: httpx.Client,
    path: str,
    params: dict[str, Any],
    sleep: Callable[[float], None] = time.sleep,
) -> Any:
    """GET ``path`` and decode JSON, retrying 429 and 5xx responses.

    Raises:
        httpx.HTTPStatusError: On a non-retriable error status, or when
            retries are exhausted.
    """
    for attempt in range(1, MAX_ATTEMPTS + 1):
        response = client.get(path, params=params)
        retriable = response.status_code == 429 or 500 <= response.status_code <= 599
        if retriable and attempt < MAX_ATTEMPTS:
            delay = _retry_delay(response, attempt)
            logger.info(
                "HTTP %d for %s, retrying in %.0fs (attempt %d)",
                response.status_code, path, delay, attempt,
            )
            sleep(delay)
            continue
        response.raise_for_status()
        return response.json()


def seed_coingecko(db, client: httpx.Client, top_n: int, sleep=time.sleep) -> int:
    """Upsert the top ``top_n`` coins by market cap. Returns rows written."""
    top_n = min(top_n, COINGECKO_MAX_COINS)
    pages = -(-top_n // COINGECKO_PAGE_SIZE)
    written = 0

    for page in range(1, pages + 1):
        rows = fetch_json(
            client,
            "/coins/markets",
            {
                "vs_currency": "usd",
                "order": "market_cap_desc",
                "per_page": COINGECKO_PAGE_SIZE,
                "page": page,
                "sparkline": "false",
            },
            sleep=sleep,
        )
        if not isinstance(rows, list) or not rows:
            break

        for row in rows:
            if written >= top_n:
                break
            api_id = str(row.get("id") or "").strip()
            symbol = str(row.get("symbol") or "").strip().upper()
            if not api_id or not symbol:
                continue
            AssetService.upsert_asset(
                db,
                type=AssetType.CRYPTO.value,
                symbol=symbol,
                name=str(row.get("name") or symbol),
                provider=PriceProvider.COINGECKO.value,
                api_id=api_id,
            )
            written += 1

        db.commit()
        logger.info("CoinGecko page %d/%d (total: %d)", page, pages, written)
        if written >= top_n:
            break

    return written


def seed_twelvedata(
    db,
    client: httpx.Client,
    api_key: str,
    asset_type: AssetType,
    exchanges: list[str],
    max_rows: int,
    sleep=time.sleep,
) -> int:
    """Upsert TwelveData stocks or ETFs listed on ``exchanges``.

    The ticker symbol doubles as the provider id. Returns rows written.
    """
    endpoint = "/etf" if asset_type == AssetType.ETF else "/stocks"
    payload = fetch_json(client, endpoint, {"apikey": api_key}, sleep=sleep)
    data = payload.get("data") if isinstance(payload, dict) else None
    if not isinstance(data, list):
        logger.warning("TwelveData %s: unexpected payload, nothing seeded", endpoint)
        return 0

    allowed = set(exchanges)
    written = 0
    for row in data:
        if written >= max_rows:
            break
        symbol = str(row.get("symbol") or "").strip()
        exchange = str(row.get("exchange") or "").strip()
        if not symbol:
            continue
        if exchange and allowed and exchange not in allowed:
            continue
        AssetService.upsert_asset(
            db,
            type=asset_type.value,
            symbol=symbol,
            name=str(row.get("name") or symbol).strip(),
            provider=PriceProvider.TWELVEDATA.value,
            api_id=symbol,
            exchange=exchange or None,
        )
        written += 1

    db.commit()
    return written


def seed(
    top_n: int,
    stocks: bool,
    etfs: bool,
    exchanges: list[str],
    max_rows: int,
    api_key: Optional[str],
) -> None:
    init_db()
    SessionLocal = get_session_local()
    db = SessionLocal()
    try:
        with httpx.Client(base_url=COINGECKO_BASE_URL, timeout=30.0) as client:
            count = seed_coingecko(db, client, top_n)
        print(f"CoinGecko: {count} coins")

        wanted = [t for t, on in ((AssetType.STOCK, stocks), (AssetType.ETF, etfs)) if on]
        if wanted and not api_key:
            print("TwelveData: TWELVEDATA_API_KEY missing, skipping stocks/ETFs")
            wanted = []
        with httpx.Client(base_url=TWELVEDATA_BASE_URL, timeout=60.0) as client:
            for asset_type in wanted:
                count = seed_twelvedata(db, client, api_key, asset_type, exchanges, max_rows)
                print(f"TwelveData {asset_type.value}: {count} instruments")
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def main():
    parser = argparse.ArgumentParser(description="Seed the asset catalog")
    parser.add_argument("--top-n", type=int, default=2000, help="CoinGecko coins to seed")
    parser.add_argument("--stocks", action="store_true", help="Seed TwelveData stocks")
    parser.add_argument("--etfs", action="store_true", help="Seed TwelveData ETFs")
    parser.add_argument(
        "--exchanges",
        default="NASDAQ,NYSE,AMEX",
        help="Comma-separated exchanges to keep for stocks/ETFs",
    )
    parser.add_argument("--max", type=int, default=5000, help="Max TwelveData rows per list")
    parser.add_argument("--verbose", action="store_true", help="Log at DEBUG level")
    args = parser.parse_args()

    setup_logging("DEBUG" if args.verbose else None)
    seed(
        top_n=args.top_n,
        stocks=args.stocks,
        etfs=args.etfs,
        exchanges=[e.strip() for e in args.exchanges.split(",") if e.strip()],
        max_rows=args.max,
        api_key=settings.TWELVEDATA_API_KEY or None,
    )


if __name__ == "__main__":
    main()
