"""Shared API helpers for route handlers.

Caller identity, ownership checks, service dependencies and response
builders used across multiple route files.
"""

import logging
from functools import lru_cache
from typing import Optional

from fastapi import Depends, Header, HTTPException
from sqlalchemy.orm import Session

from database import get_db
from models import Wallet
from services.analytics_service import AnalyticsService
from services.price_service import PriceService
from services.snapshot_service import SnapshotService
from services.valuation_service import ValuationService, ValuationSummary
from services.wallet_service import WalletService
from utils.money import money_float

logger = logging.getLogger(__name__)


def get_current_user_id(x_user_id: Optional[str] = Header(default=None)) -> str:
    """Read the caller's user id from the ``X-User-Id`` header.

    Sessions are issued by an upstream auth layer; this service only
    trusts the id it forwards.

    Raises:
        HTTPException: 401 if the header is missing or blank.
    """
    user_id = (x_user_id or "").strip()
    if not user_id:
        raise HTTPException(status_code=401, detail="Unauthorized")
    return user_id


def get_owned_wallet_or_404(
    wallet_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
) -> Wallet:
    """Resolve ``wallet_id`` for the caller; other users' wallets are 404."""
    wallet = WalletService.get_wallet(db, user_id, wallet_id)
    if wallet is None:
        raise HTTPException(status_code=404, detail="Wallet not found")
    return wallet


@lru_cache
def get_price_service() -> PriceService:
    """Process-wide PriceService so the price cache is shared by requests."""
    return PriceService()


def get_valuation_service(
    price_service: PriceService = Depends(get_price_service),
) -> ValuationService:
    return ValuationService(price_service)


def get_snapshot_service(
    valuation_service: ValuationService = Depends(get_valuation_service),
) -> SnapshotService:
    return SnapshotService(valuation_service)


def get_analytics_service(
    valuation_service: ValuationService = Depends(get_valuation_service),
) -> AnalyticsService:
    return AnalyticsService(valuation_service)


def allocation_response(summary: ValuationSummary) -> list[dict]:
    return [slice_.to_dict() for slice_ in summary.allocation]


def series_response(series: list) -> list[dict]:
    """Build ValuePoint-compatible dicts from (day key, value) pairs."""
    return [{"date": day, "value": money_float(value)} for day, value in series]


def ensure_daily_snapshot_quietly(
    snapshot_service: SnapshotService, db: Session, wallet_id: str
) -> None:
    """Take today's EOD snapshot if missing; a failure never fails the read."""
    try:
        snapshot_service.ensure_daily_snapshot(db, wallet_id)
    except Exception:
        db.rollback()
        logger.warning("Daily snapshot for wallet %s failed", wallet_id, exc_info=True)
