"""Wallet snapshot API endpoints."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from api.helpers import (
    ensure_daily_snapshot_quietly,
    get_analytics_service,
    get_owned_wallet_or_404,
    get_snapshot_service,
    series_response,
)
from config import settings
from database import get_db
from models import Wallet
from schemas.snapshot import SnapshotResponse, WalletSeriesResponse
from services.analytics_service import AnalyticsService
from services.snapshot_service import SnapshotService
from utils.money import money_float

router = APIRouter(prefix="/api/wallets/{wallet_id}/snapshots", tags=["snapshots"])

DEFAULT_LIMIT = 180
MIN_LIMIT = 10
MAX_LIMIT = 1000


def clamp_limit(limit: int) -> int:
    return min(max(limit, MIN_LIMIT), MAX_LIMIT)


@router.get("", response_model=list[SnapshotResponse])
def list_snapshots(
    limit: int = Query(DEFAULT_LIMIT, description="Clamped to 10..1000"),
    wallet: Wallet = Depends(get_owned_wallet_or_404),
    snapshot_service: SnapshotService = Depends(get_snapshot_service),
    db: Session = Depends(get_db),
):
    """Raw snapshots for the value chart, oldest first."""
    ensure_daily_snapshot_quietly(snapshot_service, db, wallet.id)
    rows = snapshot_service.list_snapshots(db, wallet.id, limit=clamp_limit(limit))
    return [
        {
            "id": row.id,
            "date": row.created_at,
            "value": money_float(row.value),
            "currency": row.currency,
            "reason": row.reason,
        }
        for row in rows
    ]


@router.get("/daily", response_model=WalletSeriesResponse)
def get_daily_series(
    days: int = Query(
        settings.ANALYTICS_WINDOW_DAYS, ge=1, le=MAX_LIMIT, description="Window length in days"
    ),
    wallet: Wallet = Depends(get_owned_wallet_or_404),
    analytics_service: AnalyticsService = Depends(get_analytics_service),
    db: Session = Depends(get_db),
):
    """One carried-forward value per local day for this wallet."""
    series = analytics_service.get_wallet_series(db, wallet.id, days)
    return {
        "wallet_id": wallet.id,
        "currency": wallet.currency,
        "days": days,
        "data_points": series_response(series),
    }
