"""Analytics API endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from api.helpers import (
    allocation_response,
    get_analytics_service,
    get_current_user_id,
    series_response,
)
from config import settings
from database import get_db
from schemas.analytics import AnalyticsSummaryResponse
from services.analytics_service import AnalyticsService
from utils.money import money_float

router = APIRouter(prefix="/api/analytics", tags=["analytics"])


@router.get("/summary", response_model=AnalyticsSummaryResponse)
def get_summary(
    vs: Optional[str] = Query(None, description="Quote currency: eur (default) or usd"),
    days: int = Query(settings.ANALYTICS_WINDOW_DAYS, ge=1, le=1000),
    user_id: str = Depends(get_current_user_id),
    analytics_service: AnalyticsService = Depends(get_analytics_service),
    db: Session = Depends(get_db),
):
    """Portfolio totals, allocation and daily value series across all wallets."""
    summary = analytics_service.get_summary(db, user_id, vs, days)
    valuation = summary.valuation
    return {
        "quote_currency": summary.quote_currency,
        "current_total_value": money_float(valuation.current_total_value),
        "overall_pl": money_float(valuation.overall_pl),
        "invested": money_float(valuation.invested),
        "allocation": allocation_response(valuation),
        "time_series": series_response(summary.time_series),
        "updated_at": summary.updated_at,
    }
