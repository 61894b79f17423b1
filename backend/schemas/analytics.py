"""Pydantic schemas for valuation and analytics endpoints."""

from datetime import datetime

from pydantic import BaseModel

from schemas.snapshot import ValuePoint


class AllocationSliceResponse(BaseModel):
    name: str
    value: float
    percent: float


class WalletValuationResponse(BaseModel):
    """Live valuation of a single wallet."""

    wallet_id: str
    currency: str
    main_value: float
    other_value: float
    current_total_value: float
    invested: float
    overall_pl: float
    allocation: list[AllocationSliceResponse]
    priced_asset_count: int
    unpriced_asset_ids: list[str]


class AnalyticsSummaryResponse(BaseModel):
    """Dashboard summary across all of a user's wallets."""

    quote_currency: str
    current_total_value: float
    overall_pl: float
    invested: float
    allocation: list[AllocationSliceResponse]
    time_series: list[ValuePoint]
    updated_at: datetime
