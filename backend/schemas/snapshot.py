"""Pydantic schemas for wallet snapshots and daily series."""

from datetime import datetime

from pydantic import BaseModel


class SnapshotResponse(BaseModel):
    """A stored snapshot; ``date`` is its UTC timestamp."""

    id: int
    date: datetime
    value: float
    currency: str
    reason: str


class ValuePoint(BaseModel):
    """A single day/value data point of a carried-forward series."""

    date: str
    value: float


class WalletSeriesResponse(BaseModel):
    wallet_id: str
    currency: str
    days: int
    data_points: list[ValuePoint]
