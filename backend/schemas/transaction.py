"""Pydantic schemas for ledger transactions."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict

from schemas.asset import AssetResponse


class TransactionCreate(BaseModel):
    """Schema for appending a BUY or SELL.

    Values are checked by TransactionService; missing or non-positive
    amounts answer 400.
    """

    type: str = ""
    asset_id: Optional[str] = None
    quantity: Optional[Decimal] = None
    price_per_unit: Optional[Decimal] = None
    executed_at: Optional[datetime] = None
    note: Optional[str] = None


class TransactionUpdate(BaseModel):
    """Schema for editing quantity and unit price."""

    quantity: Optional[Decimal] = None
    price_per_unit: Optional[Decimal] = None


class TransactionResponse(BaseModel):
    id: str
    wallet_id: str
    asset_id: Optional[str] = None
    type: str
    quantity: Decimal
    price_per_unit: Decimal
    executed_at: datetime
    note: Optional[str] = None
    asset: Optional[AssetResponse] = None

    model_config = ConfigDict(from_attributes=True)
