"""Pydantic schemas for wallet assets (MAIN and OTHER rows)."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict

from schemas.asset import AssetResponse


class WalletAssetCreate(BaseModel):
    """Schema for adding a wallet asset.

    MAIN uses ``asset_id``, ``amount`` and ``price_per_unit`` and records
    a BUY. OTHER uses ``name`` and a signed ``value``.
    """

    kind: Optional[str] = None
    asset_id: Optional[str] = None
    amount: Optional[Decimal] = None
    price_per_unit: Optional[Decimal] = None
    name: Optional[str] = None
    value: Optional[Decimal] = None


class WalletAssetResponse(BaseModel):
    id: str
    wallet_id: str
    kind: str
    name: str
    amount: Optional[Decimal] = None
    value: Optional[Decimal] = None
    asset_id: Optional[str] = None
    asset: Optional[AssetResponse] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
