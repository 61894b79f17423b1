"""Pydantic schemas for the asset catalog."""

from typing import Optional

from pydantic import BaseModel, ConfigDict


class AssetResponse(BaseModel):
    """Schema for a catalog asset."""

    id: str
    type: str
    symbol: str
    name: str
    provider: str
    api_id: Optional[str] = None
    exchange: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)
