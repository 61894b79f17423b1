"""Pydantic schemas for wallets."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict


class WalletCreate(BaseModel):
    """Schema for creating a wallet.

    Length and currency rules are enforced by WalletService so that
    they answer 400 rather than 422.
    """

    name: str = ""
    currency: str = "EUR"


class WalletUpdate(BaseModel):
    """Schema for renaming a wallet or changing its currency."""

    name: Optional[str] = None
    currency: Optional[str] = None


class WalletResponse(BaseModel):
    id: str
    name: str
    currency: str
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
