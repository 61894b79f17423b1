"""Pydantic schemas for the live prices endpoint."""

from pydantic import BaseModel


class PriceResult(BaseModel):
    asset_id: str
    vs: str
    price: float
    source: str


class PricesResponse(BaseModel):
    vs: str
    results: list[PriceResult]
