"""Live prices API endpoint."""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from api.helpers import get_price_service
from database import get_db
from schemas.price import PricesResponse
from services.asset_service import AssetService
from services.price_service import PriceService, normalize_vs_currency

router = APIRouter(prefix="/api/prices", tags=["prices"])


def split_csv(value: Optional[str]) -> list[str]:
    if not value:
        return []
    return [part.strip() for part in value.split(",") if part.strip()]


@router.get("", response_model=PricesResponse)
def get_prices(
    asset_ids: Optional[str] = Query(None, alias="assetIds", description="Comma-separated asset ids"),
    asset_id: Optional[str] = Query(None, alias="assetId"),
    vs: Optional[str] = Query(None, description="Quote currency: eur (default) or usd"),
    price_service: PriceService = Depends(get_price_service),
    db: Session = Depends(get_db),
):
    """Current prices for catalog assets.

    Assets that are unknown, not price-enabled, or that the provider
    could not price are left out of ``results``.
    """
    ids = list(dict.fromkeys(([asset_id] if asset_id else []) + split_csv(asset_ids)))
    if not ids:
        raise HTTPException(status_code=400, detail="Missing assetId(s)")

    quote = normalize_vs_currency(vs)
    assets = AssetService.list_assets_by_ids(db, ids)
    results = price_service.get_asset_prices(assets, quote)
    return {
        "vs": quote,
        "results": [
            {"asset_id": p.asset_id, "vs": p.vs, "price": float(p.price), "source": p.source}
            for p in results
        ],
    }
