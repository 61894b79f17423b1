"""Asset catalog API endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from api.helpers import get_current_user_id
from database import get_db
from schemas.asset import AssetResponse
from services.asset_service import DEFAULT_SEARCH_LIMIT, AssetService

router = APIRouter(prefix="/api/catalog", tags=["catalog"])


@router.get("/assets", response_model=list[AssetResponse])
def search_assets(
    q: str = Query("", description="Symbol prefix or name fragment"),
    types: Optional[str] = Query(None, description="Comma-separated, e.g. CRYPTO,ETF"),
    limit: int = Query(DEFAULT_SEARCH_LIMIT, ge=1),
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Search price-enabled assets for the add-asset picker."""
    type_list = [t for t in (types or "").split(",") if t.strip()]
    return AssetService.search_assets(db, q, type_list, limit)
