"""Asset catalog lookups, search, and seeding upserts."""

import logging
from typing import Iterable, Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from models import Asset, AssetType, PriceProvider

logger = logging.getLogger(__name__)

DEFAULT_SEARCH_LIMIT = 10
MAX_SEARCH_LIMIT = 20

_SEARCHABLE_TYPES = (AssetType.CRYPTO.value, AssetType.STOCK.value, AssetType.ETF.value)
_PRICED_PROVIDERS = (PriceProvider.COINGECKO.value, PriceProvider.TWELVEDATA.value)


def is_price_enabled(asset: Asset) -> bool:
    """Whether an asset can be priced live (has a provider id and is not MANUAL)."""
    return bool(asset.api_id) and asset.provider != PriceProvider.MANUAL.value


class AssetService:
    """Service for the shared asset catalog."""

    @staticmethod
    def get_asset(db: Session, asset_id: str) -> Asset | None:
        return db.query(Asset).filter(Asset.id == asset_id).first()

    @staticmethod
    def list_assets_by_ids(db: Session, ids: Iterable[str]) -> list[Asset]:
        """Load catalog rows for the given ids; unknown ids are ignored."""
        unique_ids = list(dict.fromkeys(i for i in ids if i))
        if not unique_ids:
            return []
        return db.query(Asset).filter(Asset.id.in_(unique_ids)).all()

    @staticmethod
    def search_assets(
        db: Session,
        query: str,
        types: Optional[list[str]] = None,
        limit: Optional[int] = None,
    ) -> list[Asset]:
        """Search price-enabled catalog assets.

        Matches a symbol prefix or a name substring, case-insensitively.
        An empty query returns nothing.

        Args:
            db: Database session
            query: Search text
            types: Asset types to include (default CRYPTO, STOCK, ETF)
            limit: Max rows, capped at MAX_SEARCH_LIMIT

        Returns:
            Matching assets ordered by symbol
        """
        q = (query or "").strip()
        if not q:
            return []

        wanted = [t.strip().upper() for t in (types or []) if t and t.strip()]
        if not wanted:
            wanted = list(_SEARCHABLE_TYPES)
        limit = min(limit or DEFAULT_SEARCH_LIMIT, MAX_SEARCH_LIMIT)

        return (
            db.query(Asset)
            .filter(
                Asset.type.in_(wanted),
                Asset.provider.in_(_PRICED_PROVIDERS),
                Asset.api_id.isnot(None),
                or_(
                    Asset.symbol.istartswith(q, autoescape=True),
                    Asset.name.icontains(q, autoescape=True),
                ),
            )
            .order_by(Asset.symbol.asc())
            .limit(limit)
            .all()
        )

    @staticmethod
    def upsert_asset(
        db: Session,
        *,
        type: str,
        symbol: str,
        name: str,
        provider: str,
        api_id: str,
        exchange: Optional[str] = None,
    ) -> tuple[Asset, bool]:
        """Insert or update a catalog asset keyed by (provider, api_id, type).

        A ticker listed both as a stock and as an ETF gets one row per type.

        Returns:
            Tuple of (asset, created). The caller commits.
        """
        asset = (
            db.query(Asset)
            .filter(
                Asset.provider == provider,
                Asset.api_id == api_id,
                Asset.type == type,
            )
            .first()
        )
        if asset is None:
            asset = Asset(
                type=type, symbol=symbol, name=name,
                provider=provider, api_id=api_id, exchange=exchange,
            )
            db.add(asset)
            db.flush()
            return asset, True

        asset.symbol = symbol
        asset.name = name
        asset.exchange = exchange
        return asset, False
