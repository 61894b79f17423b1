"""Wallet asset service: MAIN positions added from the catalog and OTHER items."""

import logging
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.orm import Session

from models import Transaction, TransactionType, WalletAsset, WalletAssetKind
from services.asset_service import AssetService, is_price_enabled
from utils.money import ZERO, to_decimal

logger = logging.getLogger(__name__)

ADD_ASSET_NOTE = "Add asset"
MIN_OTHER_NAME_LENGTH = 2


def parse_kind(value: Optional[str]) -> WalletAssetKind:
    """OTHER when asked for explicitly, MAIN otherwise."""
    if (value or "").strip().upper() == WalletAssetKind.OTHER.value:
        return WalletAssetKind.OTHER
    return WalletAssetKind.MAIN


class WalletAssetService:
    """Service for the rows shown on a wallet's asset list."""

    @staticmethod
    def list_assets(db: Session, wallet_id: str, kind: WalletAssetKind) -> list[WalletAsset]:
        """Wallet assets of one kind, newest first."""
        return (
            db.query(WalletAsset)
            .filter(WalletAsset.wallet_id == wallet_id, WalletAsset.kind == kind.value)
            .order_by(WalletAsset.created_at.desc())
            .all()
        )

    @staticmethod
    def list_other_assets(db: Session, wallet_id: str) -> list[WalletAsset]:
        return WalletAssetService.list_assets(db, wallet_id, WalletAssetKind.OTHER)

    @staticmethod
    def add_main_asset(
        db: Session,
        wallet_id: str,
        asset_id: Optional[str],
        amount,
        price_per_unit,
    ) -> WalletAsset:
        """Add a catalog asset to a wallet and record the purchase.

        If the wallet already has a MAIN row for the asset, its amount is
        increased; otherwise a new row is created. Either way a BUY
        transaction for ``amount`` at ``price_per_unit`` is appended to
        the ledger in the same commit. The ledger, not the MAIN row,
        drives valuation.

        Raises:
            ValueError: On a missing asset id, non-positive amount or
                price, or an asset that cannot be priced live
            LookupError: If the asset does not exist
        """
        asset_id = (asset_id or "").strip()
        if not asset_id:
            raise ValueError("Missing asset_id")
        qty = to_decimal(amount)
        if qty is None or qty <= 0:
            raise ValueError("Amount must be a positive number")
        price = to_decimal(price_per_unit)
        if price is None or price <= 0:
            raise ValueError("Purchase price must be a positive number")

        asset = AssetService.get_asset(db, asset_id)
        if asset is None:
            raise LookupError("Asset not found")
        if not is_price_enabled(asset):
            raise ValueError("Asset is not price-enabled")

        row = (
            db.query(WalletAsset)
            .filter(
                WalletAsset.wallet_id == wallet_id,
                WalletAsset.kind == WalletAssetKind.MAIN.value,
                WalletAsset.asset_id == asset.id,
            )
            .first()
        )
        if row is None:
            row = WalletAsset(
                wallet_id=wallet_id,
                kind=WalletAssetKind.MAIN.value,
                name=asset.symbol,
                asset_id=asset.id,
                amount=qty,
                value=ZERO,
            )
            db.add(row)
        else:
            row.amount = (to_decimal(row.amount) or ZERO) + qty
            row.name = asset.symbol

        db.add(
            Transaction(
                wallet_id=wallet_id,
                asset_id=asset.id,
                type=TransactionType.BUY.value,
                quantity=qty,
                price_per_unit=price,
                executed_at=datetime.now(timezone.utc),
                note=ADD_ASSET_NOTE,
            )
        )
        db.commit()
        db.refresh(row)
        logger.info("Added %s %s to wallet %s", qty, asset.symbol, wallet_id)
        return row

    @staticmethod
    def create_other_asset(db: Session, wallet_id: str, name: Optional[str], value) -> WalletAsset:
        """Create a manually valued item; negative values represent debts.

        Raises:
            ValueError: On a name shorter than two characters or a
                non-finite value
        """
        name = (name or "").strip()
        if len(name) < MIN_OTHER_NAME_LENGTH:
            raise ValueError("Name is required")
        amount = to_decimal(value)
        if amount is None:
            raise ValueError("Invalid value")

        row = WalletAsset(
            wallet_id=wallet_id,
            kind=WalletAssetKind.OTHER.value,
            name=name,
            amount=None,
            value=amount,
            asset_id=None,
        )
        db.add(row)
        db.commit()
        db.refresh(row)
        logger.info("Other asset created: %s (id=%s)", row.name, row.id)
        return row

    @staticmethod
    def delete_asset(db: Session, wallet_id: str, item_id: str) -> bool:
        """Delete a wallet asset row. The ledger is left untouched."""
        row = (
            db.query(WalletAsset)
            .filter(WalletAsset.id == item_id, WalletAsset.wallet_id == wallet_id)
            .first()
        )
        if row is None:
            return False
        db.delete(row)
        db.commit()
        logger.info("Wallet asset deleted: id=%s", item_id)
        return True
