"""Ledger service: validated BUY/SELL transaction CRUD."""

import logging
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.orm import Session

from models import Transaction, TransactionType
from services.asset_service import AssetService
from utils.money import to_decimal

logger = logging.getLogger(__name__)


def parse_transaction_type(value) -> TransactionType:
    """Raises ValueError for anything other than BUY or SELL."""
    try:
        return TransactionType(str(value).strip().upper())
    except ValueError:
        allowed = ", ".join(t.value for t in TransactionType)
        raise ValueError(f"Invalid type (allowed: {allowed})") from None


def validate_amounts(quantity, price_per_unit):
    """Check that quantity and unit price are finite and positive.

    Returns:
        Tuple of (quantity, price_per_unit) as Decimals

    Raises:
        ValueError: If either is missing, non-finite, or not > 0
    """
    qty = to_decimal(quantity)
    if qty is None or qty <= 0:
        raise ValueError("Quantity must be > 0")
    price = to_decimal(price_per_unit)
    if price is None or price <= 0:
        raise ValueError("Price per unit must be > 0")
    return qty, price


class TransactionService:
    """Service for a wallet's append-mostly transaction ledger.

    Mutations commit immediately; callers record a wallet snapshot
    afterwards in a separate commit.
    """

    @staticmethod
    def list_transactions(db: Session, wallet_id: str) -> list[Transaction]:
        """All ledger rows of a wallet, oldest first."""
        return (
            db.query(Transaction)
            .filter(Transaction.wallet_id == wallet_id)
            .order_by(Transaction.executed_at.asc(), Transaction.created_at.asc())
            .all()
        )

    @staticmethod
    def get_transaction(db: Session, wallet_id: str, transaction_id: str) -> Transaction | None:
        return (
            db.query(Transaction)
            .filter(Transaction.id == transaction_id, Transaction.wallet_id == wallet_id)
            .first()
        )

    @staticmethod
    def create_transaction(
        db: Session,
        wallet_id: str,
        *,
        type,
        asset_id: Optional[str],
        quantity,
        price_per_unit,
        executed_at: Optional[datetime] = None,
        note: Optional[str] = None,
    ) -> Transaction:
        """Validate and append a ledger entry.

        Raises:
            ValueError: On an invalid type, missing asset id, or
                non-positive quantity/price
            LookupError: If the asset does not exist in the catalog
        """
        tx_type = parse_transaction_type(type)
        if not asset_id:
            raise ValueError("Missing asset_id")
        qty, price = validate_amounts(quantity, price_per_unit)
        if AssetService.get_asset(db, asset_id) is None:
            raise LookupError("Asset not found")

        tx = Transaction(
            wallet_id=wallet_id,
            asset_id=asset_id,
            type=tx_type.value,
            quantity=qty,
            price_per_unit=price,
            executed_at=executed_at or datetime.now(timezone.utc),
            note=note,
        )
        db.add(tx)
        db.commit()
        db.refresh(tx)
        logger.info(
            "Transaction created: %s %s of asset %s in wallet %s",
            tx.type, qty, asset_id, wallet_id,
        )
        return tx

    @staticmethod
    def update_transaction(
        db: Session,
        wallet_id: str,
        transaction_id: str,
        *,
        quantity,
        price_per_unit,
    ) -> Transaction | None:
        """Change quantity and unit price of an existing entry.

        Returns:
            The updated transaction, or None if it is not in this wallet
        """
        qty, price = validate_amounts(quantity, price_per_unit)
        tx = TransactionService.get_transaction(db, wallet_id, transaction_id)
        if tx is None:
            return None
        tx.quantity = qty
        tx.price_per_unit = price
        db.commit()
        db.refresh(tx)
        logger.info("Transaction updated: id=%s", transaction_id)
        return tx

    @staticmethod
    def delete_transaction(db: Session, wallet_id: str, transaction_id: str) -> bool:
        tx = TransactionService.get_transaction(db, wallet_id, transaction_id)
        if tx is None:
            return False
        db.delete(tx)
        db.commit()
        logger.info("Transaction deleted: id=%s", transaction_id)
        return True
