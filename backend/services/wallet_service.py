"""Wallet management service."""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from models import Wallet

logger = logging.getLogger(__name__)

MIN_NAME_LENGTH = 3


def validate_wallet_fields(name: Optional[str], currency: Optional[str]) -> tuple[str, str]:
    """Normalize and check wallet name and currency.

    Returns:
        Tuple of (trimmed name, upper-cased currency code)

    Raises:
        ValueError: If the name is too short or the currency is missing
    """
    name = (name or "").strip()
    currency = (currency or "").strip().upper()
    if len(name) < MIN_NAME_LENGTH:
        raise ValueError(f"Name must have at least {MIN_NAME_LENGTH} characters.")
    if not currency:
        raise ValueError("Currency is required.")
    if len(currency) != 3 or not currency.isalpha():
        raise ValueError("Currency must be a 3-letter code.")
    return name, currency


class WalletService:
    """Service for wallet CRUD, always scoped to the owning user."""

    @staticmethod
    def list_wallets(db: Session, user_id: str) -> list[Wallet]:
        return (
            db.query(Wallet)
            .filter(Wallet.user_id == user_id)
            .order_by(Wallet.created_at.asc(), Wallet.id.asc())
            .all()
        )

    @staticmethod
    def get_wallet(db: Session, user_id: str, wallet_id: str) -> Wallet | None:
        """Get a wallet by ID if it belongs to ``user_id``."""
        return (
            db.query(Wallet)
            .filter(Wallet.id == wallet_id, Wallet.user_id == user_id)
            .first()
        )

    @staticmethod
    def create_wallet(db: Session, user_id: str, name: str, currency: str) -> Wallet:
        name, currency = validate_wallet_fields(name, currency)
        wallet = Wallet(user_id=user_id, name=name, currency=currency)
        db.add(wallet)
        db.commit()
        db.refresh(wallet)
        logger.info("Wallet created: %s (id=%s)", wallet.name, wallet.id)
        return wallet

    @staticmethod
    def update_wallet(db: Session, wallet: Wallet, name: str, currency: str) -> Wallet:
        """Rename a wallet and/or change its currency.

        Existing snapshots keep the currency they were recorded in.
        """
        name, currency = validate_wallet_fields(name, currency)
        wallet.name = name
        wallet.currency = currency
        db.commit()
        db.refresh(wallet)
        logger.info("Wallet updated: %s (id=%s)", wallet.name, wallet.id)
        return wallet

    @staticmethod
    def delete_wallet(db: Session, wallet: Wallet) -> None:
        """Delete a wallet with its transactions, wallet assets and snapshots."""
        wallet_id = wallet.id
        db.delete(wallet)
        db.commit()
        logger.info("Wallet deleted: id=%s", wallet_id)
