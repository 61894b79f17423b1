"""Wallet model - a user's container for transactions and manual assets."""

from sqlalchemy import Column, DateTime, String
from sqlalchemy.orm import relationship

from database import Base
from models.utils import generate_uuid, utc_now


class Wallet(Base):
    """A named wallet owned by a single user.

    Deleting a wallet removes its transactions, wallet assets, and
    snapshots.
    """

    __tablename__ = "wallets"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    user_id = Column(String, nullable=False, index=True)
    name = Column(String, nullable=False)
    currency = Column(String(3), nullable=False, default="EUR")  # QuoteCurrency
    created_at = Column(DateTime, default=utc_now)
    updated_at = Column(
        DateTime,
        default=utc_now,
        onupdate=utc_now,
    )

    # Relationships
    transactions = relationship(
        "Transaction", back_populates="wallet",
        cascade="all, delete-orphan", passive_deletes=True,
    )
    assets = relationship(
        "WalletAsset", back_populates="wallet",
        cascade="all, delete-orphan", passive_deletes=True,
    )
    snapshots = relationship(
        "WalletSnapshot", back_populates="wallet",
        cascade="all, delete-orphan", passive_deletes=True,
    )
