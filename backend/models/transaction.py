"""Transaction model - one BUY/SELL entry in a wallet's ledger."""

from sqlalchemy import Column, DateTime, ForeignKey, Numeric, String, Text
from sqlalchemy.orm import relationship

from database import Base
from models.utils import generate_uuid, utc_now


class Transaction(Base):
    """A ledger entry against a catalog asset.

    The ledger is the only source of truth for holdings: net quantity per
    asset is the signed sum of BUY and SELL quantities.
    """

    __tablename__ = "transactions"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    wallet_id = Column(
        String(36), ForeignKey("wallets.id", ondelete="CASCADE"), nullable=False, index=True
    )
    asset_id = Column(
        String(36), ForeignKey("assets.id", ondelete="SET NULL"), nullable=True, index=True
    )
    type = Column(String, nullable=False)  # TransactionType
    quantity = Column(Numeric(28, 12), nullable=False)
    price_per_unit = Column(Numeric(28, 10), nullable=False)
    executed_at = Column(DateTime, nullable=False, default=utc_now)
    note = Column(Text, nullable=True)
    created_at = Column(DateTime, default=utc_now)

    # Relationships
    wallet = relationship("Wallet", back_populates="transactions")
    asset = relationship("Asset", back_populates="transactions")
