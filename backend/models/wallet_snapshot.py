"""WalletSnapshot model - append-only observations of a wallet's value."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import relationship

from database import Base
from models.utils import utc_now


class WalletSnapshot(Base):
    """A wallet's total value at one moment, tagged with why it was taken.

    Rows are never updated or deleted individually. The integer primary
    key follows insertion order and breaks ties between rows that share a
    ``created_at``. Several snapshots may fall on one calendar day; charts
    use the last one.
    """

    __tablename__ = "wallet_snapshots"

    id = Column(Integer, primary_key=True, autoincrement=True)
    wallet_id = Column(
        String(36), ForeignKey("wallets.id", ondelete="CASCADE"), nullable=False, index=True
    )
    value = Column(Numeric(18, 2), nullable=False)
    currency = Column(String(3), nullable=False)
    reason = Column(String, nullable=False)  # SnapshotReason
    created_at = Column(
        DateTime, nullable=False, index=True, default=utc_now
    )

    # Relationships
    wallet = relationship("Wallet", back_populates="snapshots")
