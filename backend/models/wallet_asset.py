"""WalletAsset model - MAIN position rows and manually valued OTHER items."""

from sqlalchemy import Column, DateTime, ForeignKey, Numeric, String
from sqlalchemy.orm import relationship

from database import Base
from models.utils import generate_uuid, utc_now


class WalletAsset(Base):
    """An item shown on a wallet's asset list.

    OTHER rows (savings, debts, real estate) have no market binding and
    carry a signed ``value``. MAIN rows point at a catalog asset and track
    the amount added through the "add asset" flow; their value always
    comes from the transaction ledger.
    """

    __tablename__ = "wallet_assets"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    wallet_id = Column(
        String(36), ForeignKey("wallets.id", ondelete="CASCADE"), nullable=False, index=True
    )
    kind = Column(String, nullable=False, default="OTHER")  # WalletAssetKind
    name = Column(String, nullable=False)
    amount = Column(Numeric(28, 12), nullable=True)  # MAIN only
    value = Column(Numeric(18, 2), nullable=True)  # OTHER only, may be negative
    asset_id = Column(String(36), ForeignKey("assets.id"), nullable=True)
    created_at = Column(DateTime, default=utc_now)
    updated_at = Column(
        DateTime,
        default=utc_now,
        onupdate=utc_now,
    )

    # Relationships
    wallet = relationship("Wallet", back_populates="assets")
    asset = relationship("Asset")
