"""Asset model - shared catalog of priced instruments."""

from sqlalchemy import Column, DateTime, String, UniqueConstraint
from sqlalchemy.orm import relationship

from database import Base
from models.utils import generate_uuid, utc_now


class Asset(Base):
    """A catalog entry that transactions can reference.

    The ``provider`` + ``api_id`` pair tells the price service where to
    look up a live quote. Assets are shared by all wallets.
    """

    __tablename__ = "assets"
    __table_args__ = (
        UniqueConstraint("provider", "api_id", "type", name="uix_asset_provider_api_id_type"),
    )

    id = Column(String(36), primary_key=True, default=generate_uuid)
    type = Column(String, nullable=False)  # AssetType
    symbol = Column(String, nullable=False, index=True)
    name = Column(String, nullable=False)
    provider = Column(String, nullable=False)  # PriceProvider
    api_id = Column(String, nullable=True)  # e.g. "bitcoin" or "AAPL"
    exchange = Column(String, nullable=True)
    created_at = Column(DateTime, default=utc_now)
    updated_at = Column(
        DateTime,
        default=utc_now,
        onupdate=utc_now,
    )

    # Relationships
    transactions = relationship("Transaction", back_populates="asset")
