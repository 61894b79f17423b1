"""SQLAlchemy ORM models."""

from .asset import Asset
from .enums import (
    AssetType,
    PriceProvider,
    QuoteCurrency,
    SnapshotReason,
    TransactionType,
    WalletAssetKind,
)
from .transaction import Transaction
from .utils import generate_uuid, utc_now
from .wallet import Wallet
from .wallet_asset import WalletAsset
from .wallet_snapshot import WalletSnapshot

__all__ = [
    "Asset",
    "AssetType",
    "PriceProvider",
    "QuoteCurrency",
    "SnapshotReason",
    "Transaction",
    "TransactionType",
    "Wallet",
    "WalletAsset",
    "WalletAssetKind",
    "WalletSnapshot",
    "generate_uuid",
    "utc_now",
]
