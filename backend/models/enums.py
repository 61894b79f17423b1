"""String enums shared by models, schemas, and services.

Values are stored as plain strings in the database.
"""

from enum import Enum


class AssetType(str, Enum):
    """Market category of a catalog asset."""

    CRYPTO = "CRYPTO"
    STOCK = "STOCK"
    ETF = "ETF"
    CASH = "CASH"


class PriceProvider(str, Enum):
    """Upstream quote source an asset is bound to."""

    COINGECKO = "COINGECKO"
    TWELVEDATA = "TWELVEDATA"
    MANUAL = "MANUAL"


class TransactionType(str, Enum):
    BUY = "BUY"
    SELL = "SELL"


class WalletAssetKind(str, Enum):
    """MAIN rows mirror a priced catalog asset; OTHER rows carry a manual value."""

    MAIN = "MAIN"
    OTHER = "OTHER"


class SnapshotReason(str, Enum):
    """Why a wallet snapshot was taken."""

    TX_ADD = "TX_ADD"
    TX_EDIT = "TX_EDIT"
    TX_DELETE = "TX_DELETE"
    EOD = "EOD"


class QuoteCurrency(str, Enum):
    EUR = "EUR"
    USD = "USD"
