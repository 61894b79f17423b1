"""Test fixtures and sample data."""
import pytest
from datetime import datetime, timezone
from decimal import Decimal

from models import Asset, Transaction, Wallet, WalletAsset, WalletSnapshot
from sqlalchemy.orm import Session

USER_ID = "user-1"
OTHER_USER_ID = "user-2"


def make_asset(
    db: Session,
    symbol: str,
    type: str = "CRYPTO",
    provider: str = "COINGECKO",
    api_id: str | None = None,
    name: str | None = None,
    exchange: str | None = None,
) -> Asset:
    """Create a catalog asset. ``api_id`` defaults to the lowercased symbol."""
    asset = Asset(
        type=type,
        symbol=symbol,
        name=name or symbol,
        provider=provider,
        api_id=api_id if api_id is not None else symbol.lower(),
        exchange=exchange,
    )
    db.add(asset)
    db.commit()
    db.refresh(asset)
    return asset


def make_wallet(
    db: Session, name: str = "Main wallet", currency: str = "EUR", user_id: str = USER_ID
) -> Wallet:
    wallet = Wallet(user_id=user_id, name=name, currency=currency)
    db.add(wallet)
    db.commit()
    db.refresh(wallet)
    return wallet


def add_transaction(
    db: Session,
    wallet: Wallet,
    asset: Asset | None,
    type: str,
    quantity,
    price_per_unit,
    executed_at: datetime | None = None,
) -> Transaction:
    """Insert a ledger row directly, bypassing validation."""
    tx = Transaction(
        wallet_id=wallet.id,
        asset_id=asset.id if asset is not None else None,
        type=type,
        quantity=Decimal(str(quantity)),
        price_per_unit=Decimal(str(price_per_unit)),
        executed_at=executed_at or datetime(2024, 1, 1, tzinfo=timezone.utc),
    )
    db.add(tx)
    db.commit()
    db.refresh(tx)
    return tx


def add_other_asset(db: Session, wallet: Wallet, name: str, value) -> WalletAsset:
    row = WalletAsset(wallet_id=wallet.id, kind="OTHER", name=name, value=Decimal(str(value)))
    db.add(row)
    db.commit()
    db.refresh(row)
    return row


def add_snapshot(
    db: Session,
    wallet: Wallet,
    value,
    created_at: datetime,
    reason: str = "EOD",
    currency: str | None = None,
) -> WalletSnapshot:
    snap = WalletSnapshot(
        wallet_id=wallet.id,
        value=Decimal(str(value)),
        currency=currency or wallet.currency,
        reason=reason,
        created_at=created_at,
    )
    db.add(snap)
    db.commit()
    db.refresh(snap)
    return snap


@pytest.fixture
def wallet(db: Session) -> Wallet:
    """An EUR wallet owned by USER_ID."""
    return make_wallet(db)


@pytest.fixture
def btc(db: Session) -> Asset:
    return make_asset(db, "BTC", api_id="bitcoin", name="Bitcoin")


@pytest.fixture
def eth(db: Session) -> Asset:
    return make_asset(db, "ETH", api_id="ethereum", name="Ethereum")


@pytest.fixture
def aapl(db: Session) -> Asset:
    return make_asset(
        db, "AAPL", type="STOCK", provider="TWELVEDATA", api_id="AAPL",
        name="Apple Inc", exchange="NASDAQ",
    )


@pytest.fixture
def vwce(db: Session) -> Asset:
    return make_asset(
        db, "VWCE", type="ETF", provider="TWELVEDATA", api_id="VWCE",
        name="Vanguard FTSE All-World", exchange="XETR",
    )


@pytest.fixture
def manual_asset(db: Session) -> Asset:
    """A catalog entry with no live price source."""
    return make_asset(db, "GOLD", type="CASH", provider="MANUAL", api_id=None, name="Gold bar")
