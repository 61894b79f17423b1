"""Unit tests for SQLAlchemy models."""

from datetime import datetime, timezone
from decimal import Decimal

import pytest
from sqlalchemy.exc import IntegrityError

from models import Asset, Transaction, Wallet, WalletAsset, WalletSnapshot
from tests.fixtures import add_other_asset, add_snapshot, add_transaction, make_asset


def test_wallet_creation(wallet):
    """Test Wallet model defaults."""
    assert wallet.id
    assert wallet.currency == "EUR"
    assert wallet.created_at is not None
    assert wallet.updated_at is not None


def test_asset_creation(btc):
    assert btc.type == "CRYPTO"
    assert btc.provider == "COINGECKO"
    assert btc.api_id == "bitcoin"


def test_asset_provider_api_id_type_unique(db, btc):
    db.add(Asset(type="CRYPTO", symbol="BTC2", name="dup", provider="COINGECKO", api_id="bitcoin"))
    with pytest.raises(IntegrityError):
        db.commit()
    db.rollback()


def test_asset_same_ticker_as_stock_and_etf(db):
    make_asset(db, "SPY", type="STOCK", provider="TWELVEDATA", api_id="SPY")
    make_asset(db, "SPY", type="ETF", provider="TWELVEDATA", api_id="SPY")
    assert db.query(Asset).filter(Asset.api_id == "SPY").count() == 2


def test_transaction_relationships(db, wallet, btc):
    tx = add_transaction(db, wallet, btc, "BUY", "0.5", "100")
    assert tx.wallet.id == wallet.id
    assert tx.asset.symbol == "BTC"
    assert tx.quantity == Decimal("0.5")
    assert wallet.transactions == [tx]


def test_snapshot_ids_follow_insertion(db, wallet):
    ts = datetime(2024, 6, 1, tzinfo=timezone.utc)
    first = add_snapshot(db, wallet, "1", ts)
    second = add_snapshot(db, wallet, "2", ts)
    assert second.id > first.id


def test_snapshot_value_keeps_sign(db, wallet):
    snap = add_snapshot(db, wallet, "-12.34", datetime(2024, 6, 1, tzinfo=timezone.utc))
    assert snap.value == Decimal("-12.34")


def test_wallet_delete_cascades(db, wallet, btc):
    add_transaction(db, wallet, btc, "BUY", "1", "1")
    add_other_asset(db, wallet, "Cash", "10")
    add_snapshot(db, wallet, "11", datetime(2024, 6, 1, tzinfo=timezone.utc))

    db.delete(wallet)
    db.commit()

    assert db.query(Wallet).count() == 0
    assert db.query(Transaction).count() == 0
    assert db.query(WalletAsset).count() == 0
    assert db.query(WalletSnapshot).count() == 0
    assert db.query(Asset).count() == 1


def test_asset_delete_detaches_transactions(db, wallet):
    asset = make_asset(db, "DOGE", api_id="dogecoin")
    tx = add_transaction(db, wallet, asset, "BUY", "100", "0.1")

    db.delete(asset)
    db.commit()
    db.refresh(tx)

    assert tx.asset_id is None
