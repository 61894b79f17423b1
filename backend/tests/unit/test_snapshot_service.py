"""Tests for SnapshotService."""

from datetime import datetime, timezone
from decimal import Decimal
from unittest.mock import MagicMock
from zoneinfo import ZoneInfo

import pytest

from models import Transaction, WalletSnapshot
from services.snapshot_service import SnapshotService
from services.valuation_service import ValuationService
from tests.fixtures import add_other_asset, add_snapshot, add_transaction
from tests.fixtures.mocks import FixedClock

PRAGUE = ZoneInfo("Europe/Prague")


@pytest.fixture
def clock():
    return FixedClock()


@pytest.fixture
def service(price_service, clock):
    return SnapshotService(ValuationService(price_service), clock=clock, tz=PRAGUE)


def _count(db, wallet):
    return db.query(WalletSnapshot).filter(WalletSnapshot.wallet_id == wallet.id).count()


class TestCreateSnapshot:
    def test_values_holdings_and_other_items(self, db, service, wallet, btc):
        add_transaction(db, wallet, btc, "BUY", "2", "100")
        add_other_asset(db, wallet, "Mortgage", "-50.5")

        snap = service.create_snapshot(db, wallet.id, "TX_ADD")

        assert snap.value == Decimal("249.50")
        assert snap.currency == "EUR"
        assert snap.reason == "TX_ADD"
        assert snap.created_at.replace(tzinfo=timezone.utc) == datetime(
            2024, 6, 15, 12, 0, tzinfo=timezone.utc
        )

    def test_value_can_be_negative(self, db, service, wallet):
        add_other_asset(db, wallet, "Loan", "-1000")
        assert service.create_snapshot(db, wallet.id, "EOD").value == Decimal("-1000")

    def test_value_rounded_to_cents(self, db, service, crypto_provider, wallet, btc):
        crypto_provider.prices["bitcoin"] = "0.333"
        add_transaction(db, wallet, btc, "BUY", "1", "1")
        assert service.create_snapshot(db, wallet.id, "EOD").value == Decimal("0.33")

    def test_unknown_wallet(self, db, service):
        with pytest.raises(LookupError):
            service.create_snapshot(db, "missing", "EOD")

    def test_invalid_reason(self, db, service, wallet):
        with pytest.raises(ValueError):
            service.create_snapshot(db, wallet.id, "WHENEVER")


class TestRecordSnapshot:
    def test_success(self, db, service, wallet):
        snap = service.record_snapshot(db, wallet.id, "TX_EDIT")
        assert snap is not None
        assert snap.reason == "TX_EDIT"

    def test_failure_is_swallowed_and_logged(self, db, clock, wallet, btc, caplog):
        valuation = MagicMock()
        valuation.value_wallet.side_effect = RuntimeError("provider exploded")
        service = SnapshotService(valuation, clock=clock, tz=PRAGUE)
        tx = add_transaction(db, wallet, btc, "BUY", "1", "100")

        with caplog.at_level("WARNING", logger="services.snapshot_service"):
            assert service.record_snapshot(db, wallet.id, "TX_ADD") is None

        assert "failed" in caplog.text
        assert _count(db, wallet) == 0
        # The committed mutation survives.
        assert db.query(Transaction).filter(Transaction.id == tx.id).count() == 1

    def test_unknown_reason_is_swallowed(self, db, service, wallet, caplog):
        with caplog.at_level("WARNING", logger="services.snapshot_service"):
            assert service.record_snapshot(db, wallet.id, "NIGHTLY") is None

        assert "Snapshot NIGHTLY for wallet" in caplog.text
        assert _count(db, wallet) == 0


class TestEnsureDailySnapshot:
    def test_creates_once_per_day(self, db, service, clock, wallet):
        assert service.ensure_daily_snapshot(db, wallet.id) is True
        assert service.ensure_daily_snapshot(db, wallet.id) is False
        clock.advance(hours=6)
        assert service.ensure_daily_snapshot(db, wallet.id) is False
        assert _count(db, wallet) == 1

    def test_next_local_day_creates_again(self, db, service, clock, wallet):
        service.ensure_daily_snapshot(db, wallet.id)
        clock.advance(days=1)
        assert service.ensure_daily_snapshot(db, wallet.id) is True
        assert _count(db, wallet) == 2

    def test_mutation_snapshot_does_not_count_as_daily(self, db, service, clock, wallet):
        add_snapshot(db, wallet, "10", clock.now, reason="TX_ADD")
        assert service.ensure_daily_snapshot(db, wallet.id) is True
        latest = service.latest_snapshot(db, wallet.id)
        assert latest.reason == "EOD"

    def test_day_boundary_uses_local_time(self, db, service, clock, wallet):
        # 22:30 UTC on the 14th is already the 15th in Prague (UTC+2 in June).
        add_snapshot(db, wallet, "10", datetime(2024, 6, 14, 22, 30, tzinfo=timezone.utc))
        assert service.ensure_daily_snapshot(db, wallet.id) is False

    def test_yesterday_local_triggers(self, db, service, wallet):
        add_snapshot(db, wallet, "10", datetime(2024, 6, 14, 21, 30, tzinfo=timezone.utc))
        assert service.ensure_daily_snapshot(db, wallet.id) is True


class TestListSnapshots:
    @pytest.fixture
    def history(self, db, wallet):
        same_instant = datetime(2024, 6, 3, 9, 0, tzinfo=timezone.utc)
        return [
            add_snapshot(db, wallet, "1", datetime(2024, 6, 1, 9, 0, tzinfo=timezone.utc)),
            add_snapshot(db, wallet, "2", datetime(2024, 6, 2, 9, 0, tzinfo=timezone.utc)),
            add_snapshot(db, wallet, "3", same_instant, reason="TX_ADD"),
            add_snapshot(db, wallet, "4", same_instant, reason="TX_EDIT"),
        ]

    def test_ascending_with_id_tiebreak(self, db, service, wallet, history):
        rows = service.list_snapshots(db, wallet.id)
        assert [r.value for r in rows] == [Decimal(v) for v in ("1", "2", "3", "4")]

    def test_limit_keeps_most_recent(self, db, service, wallet, history):
        rows = service.list_snapshots(db, wallet.id, limit=2)
        assert [r.value for r in rows] == [Decimal("3"), Decimal("4")]

    def test_since(self, db, service, wallet, history):
        since = datetime(2024, 6, 2, 0, 0, tzinfo=timezone.utc)
        rows = service.list_snapshots(db, wallet.id, since=since)
        assert len(rows) == 3

    def test_other_wallet_not_listed(self, db, service, history):
        assert service.list_snapshots(db, "another-wallet") == []

    def test_latest_snapshot(self, db, service, wallet, history):
        assert service.latest_snapshot(db, wallet.id).value == Decimal("4")
