"""Tests for shared API helpers."""

from decimal import Decimal
from unittest.mock import MagicMock

import pytest
from fastapi import HTTPException

from api.helpers import (
    allocation_response,
    ensure_daily_snapshot_quietly,
    get_current_user_id,
    get_owned_wallet_or_404,
    series_response,
)
from services.valuation_service import compute_valuation
from tests.fixtures import OTHER_USER_ID, USER_ID, make_wallet


class TestGetCurrentUserId:
    def test_header_value(self):
        assert get_current_user_id(" user-1 ") == "user-1"

    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_missing_is_401(self, value):
        with pytest.raises(HTTPException) as exc_info:
            get_current_user_id(value)
        assert exc_info.value.status_code == 401


class TestGetOwnedWallet:
    def test_own_wallet(self, db, wallet):
        assert get_owned_wallet_or_404(wallet.id, USER_ID, db).id == wallet.id

    def test_foreign_wallet_is_404(self, db):
        theirs = make_wallet(db, user_id=OTHER_USER_ID)
        with pytest.raises(HTTPException) as exc_info:
            get_owned_wallet_or_404(theirs.id, USER_ID, db)
        assert exc_info.value.status_code == 404
        assert exc_info.value.detail == "Wallet not found"


class TestResponseBuilders:
    def test_series_response_rounds(self):
        series = [("2024-06-01", Decimal("10.005")), ("2024-06-02", Decimal("0"))]
        assert series_response(series) == [
            {"date": "2024-06-01", "value": 10.01},
            {"date": "2024-06-02", "value": 0.0},
        ]

    def test_allocation_response(self):
        summary = compute_valuation([], {}, {}, [Decimal("5")])
        assert allocation_response(summary)[-1] == {"name": "Other", "value": 5.0, "percent": 100.0}


class TestEnsureDailySnapshotQuietly:
    def test_calls_service(self):
        service, db = MagicMock(), MagicMock()
        ensure_daily_snapshot_quietly(service, db, "w1")
        service.ensure_daily_snapshot.assert_called_once_with(db, "w1")
        db.rollback.assert_not_called()

    def test_failure_rolls_back_and_logs(self, caplog):
        service, db = MagicMock(), MagicMock()
        service.ensure_daily_snapshot.side_effect = RuntimeError("boom")
        with caplog.at_level("WARNING", logger="api.helpers"):
            ensure_daily_snapshot_quietly(service, db, "w1")
        db.rollback.assert_called_once()
        assert "Daily snapshot for wallet w1 failed" in caplog.text
