"""Tests for the holdings resolver."""

import itertools
from decimal import Decimal
from types import SimpleNamespace

from services.holdings_service import (
    active_holdings,
    compute_invested,
    merge_holdings,
    resolve_holdings,
)


def tx(asset_id, type, quantity, price="1"):
    return SimpleNamespace(asset_id=asset_id, type=type, quantity=quantity, price_per_unit=price)


class TestResolveHoldings:
    def test_buys_and_sells_net(self):
        ledger = [
            tx("btc", "BUY", Decimal("1")),
            tx("btc", "BUY", Decimal("0.5")),
            tx("btc", "SELL", Decimal("0.25")),
            tx("eth", "BUY", Decimal("3")),
        ]
        assert resolve_holdings(ledger) == {"btc": Decimal("1.25"), "eth": Decimal("3")}

    def test_order_independent(self):
        ledger = [
            tx("btc", "BUY", Decimal("0.1")),
            tx("btc", "BUY", Decimal("0.2")),
            tx("btc", "SELL", Decimal("0.3")),
            tx("eth", "BUY", Decimal("1.7")),
        ]
        expected = resolve_holdings(ledger)
        for perm in itertools.permutations(ledger):
            assert resolve_holdings(perm) == expected

    def test_skips_missing_asset(self):
        assert resolve_holdings([tx(None, "BUY", Decimal("5"))]) == {}

    def test_skips_non_finite_quantity(self):
        ledger = [tx("btc", "BUY", Decimal("NaN")), tx("btc", "BUY", None), tx("btc", "BUY", "2")]
        assert resolve_holdings(ledger) == {"btc": Decimal("2")}

    def test_skips_unknown_type(self):
        assert resolve_holdings([tx("btc", "TRANSFER", Decimal("1"))]) == {}

    def test_net_short_kept_in_raw_holdings(self):
        assert resolve_holdings([tx("btc", "SELL", Decimal("1"))]) == {"btc": Decimal("-1")}

    def test_empty(self):
        assert resolve_holdings([]) == {}


class TestActiveHoldings:
    def test_drops_zero_dust_and_short(self):
        holdings = {
            "open": Decimal("0.5"),
            "closed": Decimal("0"),
            "dust": Decimal("1e-13"),
            "short": Decimal("-2"),
        }
        assert active_holdings(holdings) == {"open": Decimal("0.5")}

    def test_custom_epsilon(self):
        holdings = {"a": Decimal("0.01"), "b": Decimal("1")}
        assert active_holdings(holdings, Decimal("0.1")) == {"b": Decimal("1")}


class TestMergeHoldings:
    def test_sums_maps(self):
        merged = merge_holdings({"btc": Decimal("1")}, {"btc": Decimal("2"), "eth": Decimal("1")})
        assert merged == {"btc": Decimal("3"), "eth": Decimal("1")}


class TestComputeInvested:
    def test_sum_of_buys(self):
        ledger = [
            tx("btc", "BUY", Decimal("1"), Decimal("100")),
            tx("btc", "BUY", Decimal("0.5"), Decimal("120")),
        ]
        assert compute_invested(ledger) == Decimal("160")

    def test_sells_do_not_reduce(self):
        ledger = [
            tx("btc", "BUY", Decimal("1"), Decimal("100")),
            tx("btc", "SELL", Decimal("1"), Decimal("150")),
        ]
        assert compute_invested(ledger) == Decimal("100")

    def test_adding_a_buy_never_decreases(self):
        ledger = [tx("btc", "BUY", Decimal("1"), Decimal("100"))]
        before = compute_invested(ledger)
        ledger.append(tx("eth", "BUY", Decimal("0.001"), Decimal("0.01")))
        assert compute_invested(ledger) >= before

    def test_skips_rows_without_asset_or_price(self):
        ledger = [
            tx(None, "BUY", Decimal("1"), Decimal("100")),
            tx("btc", "BUY", Decimal("1"), None),
        ]
        assert compute_invested(ledger) == Decimal("0")
