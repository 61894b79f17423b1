"""Mock implementations for external services."""

from datetime import datetime, timedelta, timezone
from decimal import Decimal


class MockQuoteProvider:
    """In-memory quote provider.

    Follows the adapter contract: unknown ids are omitted and failures
    degrade to an empty result instead of raising.
    """

    def __init__(
        self,
        name: str = "mock",
        prices: dict[str, float | str | Decimal] | None = None,
        should_fail: bool = False,
    ):
        self._name = name
        self.prices = dict(prices or {})
        self.should_fail = should_fail
        self.calls: list[tuple[list[str], str]] = []

    @property
    def provider_name(self) -> str:
        return self._name

    def get_prices(self, ids: list[str], vs_currency: str) -> dict[str, Decimal]:
        self.calls.append((list(ids), vs_currency))
        if self.should_fail:
            return {}
        return {i: Decimal(str(self.prices[i])) for i in ids if i in self.prices}


class FixedClock:
    """Callable clock returning a settable UTC instant."""

    def __init__(self, now: datetime | None = None):
        self.now = now or datetime(2024, 6, 15, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


SAMPLE_COINGECKO_PRICES = {
    "bitcoin": {"eur": 42000.5, "usd": 45000.25},
    "ethereum": {"eur": 2200, "usd": 2400},
}

SAMPLE_TWELVEDATA_BATCH = {
    "AAPL": {"symbol": "AAPL", "close": "189.84", "previous_close": "188.00"},
    "MSFT": {"symbol": "MSFT", "price": "410.10"},
    "BAD": {"status": "error", "code": 404, "message": "symbol not found"},
}
