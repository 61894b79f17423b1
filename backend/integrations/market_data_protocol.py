"""Market data provider protocol definitions.

Defines the interface shared by live quote sources (CoinGecko for
crypto, TwelveData for stocks and ETFs).
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Protocol


@dataclass(frozen=True)
class AssetPrice:
    """A resolved live price for one catalog asset."""

    asset_id: str
    price: Decimal
    vs: str  # lowercase quote currency, e.g. "eur"
    source: str  # provider_name of the client that supplied it


class QuoteProvider(Protocol):
    """Protocol for live quote providers.

    Implementations must never raise on partial failure: identifiers
    that cannot be priced are simply absent from the result.
    """

    @property
    def provider_name(self) -> str:
        """Return the provider name (e.g., 'coingecko')."""
        ...

    def get_prices(self, ids: list[str], vs_currency: str) -> dict[str, Decimal]:
        """Fetch current unit prices for provider-specific identifiers.

        Args:
            ids: Provider identifiers (CoinGecko coin ids, ticker symbols).
            vs_currency: Lowercase quote currency ("eur" or "usd").

        Returns:
            Dict mapping identifier to price. Unknown or failed
            identifiers are omitted.
        """
        ...
