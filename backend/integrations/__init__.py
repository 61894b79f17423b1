"""External price provider integrations.

This package contains:
- Quote provider protocol: common interface for live price sources
- CoinGecko client: crypto prices via /simple/price
- TwelveData client: stock and ETF prices via /quote
"""

from integrations.coingecko_client import CoinGeckoClient
from integrations.market_data_protocol import AssetPrice, QuoteProvider
from integrations.twelvedata_client import TwelveDataClient

__all__ = [
    "AssetPrice",
    "CoinGeckoClient",
    "QuoteProvider",
    "TwelveDataClient",
]
