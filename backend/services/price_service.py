"""Price service: routes assets to quote providers and caches live prices."""

import logging
import threading
import time
from decimal import Decimal
from typing import Callable, Iterable, Optional

from config import settings
from integrations.market_data_protocol import AssetPrice, QuoteProvider
from models import Asset, AssetType, PriceProvider

logger = logging.getLogger(__name__)

_EQUITY_TYPES = frozenset({AssetType.STOCK.value, AssetType.ETF.value})


def normalize_vs_currency(currency: Optional[str]) -> str:
    """Map a wallet or query currency to a provider quote currency.

    Anything other than USD is quoted in EUR.
    """
    return "usd" if (currency or "").strip().lower() == "usd" else "eur"


def price_binding(asset: Asset) -> Optional[PriceProvider]:
    """Return the provider that can price ``asset``, or None.

    CoinGecko prices CRYPTO assets; TwelveData prices STOCK and ETF
    assets. Assets without an ``api_id`` and MANUAL assets are never
    priced.
    """
    if not asset.api_id:
        return None
    if asset.provider == PriceProvider.COINGECKO.value and asset.type == AssetType.CRYPTO.value:
        return PriceProvider.COINGECKO
    if asset.provider == PriceProvider.TWELVEDATA.value and asset.type in _EQUITY_TYPES:
        return PriceProvider.TWELVEDATA
    return None


class PriceService:
    """Orchestrates live price lookups across quote providers.

    Results are held in a short TTL cache keyed by (provider, quote
    currency, provider id) to stay within provider rate limits. Only
    successful lookups are cached, so a failed round is retried on the
    next call.
    """

    def __init__(
        self,
        crypto_provider: Optional[QuoteProvider] = None,
        equity_provider: Optional[QuoteProvider] = None,
        cache_ttl_seconds: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        """Initialize with optional providers for dependency injection.

        Args:
            crypto_provider: Crypto quote provider. If None, a
                            CoinGeckoClient is created on first use.
            equity_provider: Stock/ETF quote provider. If None, a
                            TwelveDataClient is created on first use.
            cache_ttl_seconds: Cache lifetime; defaults to
                            settings.PRICE_CACHE_TTL_SECONDS. 0 disables it.
            clock: Monotonic time source, injectable for tests.
        """
        self._crypto_provider = crypto_provider
        self._equity_provider = equity_provider
        self._ttl = (
            settings.PRICE_CACHE_TTL_SECONDS if cache_ttl_seconds is None else cache_ttl_seconds
        )
        self._clock = clock
        self._cache: dict[tuple[str, str, str], tuple[float, Decimal]] = {}
        self._lock = threading.Lock()

    @property
    def crypto_provider(self) -> QuoteProvider:
        """Get the crypto quote provider, creating if not provided."""
        if self._crypto_provider is None:
            from integrations.coingecko_client import CoinGeckoClient

            self._crypto_provider = CoinGeckoClient(
                api_key=settings.COINGECKO_API_KEY or None,
                timeout=settings.PRICE_REQUEST_TIMEOUT_SECONDS,
            )
        return self._crypto_provider

    @property
    def equity_provider(self) -> QuoteProvider:
        """Get the stock/ETF quote provider, creating if not provided."""
        if self._equity_provider is None:
            from integrations.twelvedata_client import TwelveDataClient

            self._equity_provider = TwelveDataClient(
                api_key=settings.TWELVEDATA_API_KEY or None,
                timeout=settings.PRICE_REQUEST_TIMEOUT_SECONDS,
            )
        return self._equity_provider

    def _provider_for(self, provider: PriceProvider) -> Optional[QuoteProvider]:
        if provider == PriceProvider.COINGECKO:
            return self.crypto_provider
        if provider == PriceProvider.TWELVEDATA:
            return self.equity_provider
        return None

    def clear_cache(self) -> None:
        with self._lock:
            self._cache.clear()

    def get_prices(
        self,
        provider: PriceProvider | str,
        ids: list[str],
        quote_currency: Optional[str],
    ) -> dict[str, Decimal]:
        """Fetch prices for provider-specific ids, using the cache.

        Args:
            provider: Which upstream to ask.
            ids: Provider ids (coin ids or ticker symbols).
            quote_currency: Wallet/query currency, normalized to eur/usd.

        Returns:
            Dict mapping id to price; unresolvable ids are omitted.
        """
        provider = PriceProvider(provider)
        client = self._provider_for(provider)
        unique_ids = list(dict.fromkeys(i for i in ids if i))
        if client is None or not unique_ids:
            return {}

        vs = normalize_vs_currency(quote_currency)
        now = self._clock()
        result: dict[str, Decimal] = {}
        misses: list[str] = []

        with self._lock:
            for api_id in unique_ids:
                entry = self._cache.get((provider.value, vs, api_id))
                if entry is not None and entry[0] > now:
                    result[api_id] = entry[1]
                else:
                    misses.append(api_id)

        if misses:
            fetched = client.get_prices(misses, vs)
            if self._ttl > 0 and fetched:
                expires_at = self._clock() + self._ttl
                with self._lock:
                    for api_id, price in fetched.items():
                        self._cache[(provider.value, vs, api_id)] = (expires_at, price)
            result.update(fetched)

        logger.debug(
            "Prices %s/%s: %d requested, %d cached, %d resolved",
            provider.value, vs, len(unique_ids), len(unique_ids) - len(misses), len(result),
        )
        return result

    def get_asset_prices(
        self, assets: Iterable[Asset], quote_currency: Optional[str]
    ) -> list[AssetPrice]:
        """Resolve live prices for catalog assets.

        Assets are split by provider binding; each provider is asked once
        for its whole batch. Unpriceable assets and assets the provider
        could not price are absent from the result.
        """
        vs = normalize_vs_currency(quote_currency)
        by_provider: dict[PriceProvider, list[Asset]] = {}
        for asset in assets:
            binding = price_binding(asset)
            if binding is not None:
                by_provider.setdefault(binding, []).append(asset)

        results: list[AssetPrice] = []
        for provider, batch in by_provider.items():
            prices = self.get_prices(provider, [a.api_id for a in batch], vs)
            source = self._provider_for(provider).provider_name
            for asset in batch:
                price = prices.get(asset.api_id)
                if price is not None:
                    results.append(
                        AssetPrice(asset_id=asset.id, price=price, vs=vs, source=source)
                    )
        return results

    def get_prices_for_assets(
        self, assets: Iterable[Asset], quote_currency: Optional[str]
    ) -> dict[str, Decimal]:
        """Like :meth:`get_asset_prices` but keyed by asset id."""
        return {p.asset_id: p.price for p in self.get_asset_prices(assets, quote_currency)}
