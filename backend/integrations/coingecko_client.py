"""CoinGecko market data provider for live cryptocurrency prices."""

import logging
import time as time_module
from decimal import Decimal
from typing import Optional

import httpx

from integrations.exceptions import (
    ProviderConnectionError,
    ProviderDataError,
    ProviderError,
    error_for_status,
)
from integrations.parsing_utils import parse_price

logger = logging.getLogger(__name__)

# Max retries for rate-limited requests
_MAX_RETRIES = 3
_BASE_DELAY_SECONDS = 1.0


class CoinGeckoClient:
    """Quote provider using the CoinGecko ``/simple/price`` endpoint.

    Assets are addressed by CoinGecko coin id (``bitcoin``, ``ethereum``),
    which the asset catalog stores as ``api_id``.
    """

    def __init__(self, api_key: Optional[str] = None, timeout: float = 10.0):
        """Initialize with optional API key.

        Args:
            api_key: CoinGecko demo API key. If provided, uses the
                     x-cg-demo-api-key header for higher rate limits.
                     If None, uses the keyless public API.
            timeout: Per-request timeout in seconds.
        """
        headers: dict[str, str] = {"accept": "application/json"}
        if api_key:
            headers["x-cg-demo-api-key"] = api_key
        self._client = httpx.Client(
            base_url="https://api.coingecko.com/api/v3",
            headers=headers,
            timeout=timeout,
        )

    def close(self) -> None:
        """Close the underlying HTTP client."""
        self._client.close()

    @property
    def provider_name(self) -> str:
        return "coingecko"

    def _request_with_retry(
        self, method: str, path: str, **kwargs
    ) -> httpx.Response:
        """Make an HTTP request with retry on 429 rate limit responses.

        Raises:
            ProviderConnectionError: On timeouts and transport failures.
            ProviderAPIError: On non-2xx responses, including a 429 that
                persists after the last retry.
        """
        response: Optional[httpx.Response] = None
        for attempt in range(_MAX_RETRIES):
            try:
                response = self._client.request(method, path, **kwargs)
            except httpx.TimeoutException as e:
                raise ProviderConnectionError(
                    f"CoinGecko: request timed out: {e}", provider_name=self.provider_name
                ) from e
            except httpx.TransportError as e:
                raise ProviderConnectionError(
                    f"CoinGecko: transport error: {e}", provider_name=self.provider_name
                ) from e

            if response.status_code == 429 and attempt < _MAX_RETRIES - 1:
                delay = _BASE_DELAY_SECONDS * (2 ** attempt)
                logger.warning(
                    "CoinGecko: rate limited, retrying in %.1fs (attempt %d/%d)",
                    delay, attempt + 1, _MAX_RETRIES,
                )
                time_module.sleep(delay)
                continue
            break

        if not response.is_success:
            raise error_for_status(response.status_code, self.provider_name, response.text)
        return response

    def get_prices(self, ids: list[str], vs_currency: str) -> dict[str, Decimal]:
        """Fetch current prices for CoinGecko coin ids.

        Args:
            ids: CoinGecko coin ids (e.g., ["bitcoin", "ethereum"]).
            vs_currency: Lowercase quote currency ("eur" or "usd").

        Returns:
            Dict mapping coin id to price. Ids CoinGecko does not know,
            or that came back without a numeric price, are omitted. Any
            request failure yields an empty dict.
        """
        unique_ids = list(dict.fromkeys(i for i in ids if i))
        if not unique_ids:
            return {}

        vs = vs_currency.lower()
        logger.debug("CoinGecko: fetching %d prices in %s", len(unique_ids), vs)

        try:
            response = self._request_with_retry(
                "GET",
                "/simple/price",
                params={"ids": ",".join(unique_ids), "vs_currencies": vs},
            )
            try:
                data = response.json()
            except ValueError as e:
                raise ProviderDataError(
                    "CoinGecko: response is not JSON", provider_name=self.provider_name
                ) from e
            if not isinstance(data, dict):
                raise ProviderDataError(
                    f"CoinGecko: unexpected payload type {type(data).__name__}",
                    provider_name=self.provider_name,
                )
        except ProviderError as e:
            logger.warning("CoinGecko: price fetch failed: %s", e)
            return {}

        # Payload: {"bitcoin": {"eur": 42000.1}, ...}
        result: dict[str, Decimal] = {}
        for coin_id in unique_ids:
            row = data.get(coin_id)
            if not isinstance(row, dict):
                continue
            price = parse_price(row.get(vs))
            if price is not None:
                result[coin_id] = price

        missing = len(unique_ids) - len(result)
        if missing:
            logger.info("CoinGecko: no price for %d of %d ids", missing, len(unique_ids))
        return result
