"""TwelveData market data provider for live stock and ETF prices."""

import logging
from decimal import Decimal
from typing import Any, Optional

import httpx

from integrations.exceptions import (
    ProviderAPIError,
    ProviderConnectionError,
    ProviderDataError,
    ProviderError,
    error_for_status,
)
from integrations.parsing_utils import first_price

logger = logging.getLogger(__name__)

# Quote fields probed for a price, most preferred first.
PRICE_FIELDS = ("close", "price", "last", "previous_close")


def _is_error_payload(payload: Any) -> bool:
    return isinstance(payload, dict) and payload.get("status") == "error"


def _parse_quote_payload(payload: Any, symbols: list[str]) -> dict[str, Decimal]:
    """Extract symbol prices from a /quote response.

    The endpoint answers in one of these shapes:

    - an error object ``{"status": "error", "code": 401, "message": ...}``
    - a single quote object (has a ``symbol`` key), used when one symbol
      was requested
    - a map of symbol to quote object, used for batches; individual
      entries may themselves be error objects

    Anything else is treated as no data.
    """
    result: dict[str, Decimal] = {}
    if not isinstance(payload, dict) or _is_error_payload(payload):
        return result

    if "symbol" in payload:
        price = first_price(payload, PRICE_FIELDS)
        if price is not None:
            result[str(payload["symbol"])] = price
        return result

    for symbol in symbols:
        row = payload.get(symbol)
        if not isinstance(row, dict) or _is_error_payload(row):
            continue
        price = first_price(row, PRICE_FIELDS)
        if price is not None:
            result[symbol] = price
    return result


class TwelveDataClient:
    """Quote provider using the TwelveData ``/quote`` endpoint.

    Requires an API key. Without one, every lookup returns an empty
    result so the rest of the app runs with crypto-only pricing.
    """

    def __init__(self, api_key: Optional[str] = None, timeout: float = 10.0):
        self._api_key = api_key or None
        self._client = httpx.Client(
            base_url="https://api.twelvedata.com",
            headers={"accept": "application/json"},
            timeout=timeout,
        )

    def close(self) -> None:
        """Close the underlying HTTP client."""
        self._client.close()

    @property
    def provider_name(self) -> str:
        return "twelvedata"

    @property
    def is_configured(self) -> bool:
        return self._api_key is not None

    def _fetch_quotes(self, symbols: list[str]) -> Any:
        """Call /quote and return the decoded JSON body.

        Raises:
            ProviderConnectionError: On timeouts and transport failures.
            ProviderAPIError: On non-2xx status or an error payload.
            ProviderDataError: If the body is not JSON.
        """
        try:
            response = self._client.get(
                "/quote",
                params={"symbol": ",".join(symbols), "apikey": self._api_key},
            )
        except httpx.TimeoutException as e:
            raise ProviderConnectionError(
                f"TwelveData: request timed out: {e}", provider_name=self.provider_name
            ) from e
        except httpx.TransportError as e:
            raise ProviderConnectionError(
                f"TwelveData: transport error: {e}", provider_name=self.provider_name
            ) from e

        try:
            payload = response.json()
        except ValueError:
            payload = None

        if not response.is_success:
            raise error_for_status(response.status_code, self.provider_name, payload)
        if payload is None:
            raise ProviderDataError(
                "TwelveData: response is not JSON", provider_name=self.provider_name
            )
        if _is_error_payload(payload):
            code = payload.get("code")
            raise ProviderAPIError(
                f"TwelveData: {payload.get('message', 'error payload')}",
                provider_name=self.provider_name,
                status_code=code if isinstance(code, int) else None,
            )
        return payload

    def get_prices(self, ids: list[str], vs_currency: str) -> dict[str, Decimal]:
        """Fetch current prices for ticker symbols.

        ``vs_currency`` is accepted for interface parity; TwelveData
        quotes in the instrument's listing currency.

        Returns:
            Dict mapping symbol to price. Symbols without a usable
            price are omitted; any request failure yields an empty dict.
        """
        symbols = list(dict.fromkeys(s for s in ids if s))
        if not symbols:
            return {}
        if not self.is_configured:
            logger.debug("TwelveData: no API key configured, skipping %d symbols", len(symbols))
            return {}

        try:
            payload = self._fetch_quotes(symbols)
        except ProviderError as e:
            logger.warning("TwelveData: quote fetch failed: %s", e)
            return {}

        result = _parse_quote_payload(payload, symbols)
        missing = len(symbols) - len(result)
        if missing:
            logger.info("TwelveData: no price for %d of %d symbols", missing, len(symbols))
        return result
