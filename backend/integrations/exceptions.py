"""Typed exception hierarchy for price provider errors.

Adapters raise these internally so the failure kind is logged
precisely, then catch them at their public boundary and degrade to
"no price" for the affected identifiers.
"""


class ProviderError(Exception):
    """Base exception for all price provider errors.

    Carries the provider name so log lines identify which source failed.
    """

    def __init__(self, message: str, provider_name: str = ""):
        self.provider_name = provider_name
        super().__init__(message)


class ProviderAuthError(ProviderError):
    """API key missing, expired, or rejected (HTTP 401/403)."""

    pass


class ProviderConnectionError(ProviderError):
    """Network failures: timeouts, DNS resolution, connection refused.

    Retriable by default.
    """

    def __init__(self, message: str, provider_name: str = "", retriable: bool = True):
        self.retriable = retriable
        super().__init__(message, provider_name)


class ProviderAPIError(ProviderError):
    """Non-2xx responses or error payloads from the provider API."""

    def __init__(
        self,
        message: str,
        provider_name: str = "",
        status_code: int | None = None,
    ):
        self.status_code = status_code
        super().__init__(message, provider_name)

    @property
    def retriable(self) -> bool:
        """429 (rate limit) and 5xx errors are generally retriable."""
        if self.status_code is None:
            return False
        return self.status_code == 429 or self.status_code >= 500


class ProviderDataError(ProviderError):
    """Malformed or unparseable response body."""

    pass


def error_for_status(status_code: int, provider_name: str, body: object = None) -> ProviderError:
    """Build the exception that matches an HTTP error status."""
    if status_code in (401, 403):
        return ProviderAuthError(
            f"{provider_name}: HTTP {status_code} (check API key)",
            provider_name=provider_name,
        )
    return ProviderAPIError(
        f"{provider_name}: HTTP {status_code}: {str(body)[:200]}",
        provider_name=provider_name,
        status_code=status_code,
    )
