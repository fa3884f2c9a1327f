"""Typed exception hierarchy for market data provider errors.

Provides structured exceptions so the resolvers can tell a transport
failure from a rejected request or a malformed payload, even though
callers of the quote service only ever see an absent result.
"""


class ProviderError(Exception):
    """Base exception for all provider-related errors.

    Carries the provider name and the symbol being looked up so log
    lines identify what failed.
    """

    def __init__(self, message: str, provider_name: str = "", symbol: str = ""):
        self.provider_name = provider_name
        self.symbol = symbol
        super().__init__(message)


class ProviderConnectionError(ProviderError):
    """Network failures: timeouts, DNS resolution, connection refused."""

    pass


class ProviderAPIError(ProviderError):
    """The provider answered with an error status (HTTP 4xx/5xx, rate limit)."""

    def __init__(
        self,
        message: str,
        provider_name: str = "",
        symbol: str = "",
        status_code: int | None = None,
    ):
        self.status_code = status_code
        super().__init__(message, provider_name, symbol)


class ProviderDataError(ProviderError):
    """Malformed response, e.g. the price field is missing or not a number."""

    pass
