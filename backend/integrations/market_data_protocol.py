"""Market data provider protocol definitions.

Defines the interface the quote service expects from a price feed.
Providers know nothing about caching; they either return data or raise
a :class:`~integrations.exceptions.ProviderError`.
"""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Protocol


@dataclass
class PriceResult:
    """A single closing price for a symbol on a specific date."""

    symbol: str
    price_date: date  # Actual trading date
    close_price: Decimal
    source: str  # e.g., "yahoo"


@dataclass
class ProviderQuote:
    """Live quote as reported by a provider, before it enters the cache."""

    symbol: str
    price: Decimal
    currency: str
    change: Decimal
    change_percent: Decimal
    observed_at: datetime  # Market data time, not fetch time


class MarketDataProvider(Protocol):
    """Protocol for market data providers.

    Implementations fetch price data from external sources.
    """

    @property
    def provider_name(self) -> str:
        """Return the provider name (e.g., 'yahoo')."""
        ...

    def get_quote(self, symbol: str) -> ProviderQuote:
        """Fetch the latest quote for a single symbol.

        Raises:
            ProviderConnectionError: The provider could not be reached.
            ProviderAPIError: The provider rejected the request.
            ProviderDataError: The response has no usable price.
        """
        ...

    def get_price_history(
        self, symbol: str, start_date: date, end_date: date
    ) -> list[PriceResult]:
        """Fetch daily closing prices for one symbol.

        Args:
            symbol: Ticker symbol.
            start_date: Start date (inclusive).
            end_date: End date (exclusive).

        Returns:
            Closing prices ordered by date. Empty when the provider has
            no data points in the range.

        Raises:
            ProviderError: The lookup itself failed.
        """
        ...
