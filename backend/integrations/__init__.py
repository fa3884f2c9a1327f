"""External market data integrations.

This package contains:
- Market data protocol: Interface every price provider implements
- Provider exceptions: Typed errors raised by providers
- Yahoo Finance client: Quotes and daily closes via yfinance
"""

from integrations.exceptions import (
    ProviderAPIError,
    ProviderConnectionError,
    ProviderDataError,
    ProviderError,
)
from integrations.market_data_protocol import (
    MarketDataProvider,
    PriceResult,
    ProviderQuote,
)

__all__ = [
    "MarketDataProvider",
    "PriceResult",
    "ProviderAPIError",
    "ProviderConnectionError",
    "ProviderDataError",
    "ProviderError",
    "ProviderQuote",
]
