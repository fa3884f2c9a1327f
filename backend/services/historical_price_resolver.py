"""Historical closing price lookups for benchmark comparisons."""

import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Optional

from integrations.exceptions import ProviderError
from integrations.market_data_protocol import MarketDataProvider
from integrations.parsing_utils import to_date
from services.quote_resolver import QuoteFailureReason, failure_reason_for
from utils.ticker import is_valid_ticker, normalize_ticker

logger = logging.getLogger(__name__)

# A non-trading day falls through to the next data point inside this window
HISTORICAL_WINDOW = timedelta(days=1)


@dataclass(frozen=True)
class HistoricalOutcome:
    """Close for one ticker and date, or the reason there is none."""

    ticker: str
    price_date: date
    close: Optional[Decimal] = None
    failure: Optional[QuoteFailureReason] = None


class HistoricalPriceResolver:
    """Looks up the closing price of a ticker on a given date.

    Point-in-time queries are rare enough that they always go to the
    provider; the quote cache is never read or written here.
    """

    def __init__(self, provider: MarketDataProvider):
        self._provider = provider

    def resolve(self, ticker: str, on_date: date | datetime) -> Optional[Decimal]:
        """Return the close on ``on_date`` (or the first one in the window), else None."""
        return self.resolve_detailed(ticker, on_date).close

    def resolve_detailed(self, ticker: str, on_date: date | datetime) -> HistoricalOutcome:
        """Resolve the close for ``ticker`` in ``[on_date, on_date + 1 day)``.

        Args:
            ticker: Ticker symbol (case-insensitive).
            on_date: Requested date; a datetime contributes its calendar date.

        Returns:
            HistoricalOutcome with ``close`` set on success, or ``failure``
            set when the ticker is malformed, the provider fails, or the
            window holds no data point.
        """
        key = normalize_ticker(ticker)
        start = to_date(on_date)
        if not is_valid_ticker(key):
            logger.warning("Rejected malformed ticker %r", ticker)
            return HistoricalOutcome(
                ticker=key, price_date=start, failure=QuoteFailureReason.INVALID_TICKER
            )

        end = start + HISTORICAL_WINDOW
        try:
            points = self._provider.get_price_history(key, start, end)
        except ProviderError as exc:
            logger.warning(
                "Failed to fetch historical price for %s on %s: %s", key, start, exc
            )
            return HistoricalOutcome(
                ticker=key, price_date=start, failure=failure_reason_for(exc)
            )

        in_window = sorted(
            (p for p in points if start <= p.price_date < end),
            key=lambda p: p.price_date,
        )
        if not in_window:
            logger.warning("No historical data found for %s on %s", key, start)
            return HistoricalOutcome(
                ticker=key, price_date=start, failure=QuoteFailureReason.NO_DATA
            )

        close = in_window[0].close_price
        if close is None or close < 0:
            logger.warning(
                "Invalid historical close for %s on %s: %r", key, start, close
            )
            return HistoricalOutcome(
                ticker=key, price_date=start, failure=QuoteFailureReason.MALFORMED
            )

        return HistoricalOutcome(ticker=key, price_date=start, close=close)
