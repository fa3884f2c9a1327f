"""Price service: entry point for live quotes and historical prices."""

import logging
from datetime import date, datetime
from decimal import Decimal
from typing import Iterable, Optional

from config import settings
from integrations.market_data_protocol import MarketDataProvider
from schemas.quote import CacheStats, Quote
from services.historical_price_resolver import HistoricalPriceResolver
from services.quote_cache import QuoteCache
from services.quote_resolver import BatchQuoteOrchestrator, BatchResult, QuoteResolver
from utils.ticker import normalize_ticker

logger = logging.getLogger(__name__)


class PriceService:
    """Owns one quote cache and wires the resolvers around a provider.

    Route handlers and jobs call this class rather than the resolvers.
    Each instance has its own cache, so tests can build as many
    independent services as they need.
    """

    def __init__(
        self,
        provider: Optional[MarketDataProvider] = None,
        cache: Optional[QuoteCache] = None,
        fetch_timeout_seconds: Optional[float] = None,
    ):
        """Initialize with optional collaborators for dependency injection.

        Args:
            provider: Market data provider. If None, a YahooFinanceClient
                      configured from settings is created.
            cache: Quote cache. If None, an empty cache using
                   settings.QUOTE_CACHE_TTL_SECONDS is created.
            fetch_timeout_seconds: Per-lookup timeout. Defaults to
                                   settings.QUOTE_FETCH_TIMEOUT_SECONDS.
        """
        timeout = (
            settings.QUOTE_FETCH_TIMEOUT_SECONDS
            if fetch_timeout_seconds is None
            else fetch_timeout_seconds
        )
        if provider is None:
            from integrations.yahoo_finance_client import YahooFinanceClient

            provider = YahooFinanceClient(
                timeout=timeout,
                default_currency=settings.QUOTE_DEFAULT_CURRENCY,
            )
        self._provider = provider
        # QuoteCache defines __len__, so an empty injected cache is falsy
        self._cache = cache if cache is not None else QuoteCache()
        self._resolver = QuoteResolver(self._cache, provider)
        self._batch = BatchQuoteOrchestrator(
            self._resolver, self._cache, timeout_seconds=timeout
        )
        self._historical = HistoricalPriceResolver(provider)

    @property
    def provider(self) -> MarketDataProvider:
        return self._provider

    @property
    def cache(self) -> QuoteCache:
        return self._cache

    def get_quote(self, ticker: str) -> Optional[Quote]:
        """Fetch one quote, served from cache when fresh.

        Runs through the batch path so the per-lookup timeout applies.
        """
        return self._batch.resolve_batch([ticker]).get(normalize_ticker(ticker))

    def get_batch_quotes(self, tickers: Iterable[str]) -> BatchResult:
        """Fetch quotes for many tickers in parallel; failed tickers are omitted."""
        return self._batch.resolve_batch(tickers)

    def get_historical_price(self, ticker: str, on_date: date | datetime) -> Optional[Decimal]:
        """Closing price on ``on_date``, or on the first trading day in the window."""
        return self._historical.resolve(ticker, on_date)

    def refresh_prices(self, tickers: Iterable[str]) -> BatchResult:
        """Bypass the cache for ``tickers`` and fetch them live."""
        return self._batch.refresh(tickers)

    def clear_price_cache(self) -> None:
        self._cache.clear()
        logger.info("Price cache cleared")

    def get_cache_stats(self) -> CacheStats:
        return self._cache.stats()

    def close(self) -> None:
        """Release cached quotes at shutdown."""
        self._cache.clear()
