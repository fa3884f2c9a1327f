"""Single and batch quote resolution on top of the quote cache.

The single resolver is the only code that writes to the cache. The batch
orchestrator fans tickers out to it on a thread pool and assembles
whatever succeeded; one ticker failing never fails the batch.
"""

import logging
from concurrent.futures import ThreadPoolExecutor, wait
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Iterable, Mapping, Optional

from pydantic import ValidationError

from config import settings
from integrations.exceptions import (
    ProviderAPIError,
    ProviderConnectionError,
    ProviderDataError,
    ProviderError,
)
from integrations.market_data_protocol import MarketDataProvider, ProviderQuote
from integrations.parsing_utils import ensure_utc
from schemas.quote import Quote, QuoteOrigin
from services.quote_cache import QuoteCache
from utils.ticker import is_valid_ticker, normalize_ticker, unique_tickers

logger = logging.getLogger(__name__)


class QuoteFailureReason(str, Enum):
    """Why a ticker (or ticker and date) produced no price."""

    INVALID_TICKER = "invalid_ticker"
    UNREACHABLE = "unreachable"
    REJECTED = "rejected"
    MALFORMED = "malformed"
    NO_DATA = "no_data"
    UNKNOWN = "unknown"


def failure_reason_for(exc: ProviderError) -> QuoteFailureReason:
    """Map a provider exception onto the failure taxonomy."""
    if isinstance(exc, ProviderConnectionError):
        return QuoteFailureReason.UNREACHABLE
    if isinstance(exc, ProviderAPIError):
        return QuoteFailureReason.REJECTED
    if isinstance(exc, ProviderDataError):
        return QuoteFailureReason.MALFORMED
    return QuoteFailureReason.UNKNOWN


@dataclass(frozen=True)
class QuoteOutcome:
    """Result of resolving one ticker: a quote, or the reason there is none."""

    ticker: str
    quote: Optional[Quote] = None
    failure: Optional[QuoteFailureReason] = None


class BatchResult(dict):
    """Quotes keyed by normalized ticker, holding only the tickers that resolved.

    Behaves as a plain ``dict[str, Quote]``. Tickers that failed are
    absent from the mapping and listed in :attr:`failures` instead.
    """

    def __init__(
        self,
        quotes: Optional[Mapping[str, Quote]] = None,
        failures: Optional[Mapping[str, QuoteFailureReason]] = None,
    ):
        super().__init__(quotes or {})
        self._failures = dict(failures or {})

    @property
    def failures(self) -> Mapping[str, QuoteFailureReason]:
        return MappingProxyType(self._failures)


class QuoteResolver:
    """Resolves one ticker: cache first, then the provider on a miss."""

    def __init__(self, cache: QuoteCache, provider: MarketDataProvider):
        self._cache = cache
        self._provider = provider

    def resolve(self, ticker: str) -> Optional[Quote]:
        """Return a quote for ``ticker`` or None. Never raises for provider failures."""
        return self.resolve_detailed(ticker).quote

    def resolve_detailed(self, ticker: str) -> QuoteOutcome:
        """Resolve ``ticker`` and report why it failed, if it did.

        A cache hit returns immediately with ``origin=cached``. On a miss
        the provider is called exactly once; a usable quote is written to
        the cache and returned with ``origin=live``.
        """
        key = normalize_ticker(ticker)
        if not is_valid_ticker(key):
            logger.warning("Rejected malformed ticker %r", ticker)
            return QuoteOutcome(ticker=key, failure=QuoteFailureReason.INVALID_TICKER)

        cached = self._cache.get(key)
        if cached is not None:
            return QuoteOutcome(ticker=key, quote=cached)

        try:
            provider_quote = self._provider.get_quote(key)
        except ProviderError as exc:
            logger.warning("Failed to fetch quote for %s: %s", key, exc)
            return QuoteOutcome(ticker=key, failure=failure_reason_for(exc))

        quote = self._to_quote(key, provider_quote)
        if quote is None:
            return QuoteOutcome(ticker=key, failure=QuoteFailureReason.MALFORMED)

        self._cache.set(key, quote)
        return QuoteOutcome(ticker=key, quote=quote)

    def _to_quote(self, key: str, provider_quote: ProviderQuote) -> Optional[Quote]:
        if provider_quote.price is None:
            logger.warning(
                "Invalid response from %s for %s: no price",
                self._provider.provider_name, key,
            )
            return None
        try:
            return Quote(
                ticker=key,
                price=provider_quote.price,
                currency=provider_quote.currency,
                change=provider_quote.change,
                change_percent=provider_quote.change_percent,
                observed_at=ensure_utc(provider_quote.observed_at),
                origin=QuoteOrigin.LIVE,
            )
        except ValidationError as exc:
            logger.warning(
                "Invalid response from %s for %s: %s",
                self._provider.provider_name, key, exc,
            )
            return None


class BatchQuoteOrchestrator:
    """Resolves many tickers concurrently with per-ticker failure isolation."""

    def __init__(
        self,
        resolver: QuoteResolver,
        cache: QuoteCache,
        timeout_seconds: Optional[float] = None,
    ):
        """Initialize the orchestrator.

        Args:
            resolver: Single-ticker resolver every lookup is delegated to.
            cache: The resolver's cache, needed for :meth:`refresh`.
            timeout_seconds: How long each lookup may take before it is
                             reported as unreachable. Defaults to
                             settings.QUOTE_FETCH_TIMEOUT_SECONDS.
        """
        self._resolver = resolver
        self._cache = cache
        if timeout_seconds is None:
            timeout_seconds = settings.QUOTE_FETCH_TIMEOUT_SECONDS
        self._timeout = timeout_seconds

    def resolve_batch(self, tickers: Iterable[str]) -> BatchResult:
        """Resolve every distinct ticker at once and keep the successes.

        Lookups all start together on a pool sized to the batch, then the
        call waits for each to settle or time out. Result keys are
        normalized tickers; the order of completion is irrelevant.
        """
        requested = unique_tickers(tickers)
        if not requested:
            return BatchResult()

        quotes: dict[str, Quote] = {}
        failures: dict[str, QuoteFailureReason] = {}

        executor = ThreadPoolExecutor(
            max_workers=len(requested), thread_name_prefix="quote-fetch"
        )
        try:
            futures = {
                executor.submit(self._resolver.resolve_detailed, ticker): ticker
                for ticker in requested
            }
            done, not_done = wait(futures, timeout=self._timeout)

            for future in done:
                ticker = futures[future]
                try:
                    outcome = future.result()
                except Exception:
                    logger.warning(
                        "Unexpected error resolving quote for %s", ticker, exc_info=True
                    )
                    failures[ticker] = QuoteFailureReason.UNKNOWN
                    continue
                if outcome.quote is not None:
                    quotes[ticker] = outcome.quote
                else:
                    failures[ticker] = outcome.failure or QuoteFailureReason.UNKNOWN

            for future in not_done:
                ticker = futures[future]
                future.cancel()
                logger.warning(
                    "Quote for %s did not settle within %.1fs", ticker, self._timeout
                )
                failures[ticker] = QuoteFailureReason.UNREACHABLE
        finally:
            # Timed-out lookups are not awaited and may still write the cache
            executor.shutdown(wait=False, cancel_futures=True)

        logger.info(
            "Resolved %d of %d quotes (%d failed)",
            len(quotes), len(requested), len(failures),
        )
        return BatchResult(
            quotes={t: quotes[t] for t in requested if t in quotes},
            failures=failures,
        )

    def refresh(self, tickers: Iterable[str]) -> BatchResult:
        """Drop cached entries for ``tickers`` and fetch them live."""
        tickers = list(tickers)
        self._cache.invalidate(tickers)
        return self.resolve_batch(tickers)
