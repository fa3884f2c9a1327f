"""In-memory quote cache with a fixed time-to-live."""

import logging
import threading
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Iterable, Optional

from config import settings
from schemas.quote import CacheStats, Quote, QuoteOrigin
from utils.ticker import normalize_ticker

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class CacheEntry:
    """A cached quote and the moment it stops being served."""

    quote: Quote
    expires_at: datetime

    def is_valid(self, now: datetime) -> bool:
        return now < self.expires_at


class QuoteCache:
    """Maps normalized tickers to cached quotes.

    Entries are replaced wholesale, never edited, and are evicted lazily
    when a read finds them expired. The TTL is a policy of the cache
    instance rather than of each write. Every operation takes the
    instance lock because batch lookups run on worker threads.
    """

    def __init__(
        self,
        ttl_seconds: Optional[float] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """Initialize an empty cache.

        Args:
            ttl_seconds: Lifetime of every entry written by :meth:`set`.
                         Defaults to settings.QUOTE_CACHE_TTL_SECONDS.
            clock: Returns the current UTC time. Tests inject a fake.
        """
        if ttl_seconds is None:
            ttl_seconds = settings.QUOTE_CACHE_TTL_SECONDS
        self._ttl = timedelta(seconds=ttl_seconds)
        self._clock = clock or utc_now
        self._entries: dict[str, CacheEntry] = {}
        self._lock = threading.Lock()

    @property
    def ttl(self) -> timedelta:
        return self._ttl

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def get(self, ticker: str) -> Optional[Quote]:
        """Return the cached quote marked ``cached``, or None on a miss.

        An expired entry found here is removed.
        """
        key = normalize_ticker(ticker)
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if not entry.is_valid(self._clock()):
                del self._entries[key]
                logger.debug("Quote cache: evicted expired entry for %s", key)
                return None
        return entry.quote.model_copy(update={"origin": QuoteOrigin.CACHED})

    def peek(self, ticker: str) -> Optional[CacheEntry]:
        """Return the raw entry for a ticker, expired or not, without evicting it."""
        with self._lock:
            return self._entries.get(normalize_ticker(ticker))

    def set(self, ticker: str, quote: Quote) -> CacheEntry:
        """Store ``quote`` under ``ticker``, replacing any existing entry."""
        if quote.origin is not QuoteOrigin.LIVE:
            quote = quote.model_copy(update={"origin": QuoteOrigin.LIVE})
        key = normalize_ticker(ticker)
        with self._lock:
            entry = CacheEntry(quote=quote, expires_at=self._clock() + self._ttl)
            self._entries[key] = entry
        return entry

    def invalidate(self, tickers: Iterable[str]) -> int:
        """Drop the given tickers regardless of expiry. Returns how many were cached."""
        removed = 0
        keys = {normalize_ticker(t) for t in tickers}
        with self._lock:
            for key in keys:
                if self._entries.pop(key, None) is not None:
                    removed += 1
        if removed:
            logger.debug("Quote cache: invalidated %d entries", removed)
        return removed

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def stats(self) -> CacheStats:
        """Count valid and expired entries as of now. Never evicts."""
        with self._lock:
            now = self._clock()
            valid = sum(1 for entry in self._entries.values() if entry.is_valid(now))
            total = len(self._entries)
        return CacheStats(
            total=total,
            valid=valid,
            expired=total - valid,
            ttl_seconds=self._ttl.total_seconds(),
        )
