"""Pydantic schemas for price quotes and the quote cache."""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, Field


class QuoteOrigin(str, Enum):
    """Where a returned quote came from."""

    LIVE = "live"
    CACHED = "cached"


class Quote(BaseModel):
    """Immutable priced snapshot of a security."""

    ticker: str = Field(pattern=r"^[A-Z0-9.\-]+$")
    price: Decimal = Field(ge=0)
    currency: str
    change: Decimal = Decimal("0")
    change_percent: Decimal = Decimal("0")
    observed_at: datetime  # Market data time, not fetch time
    origin: QuoteOrigin = QuoteOrigin.LIVE

    model_config = {"frozen": True}


class CacheStats(BaseModel):
    """Point-in-time counts for the quote cache. Informational only."""

    total: int
    valid: int
    expired: int
    ttl_seconds: float


class BatchQuotesResponse(BaseModel):
    """Quotes keyed by ticker; tickers that failed are absent."""

    quotes: dict[str, Quote]


class HistoricalPriceResponse(BaseModel):
    """Closing price for a ticker on or just after a requested date."""

    ticker: str
    price_date: date  # Requested date
    close_price: Decimal
