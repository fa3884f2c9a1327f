"""Yahoo Finance market data provider implementation."""

import logging
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Optional

import yfinance as yf
from yfinance.exceptions import YFRateLimitError, YFTickerMissingError

from config import settings
from integrations.exceptions import (
    ProviderAPIError,
    ProviderConnectionError,
    ProviderDataError,
)
from integrations.market_data_protocol import PriceResult, ProviderQuote
from integrations.parsing_utils import parse_decimal, parse_unix_timestamp

logger = logging.getLogger(__name__)

PROVIDER_NAME = "yahoo"

# Checked in order; ETFs and funds sometimes only carry the second
_PRICE_FIELDS = ("regularMarketPrice", "currentPrice")


class YahooFinanceClient:
    """Market data provider using Yahoo Finance (yfinance library).

    Handles equities, ETFs, and exchange-suffixed listings such as
    ``IWDA.AS``. Every failure is raised as a typed ProviderError; this
    class never caches and never retries.
    """

    def __init__(
        self,
        timeout: Optional[float] = None,
        default_currency: Optional[str] = None,
    ):
        """Initialize the client.

        Args:
            timeout: Seconds allowed for a history download. Defaults to
                     settings.QUOTE_FETCH_TIMEOUT_SECONDS.
            default_currency: ISO code used when Yahoo omits the currency.
                              Defaults to settings.QUOTE_DEFAULT_CURRENCY.
        """
        self._timeout = settings.QUOTE_FETCH_TIMEOUT_SECONDS if timeout is None else timeout
        self._default_currency = default_currency or settings.QUOTE_DEFAULT_CURRENCY

    @property
    def provider_name(self) -> str:
        return PROVIDER_NAME

    def get_quote(self, symbol: str) -> ProviderQuote:
        """Fetch the latest quote for ``symbol`` from the Yahoo quote summary."""
        try:
            info = yf.Ticker(symbol).info
        except YFRateLimitError as exc:
            raise ProviderAPIError(
                f"Yahoo Finance rate limited the quote request for {symbol}",
                provider_name=PROVIDER_NAME,
                symbol=symbol,
                status_code=429,
            ) from exc
        except Exception as exc:
            raise ProviderConnectionError(
                f"Yahoo Finance quote request for {symbol} failed: {exc}",
                provider_name=PROVIDER_NAME,
                symbol=symbol,
            ) from exc

        if not isinstance(info, dict) or not info:
            raise ProviderDataError(
                f"Yahoo Finance returned no quote data for {symbol}",
                provider_name=PROVIDER_NAME,
                symbol=symbol,
            )

        price = None
        for field in _PRICE_FIELDS:
            price = parse_decimal(info.get(field))
            if price is not None:
                break
        if price is None:
            raise ProviderDataError(
                f"Yahoo Finance response for {symbol} has no market price",
                provider_name=PROVIDER_NAME,
                symbol=symbol,
            )
        if price < 0:
            raise ProviderDataError(
                f"Yahoo Finance reported a negative price for {symbol}: {price}",
                provider_name=PROVIDER_NAME,
                symbol=symbol,
            )

        currency = str(info.get("currency") or self._default_currency).upper()
        observed_at = parse_unix_timestamp(info.get("regularMarketTime"))

        return ProviderQuote(
            symbol=symbol,
            price=price,
            currency=currency,
            change=parse_decimal(info.get("regularMarketChange")) or Decimal("0"),
            change_percent=(
                parse_decimal(info.get("regularMarketChangePercent")) or Decimal("0")
            ),
            observed_at=observed_at or datetime.now(timezone.utc),
        )

    def get_price_history(
        self, symbol: str, start_date: date, end_date: date
    ) -> list[PriceResult]:
        """Fetch unadjusted daily closes for ``symbol`` in ``[start_date, end_date)``.

        yfinance's ``end`` is already exclusive, so the range is passed
        through unchanged. ``raise_errors`` makes yfinance raise instead of
        logging and returning an empty frame, so a transport failure is
        not mistaken for a range without rows.

        Returns:
            PriceResults ordered by date; empty if Yahoo has no rows.
        """
        logger.debug(
            "Yahoo Finance: fetching history for %s (%s to %s)",
            symbol, start_date, end_date,
        )

        try:
            df = yf.Ticker(symbol).history(
                start=start_date.isoformat(),
                end=end_date.isoformat(),
                interval="1d",
                auto_adjust=False,
                actions=False,
                timeout=self._timeout,
                raise_errors=True,
            )
        except YFRateLimitError as exc:
            raise ProviderAPIError(
                f"Yahoo Finance rate limited the history request for {symbol}",
                provider_name=PROVIDER_NAME,
                symbol=symbol,
                status_code=429,
            ) from exc
        except YFTickerMissingError as exc:
            # No rows in the range (weekend, holiday) or an unknown symbol
            logger.debug("Yahoo Finance: no history for %s: %s", symbol, exc)
            return []
        except Exception as exc:
            raise ProviderConnectionError(
                f"Yahoo Finance history request for {symbol} failed: {exc}",
                provider_name=PROVIDER_NAME,
                symbol=symbol,
            ) from exc

        if df is None or df.empty or "Close" not in df.columns:
            return []

        results: list[PriceResult] = []
        for ts, value in df["Close"].dropna().sort_index().items():
            close = parse_decimal(value)
            if close is None:
                continue
            results.append(
                PriceResult(
                    symbol=symbol,
                    price_date=ts.date(),
                    close_price=close,
                    source=PROVIDER_NAME,
                )
            )
        return results
