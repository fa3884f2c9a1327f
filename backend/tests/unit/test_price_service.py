"""Unit tests for PriceService."""

from datetime import date
from decimal import Decimal
from unittest.mock import patch

from config import settings
from integrations.yahoo_finance_client import YahooFinanceClient
from schemas.quote import CacheStats, QuoteOrigin
from services.price_service import PriceService
from services.quote_cache import QuoteCache
from tests.fixtures.mocks import MockMarketDataProvider


class TestConstruction:
    def test_defaults_to_yahoo_provider(self):
        service = PriceService()

        assert isinstance(service.provider, YahooFinanceClient)
        assert service.cache.ttl.total_seconds() == 300

    def test_ttl_comes_from_settings(self, monkeypatch):
        monkeypatch.setattr(settings, "QUOTE_CACHE_TTL_SECONDS", 90.0)

        service = PriceService(provider=MockMarketDataProvider())

        assert service.cache.ttl.total_seconds() == 90

    def test_instances_do_not_share_caches(self, mock_provider):
        first = PriceService(provider=mock_provider)
        second = PriceService(provider=mock_provider)

        first.get_quote("AAPL")

        assert first.get_cache_stats().total == 1
        assert second.get_cache_stats().total == 0

    def test_empty_injected_cache_is_used(self, mock_provider, clock):
        cache = QuoteCache(ttl_seconds=42, clock=clock)
        service = PriceService(provider=mock_provider, cache=cache)

        service.get_quote("AAPL")

        assert service.cache is cache
        assert len(cache) == 1
        assert service.get_cache_stats().ttl_seconds == 42

    def test_injected_clock_drives_expiry(self, mock_provider, clock):
        service = PriceService(provider=mock_provider, cache=QuoteCache(ttl_seconds=42, clock=clock))
        service.get_quote("AAPL")

        clock.advance(seconds=42)
        service.get_quote("AAPL")

        assert mock_provider.calls_for("AAPL") == 2


class TestGetQuote:
    def test_live_then_cached(self, price_service, mock_provider):
        first = price_service.get_quote("aapl")
        second = price_service.get_quote("AAPL")

        assert first.origin == QuoteOrigin.LIVE
        assert second.origin == QuoteOrigin.CACHED
        assert mock_provider.calls_for("AAPL") == 1

    def test_failure_returns_none(self, price_service):
        assert price_service.get_quote("BADTICKER") is None


class TestBatch:
    def test_example_batch(self, price_service):
        result = price_service.get_batch_quotes({"AAPL", "IWDA.AS", "BADTICKER"})

        assert sorted(result) == ["AAPL", "IWDA.AS"]

    def test_refresh_prices_bypasses_cache(self, price_service, mock_provider):
        price_service.get_batch_quotes(["AAPL"])

        price_service.refresh_prices(["AAPL"])

        assert mock_provider.calls_for("AAPL") == 2


class TestHistorical:
    def test_delegates_to_historical_resolver(self, price_service):
        assert price_service.get_historical_price("IWDA.AS", date(2024, 1, 15)) == Decimal("84.31")

    def test_does_not_populate_quote_cache(self, price_service):
        price_service.get_historical_price("IWDA.AS", date(2024, 1, 15))

        assert price_service.get_cache_stats().total == 0


class TestCacheManagement:
    def test_clear_then_stats_is_zero(self, price_service):
        price_service.get_batch_quotes(["AAPL", "MSFT"])

        price_service.clear_price_cache()

        assert price_service.get_cache_stats() == CacheStats(
            total=0, valid=0, expired=0, ttl_seconds=300.0
        )

    def test_stats_track_expiry(self, price_service, clock):
        price_service.get_quote("AAPL")
        clock.advance(minutes=6)

        stats = price_service.get_cache_stats()

        assert (stats.total, stats.valid, stats.expired) == (1, 0, 1)

    def test_close_clears_cache(self, mock_provider):
        cache = QuoteCache()
        service = PriceService(provider=mock_provider, cache=cache)
        service.get_quote("AAPL")
        assert service.cache is cache
        assert len(cache) == 1

        service.close()

        assert len(cache) == 0

    def test_clear_is_logged(self, price_service, caplog):
        with caplog.at_level("INFO", logger="services.price_service"):
            price_service.clear_price_cache()

        assert "cleared" in caplog.text


class TestTimeoutWiring:
    def test_yahoo_client_gets_configured_timeout(self):
        with patch("integrations.yahoo_finance_client.YahooFinanceClient") as mock_client:
            service = PriceService(fetch_timeout_seconds=3.5)

        mock_client.assert_called_once_with(
            timeout=3.5, default_currency=settings.QUOTE_DEFAULT_CURRENCY
        )
        assert service.provider is mock_client.return_value
