"""Test fixtures and sample data."""
import pytest

from services.price_service import PriceService
from services.quote_cache import QuoteCache
from tests.fixtures.mocks import SAMPLE_PRICES, SAMPLE_QUOTES, FakeClock, MockMarketDataProvider


@pytest.fixture
def clock():
    """Fake clock starting at 2024-01-15 14:30 UTC."""
    return FakeClock()


@pytest.fixture
def quote_cache(clock):
    """Empty quote cache with the default 5 minute TTL driven by the fake clock."""
    return QuoteCache(clock=clock)


@pytest.fixture
def mock_provider():
    """Mock provider knowing AAPL, IWDA.AS and MSFT; anything else fails."""
    return MockMarketDataProvider(quotes=dict(SAMPLE_QUOTES), prices=dict(SAMPLE_PRICES))


@pytest.fixture
def price_service(mock_provider, quote_cache):
    """PriceService wired to the mock provider and fake-clock cache."""
    return PriceService(provider=mock_provider, cache=quote_cache, fetch_timeout_seconds=5.0)
