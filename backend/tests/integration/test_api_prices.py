"""Integration tests for price API endpoints."""

from fastapi.testclient import TestClient

from api.prices import get_price_service
from main import app
from services.price_service import PriceService


class TestBatchPrices:
    def test_returns_quotes_for_resolved_tickers(self, client):
        response = client.get("/api/prices?tickers=AAPL,IWDA.AS,BADTICKER")

        assert response.status_code == 200
        quotes = response.json()["quotes"]
        assert set(quotes) == {"AAPL", "IWDA.AS"}
        assert float(quotes["AAPL"]["price"]) == 185.92
        assert quotes["IWDA.AS"]["currency"] == "EUR"
        assert quotes["AAPL"]["origin"] == "live"

    def test_lowercase_and_blank_entries(self, client):
        response = client.get("/api/prices?tickers=aapl,, ,msft")

        assert response.status_code == 200
        assert set(response.json()["quotes"]) == {"AAPL", "MSFT"}

    def test_second_request_served_from_cache(self, client, mock_provider):
        client.get("/api/prices?tickers=AAPL")
        response = client.get("/api/prices?tickers=AAPL")

        assert response.json()["quotes"]["AAPL"]["origin"] == "cached"
        assert mock_provider.calls_for("AAPL") == 1

    def test_refresh_bypasses_cache(self, client, mock_provider):
        client.get("/api/prices?tickers=AAPL")
        response = client.get("/api/prices?tickers=AAPL&refresh=true")

        assert response.json()["quotes"]["AAPL"]["origin"] == "live"
        assert mock_provider.calls_for("AAPL") == 2

    def test_missing_tickers_is_400(self, client):
        response = client.get("/api/prices")

        assert response.status_code == 400
        assert response.json()["detail"] == "Missing tickers parameter"

    def test_only_blank_tickers_is_400(self, client):
        response = client.get("/api/prices?tickers=,, ")

        assert response.status_code == 400
        assert response.json()["detail"] == "No valid tickers provided"


class TestSinglePrice:
    def test_returns_quote(self, client):
        response = client.get("/api/prices/iwda.as")

        assert response.status_code == 200
        data = response.json()
        assert data["ticker"] == "IWDA.AS"
        assert float(data["price"]) == 84.31
        assert data["observed_at"].startswith("2024-01-15T21:00:00")

    def test_unavailable_is_404(self, client):
        response = client.get("/api/prices/BADTICKER")

        assert response.status_code == 404


class TestHistoricalPrice:
    def test_returns_close(self, client):
        response = client.get("/api/prices/IWDA.AS/history?date=2024-01-15")

        assert response.status_code == 200
        data = response.json()
        assert data["ticker"] == "IWDA.AS"
        assert data["price_date"] == "2024-01-15"
        assert float(data["close_price"]) == 84.31

    def test_non_trading_day_is_404(self, client):
        response = client.get("/api/prices/AAPL/history?date=2024-01-13")

        assert response.status_code == 404

    def test_missing_date_is_422(self, client):
        response = client.get("/api/prices/AAPL/history")

        assert response.status_code == 422


class TestCacheEndpoints:
    def test_stats_after_fetch(self, client):
        client.get("/api/prices?tickers=AAPL,MSFT")

        response = client.get("/api/prices/cache/stats")

        assert response.status_code == 200
        assert response.json() == {"total": 2, "valid": 2, "expired": 0, "ttl_seconds": 300.0}

    def test_clear_cache(self, client):
        client.get("/api/prices?tickers=AAPL")

        response = client.delete("/api/prices/cache")

        assert response.status_code == 204
        stats = client.get("/api/prices/cache/stats").json()
        assert (stats["total"], stats["valid"], stats["expired"]) == (0, 0, 0)

    def test_get_on_cache_path_is_not_a_ticker_lookup(self, client, mock_provider):
        response = client.get("/api/prices/cache")

        assert response.status_code == 405
        assert response.headers["allow"] == "DELETE"
        assert mock_provider.calls_for("CACHE") == 0


class TestLifespan:
    def test_startup_creates_price_service(self):
        app.dependency_overrides.pop(get_price_service, None)
        with TestClient(app) as client:
            assert isinstance(app.state.price_service, PriceService)
            assert client.get("/health").status_code == 200
