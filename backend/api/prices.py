"""Price quote API endpoints."""

import logging
from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response

from schemas.quote import BatchQuotesResponse, CacheStats, HistoricalPriceResponse, Quote
from services.price_service import PriceService
from utils.query_params import parse_tickers
from utils.ticker import normalize_ticker

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/prices", tags=["prices"])


def get_price_service(request: Request) -> PriceService:
    """Get the process-wide PriceService created at application startup."""
    return request.app.state.price_service


@router.get("", response_model=BatchQuotesResponse)
def get_prices(
    tickers: str | None = Query(None, description="Comma-separated tickers, e.g. IWDA.AS,AAPL"),
    refresh: bool = Query(False, description="Bypass cached quotes"),
    service: PriceService = Depends(get_price_service),
):
    """Fetch current prices for multiple tickers.

    Tickers that cannot be priced are left out of the response rather
    than failing the request.
    """
    requested = parse_tickers(tickers)
    result = service.refresh_prices(requested) if refresh else service.get_batch_quotes(requested)
    logger.info(
        "Prices fetched: %d requested, %d quoted, refresh=%s",
        len(requested), len(result), refresh,
    )
    return BatchQuotesResponse(quotes=dict(result))


@router.get("/cache/stats", response_model=CacheStats)
def get_cache_stats(service: PriceService = Depends(get_price_service)):
    """Report how many cached quotes are still valid."""
    return service.get_cache_stats()


@router.delete("/cache", status_code=204)
def clear_cache(service: PriceService = Depends(get_price_service)):
    """Drop every cached quote."""
    service.clear_price_cache()
    return Response(status_code=204)


@router.get("/cache", include_in_schema=False)
def reserved_cache_path():
    """Keep ``/cache`` out of the ticker route; "CACHE" is never looked up."""
    raise HTTPException(status_code=405, detail="Method Not Allowed", headers={"Allow": "DELETE"})


@router.get("/{ticker}", response_model=Quote)
def get_price(ticker: str, service: PriceService = Depends(get_price_service)):
    """Fetch the current price for one ticker."""
    quote = service.get_quote(ticker)
    if quote is None:
        raise HTTPException(status_code=404, detail=f"No price available for {ticker}")
    return quote


@router.get("/{ticker}/history", response_model=HistoricalPriceResponse)
def get_historical_price(
    ticker: str,
    on_date: date = Query(..., alias="date", description="Date to price (YYYY-MM-DD)"),
    service: PriceService = Depends(get_price_service),
):
    """Fetch the closing price on a date, falling through to the next trading day."""
    close = service.get_historical_price(ticker, on_date)
    if close is None:
        raise HTTPException(
            status_code=404,
            detail=f"No historical price for {ticker} on {on_date.isoformat()}",
        )
    return HistoricalPriceResponse(
        ticker=normalize_ticker(ticker),
        price_date=on_date,
        close_price=close,
    )
