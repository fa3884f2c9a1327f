"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api import prices
from logging_config import setup_logging
from services.price_service import PriceService

setup_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the shared PriceService on startup and drop its cache on shutdown."""
    service = PriceService()
    app.state.price_service = service
    logger.info(
        "Price service ready (provider=%s, cache TTL=%ss)",
        service.provider.provider_name,
        int(service.cache.ttl.total_seconds()),
    )
    try:
        yield
    finally:
        service.close()


app = FastAPI(
    title="Price Quote Service",
    description="Live and historical security prices with an expiring quote cache",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS configuration for frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:5173"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(prices.router)


@app.get("/health")
def health_check():
    """Health check endpoint."""
    return {"status": "ok"}
