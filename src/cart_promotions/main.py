"""
FastAPI application entry point for the cart promotion service.

Run with ``uvicorn cart_promotions.main:app``.
"""

import logging
from contextlib import asynccontextmanager
from datetime import UTC, datetime

from fastapi import FastAPI
from fastapi.responses import Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from . import __version__
from .api import router as promotions_router
from .api.dependencies import get_settings
from .api.models import HealthCheckResponse
from .shared.logging_config import configure_structured_logging

logger = logging.getLogger(__name__)

APP_NAME = "Cart Promotions API"
APP_DESCRIPTION = """
**Cart Promotions API** validates shopping carts against active promotions.

- Which promotions a cart qualifies for
- Which shortfalls block checkout and which only withhold a discount
- Guidance and tips to help the shopper qualify
"""


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Configure logging and settings on startup."""
    settings = get_settings()
    configure_structured_logging(level=settings.log_level)
    logger.info(f"Starting {APP_NAME} v{__version__}")
    yield
    logger.info(f"Stopping {APP_NAME}")


app = FastAPI(
    title=APP_NAME,
    version=__version__,
    description=APP_DESCRIPTION,
    lifespan=lifespan,
)
app.include_router(promotions_router)


@app.get("/health", response_model=HealthCheckResponse, tags=["system"])
async def health_check():
    """Liveness probe."""
    return HealthCheckResponse(
        status="healthy", version=__version__, timestamp=datetime.now(UTC)
    )


@app.get("/metrics", tags=["system"])
async def metrics():
    """Prometheus metrics endpoint."""
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
