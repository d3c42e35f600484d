# litrato/main.py
"""
Litrato scheduling API.

Mounts the scheduling router under /api/v1 and exposes health and
Prometheus endpoints.
"""

from contextlib import asynccontextmanager
import logging
from typing import AsyncGenerator

from fastapi import APIRouter, FastAPI, Response
from fastapi.responses import JSONResponse

from .core.config import settings
from .core.constants import API_PREFIX, BRAND_NAME
from .core.exceptions import DomainException
from .monitoring.prometheus_metrics import prometheus_metrics
from .routes import scheduling

logging.basicConfig(
    level=getattr(logging, settings.log_level, logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def app_lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    logger.info(
        f"Starting {BRAND_NAME} scheduling API ({settings.environment}); "
        f"buffer={settings.scheduling.buffer_minutes}min "
        f"ceiling={settings.scheduling.extension_ceiling_hours}h"
    )
    yield
    logger.info(f"Shutting down {BRAND_NAME} scheduling API")


app = FastAPI(
    title=f"{BRAND_NAME} Scheduling API",
    description="Booking conflict detection, availability and acceptance",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=app_lifespan,
)


@app.exception_handler(DomainException)
async def domain_exception_handler(request, exc: DomainException) -> JSONResponse:
    """Domain errors that escape a route still get their mapped status code."""
    http_exc = exc.to_http_exception()
    return JSONResponse(status_code=http_exc.status_code, content={"detail": http_exc.detail})


api_v1 = APIRouter(prefix=API_PREFIX)
api_v1.include_router(scheduling.router)
app.include_router(api_v1)


@app.get("/health", include_in_schema=False)
def health() -> dict:
    return {"status": "healthy", "environment": settings.environment}


@app.get("/metrics/prometheus", include_in_schema=False)
def metrics() -> Response:
    return Response(
        content=prometheus_metrics.get_metrics(),
        media_type=prometheus_metrics.get_content_type(),
    )
