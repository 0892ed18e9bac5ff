"""
Enrollment Gateway - Main Application Entry Point

A Tuition Payment & Cohort Assignment Service that turns a gateway
payment into a paid, cohort-assigned learner exactly once.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import RedirectResponse

from enrollment_gateway import __version__
from enrollment_gateway.core.config import settings
from enrollment_gateway.core.logging import setup_logging
from enrollment_gateway.core.metrics import get_metrics, get_metrics_content_type
from enrollment_gateway.infrastructure.database import db_manager
from enrollment_gateway.presentation.api import api_router
from enrollment_gateway.presentation.middleware import (
    LoggingMiddleware,
    RequestContextMiddleware,
    error_handler_middleware,
)
from enrollment_gateway.service.catalog import get_plan_catalog


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan manager.

    A malformed plan catalog fails startup before the pool is opened.
    """
    setup_logging()
    logger = structlog.get_logger(__name__)

    catalog = get_plan_catalog()
    if settings.gateway_verify_enabled and not settings.gateway_secret_key:
        logger.warning("gateway_secret_key_missing", gateway_api_url=settings.gateway_api_url)

    db_manager.init()

    logger.info(
        "application_started",
        version=__version__,
        plans=[plan.id for plan in catalog.all()],
        batch_capacity=settings.batch_capacity,
        payment_window_days=settings.payment_window_days,
        gateway_verify_enabled=settings.gateway_verify_enabled,
    )

    yield

    await db_manager.close()
    logger.info("application_stopped")


app = FastAPI(
    title="Enrollment Gateway",
    description="Tuition Payment & Cohort Assignment Service",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(LoggingMiddleware)
app.add_middleware(RequestContextMiddleware)

error_handler_middleware(app)

app.include_router(api_router)


@app.get("/metrics", include_in_schema=False)
async def metrics() -> Response:
    """Prometheus metrics endpoint."""
    if not settings.metrics_enabled:
        return Response(status_code=404)
    return Response(
        content=get_metrics(),
        media_type=get_metrics_content_type(),
    )


@app.get("/", include_in_schema=False)
async def root():
    """Redirect to API documentation."""

    return RedirectResponse(url="/docs")
