"""Health check endpoint for service monitoring."""

from typing import Annotated

import structlog
from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.exc import DBAPIError
from sqlalchemy.ext.asyncio import AsyncSession

from enrollment_gateway import __version__
from enrollment_gateway.core.config import settings
from enrollment_gateway.core.dependencies import get_catalog
from enrollment_gateway.infrastructure.database import get_db_session
from enrollment_gateway.service.catalog import PlanCatalog

logger = structlog.get_logger(__name__)

health_router = APIRouter()


class HealthResponse(BaseModel):
    status: str
    version: str
    database: str
    plans: int
    batch_capacity: int


@health_router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health Check",
    description="Reports record store reachability and the loaded plan catalog.",
)
async def health_check(
    session: Annotated[AsyncSession, Depends(get_db_session)],
    catalog: Annotated[PlanCatalog, Depends(get_catalog)],
) -> HealthResponse:
    try:
        await session.execute(text("SELECT 1"))
        database = "up"
    except DBAPIError as e:
        logger.warning("health_record_store_unreachable", error=str(e))
        await session.rollback()
        database = "down"

    return HealthResponse(
        status="healthy" if database == "up" else "degraded",
        version=__version__,
        database=database,
        plans=len(catalog),
        batch_capacity=settings.batch_capacity,
    )
