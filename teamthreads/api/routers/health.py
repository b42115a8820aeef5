"""Health check endpoints for liveness and readiness probes."""

import logging
import time

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from teamthreads.api.dependencies import get_db
from teamthreads.api.schemas.common import HealthResponse, ServiceStatus

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """
    Liveness check endpoint (always returns 200 OK).

    Returns immediately without checking dependencies.

    Returns:
        HealthResponse with status "ok".
    """
    logger.debug("health_check: status=ok")
    return HealthResponse(status="ok", version="0.1.0")


@router.get("/ready", response_model=HealthResponse)
async def readiness_check(db: AsyncSession = Depends(get_db)) -> HealthResponse:
    """
    Readiness check endpoint with database status.

    Args:
        db: Async database session from dependency injection.

    Returns:
        HealthResponse with status and database health information.

    Raises:
        HTTPException: 503 if the database does not answer.
    """
    start = time.perf_counter()
    try:
        await db.execute(text("SELECT 1"))
    except Exception as e:
        logger.error(f"readiness_check: status=error, database=error, error={str(e)}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Database service unavailable",
        ) from e

    latency_ms = round((time.perf_counter() - start) * 1000, 2)
    logger.info(f"readiness_check: status=ok, database=connected, latency_ms={latency_ms}")
    return HealthResponse(
        status="ok",
        version="0.1.0",
        services={"database": ServiceStatus(status="connected", latency_ms=latency_ms)},
    )
