"""Health check endpoint."""
import time

from fastapi import APIRouter, Request

from revenue.exceptions import RevenueStoreError
from revenue.observability import Timer, get_correlation_id
from web.config import READ_LIMIT, VERSION
from web.schemas import HealthResponse
from ._deps import limiter, get_store, get_logger, START_TIME

router = APIRouter()
logger = get_logger(__name__)


@router.get("/health", response_model=HealthResponse)
@limiter.limit(READ_LIMIT)
async def health_check(request: Request):
    """Health check endpoint for container/load balancer monitoring."""
    uptime_seconds = int(time.time() - START_TIME)

    try:
        with Timer("health_check_db", logger):
            store = await get_store()
            regions = await store.get_stats()
        store_status = "connected"
    except RevenueStoreError as e:
        logger.warning(f"Health check store error: {e}")
        regions = None
        store_status = f"error: {e}"

    return {
        "status": "healthy" if regions is not None else "degraded",
        "version": VERSION,
        "uptime_seconds": uptime_seconds,
        "correlation_id": get_correlation_id(),
        "store": store_status,
        "regions": regions,
    }
