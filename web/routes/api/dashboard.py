"""Dashboard totals and chart endpoint."""
from typing import Optional

from fastapi import APIRouter, HTTPException, Query, Request

from revenue.dashboard import build_report
from revenue.filters import CustomRange
from revenue.loader import DashboardSession
from revenue.models import CONSOLIDATED, Region
from web.schemas import DashboardResponse
from ._deps import (
    READ_LIMIT,
    ValidationError,
    get_logger,
    get_store,
    limiter,
    validate_bucket_mode,
    validate_date_filter,
    validate_date_range,
    validate_scope,
    validate_status_filter,
)

router = APIRouter()
logger = get_logger(__name__)


async def _last_update(store, scope) -> Optional[str]:
    regions = list(Region) if scope == CONSOLIDATED else [scope]
    times = [await store.get_last_update_time(region) for region in regions]
    times = [t for t in times if t is not None]
    return max(times).isoformat() if times else None


@router.get("/dashboard", response_model=DashboardResponse)
@limiter.limit(READ_LIMIT)
async def get_dashboard(
    request: Request,
    scope: str = Query("usa", description="usa, uk, ale or geral"),
    account: str = Query("all", description="'all' or an exact account id"),
    status: str = Query("all", description="all, active or inactive"),
    date_filter: str = Query("all"),
    start_date: Optional[str] = Query(None, description="Custom range start (YYYY-MM-DD)"),
    end_date: Optional[str] = Query(None, description="Custom range end (YYYY-MM-DD)"),
    convert: Optional[bool] = Query(None, description="Convert chart values to the reporting currency"),
    bucket_by: str = Query("day", description="day (day of month) or date"),
):
    """Load a scope, apply filters and return totals plus chart series."""
    try:
        scope = validate_scope(scope)
        status = validate_status_filter(status)
        date_filter = validate_date_filter(date_filter)
        start, end = validate_date_range(start_date, end_date)
        bucket_by = validate_bucket_mode(bucket_by)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))

    store = await get_store()
    session = DashboardSession(store, scope)
    await session.refresh()
    if session.error:
        logger.warning(f"Dashboard load failed for scope {scope}: {session.error}")
        raise HTTPException(status_code=503, detail=session.error)

    records = session.filtered_records(
        account_filter=account,
        status_filter=status,
        date_filter=date_filter,
        custom_range=CustomRange(start, end),
    )

    report = build_report(
        session.data,
        records,
        session.exchange_rate,
        account_filter=account,
        convert_chart=convert,
        bucket_by=bucket_by,
    )
    report["lastUpdate"] = await _last_update(store, scope)
    return report
