"""Dashboard settings (base exchange rate) endpoints."""
from fastapi import APIRouter, Request

from web.schemas import ExchangeRateUpdate, SettingsResponse
from ._deps import READ_LIMIT, WRITE_LIMIT, get_store, limiter

router = APIRouter()


@router.get("/settings", response_model=SettingsResponse)
@limiter.limit(READ_LIMIT)
async def get_settings(request: Request):
    """Get the live settings row (created with defaults if missing)."""
    store = await get_store()
    settings = await store.get_settings()
    return settings.to_dict()


@router.put("/settings/exchange-rate", response_model=SettingsResponse)
@limiter.limit(WRITE_LIMIT)
async def update_exchange_rate(request: Request, body: ExchangeRateUpdate):
    """Set the base exchange rate; regional cross-rates follow proportionally."""
    store = await get_store()
    settings = await store.update_exchange_rate(body.exchange_rate, body.updated_by)
    return settings.to_dict()
