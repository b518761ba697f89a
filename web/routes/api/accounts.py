"""Per-region account management endpoints."""
from typing import List

from fastapi import APIRouter, HTTPException, Request, Response

from web.schemas import AccountCreate, AccountResponse, AccountUpdate
from ._deps import (
    READ_LIMIT,
    WRITE_LIMIT,
    ValidationError,
    get_store,
    limiter,
    validate_region,
)

router = APIRouter()


def _region(value: str):
    try:
        return validate_region(value)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/{region}/accounts", response_model=List[AccountResponse])
@limiter.limit(READ_LIMIT)
async def list_accounts(request: Request, region: str):
    """List a region's accounts ordered by account id."""
    region = _region(region)
    store = await get_store()
    accounts = await store.list_accounts(region)
    return [a.to_dict() for a in accounts]


@router.post("/{region}/accounts", response_model=AccountResponse, status_code=201)
@limiter.limit(WRITE_LIMIT)
async def create_account(request: Request, region: str, body: AccountCreate):
    """Create an account; 409 if the id already exists."""
    region = _region(region)
    store = await get_store()
    account = await store.create_account(region, body.account_id, body.name)
    return account.to_dict()


@router.put("/{region}/accounts/{account_id}", response_model=AccountResponse)
@limiter.limit(WRITE_LIMIT)
async def update_account(request: Request, region: str, account_id: str, body: AccountUpdate):
    region = _region(region)
    store = await get_store()
    account = await store.update_account(region, account_id, name=body.name, active=body.is_active)
    return account.to_dict()


@router.delete("/{region}/accounts/{account_id}", status_code=204)
@limiter.limit(WRITE_LIMIT)
async def delete_account(request: Request, region: str, account_id: str):
    """Delete an account; 409 while revenue records still reference it."""
    region = _region(region)
    store = await get_store()
    await store.delete_account(region, account_id)
    return Response(status_code=204)
