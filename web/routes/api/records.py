"""Per-region revenue record endpoints."""
from typing import List

from fastapi import APIRouter, Request, Response

from web.schemas import RecordCreate, RecordResponse, RecordUpdate
from ._deps import READ_LIMIT, WRITE_LIMIT, get_store, limiter
from .accounts import _region

router = APIRouter()


@router.get("/{region}/records", response_model=List[RecordResponse])
@limiter.limit(READ_LIMIT)
async def list_records(request: Request, region: str):
    """List a region's records, newest date first."""
    region = _region(region)
    store = await get_store()
    records = await store.list_records(region)
    return [r.to_dict() for r in records]


@router.post("/{region}/records", response_model=RecordResponse, status_code=201)
@limiter.limit(WRITE_LIMIT)
async def create_record(request: Request, region: str, body: RecordCreate):
    region = _region(region)
    store = await get_store()
    record = await store.create_record(region, **body.model_dump())
    return record.to_dict()


@router.patch("/{region}/records/{record_id}", response_model=RecordResponse)
@limiter.limit(WRITE_LIMIT)
async def update_record(request: Request, region: str, record_id: str, body: RecordUpdate):
    """Update the fields present in the body."""
    region = _region(region)
    store = await get_store()
    record = await store.update_record(region, record_id, **body.model_dump(exclude_unset=True))
    return record.to_dict()


@router.delete("/{region}/records/{record_id}", status_code=204)
@limiter.limit(WRITE_LIMIT)
async def delete_record(request: Request, region: str, record_id: str):
    region = _region(region)
    store = await get_store()
    await store.delete_record(region, record_id)
    return Response(status_code=204)
