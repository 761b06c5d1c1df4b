from fastapi import APIRouter, HTTPException, Request

from server.core.CacheStore import CacheStore, UnknownCacheKeyError
from server.models.requests import (
    InvalidateRequest,
    MetadataUpdateRequest,
    SaveBankStatementsRequest,
    SaveInstallmentsRequest,
    SaveOrdenTiendaMapRequest,
    UpdateStatusesRequest,
)
from server.models.responses import AckResponse, MetadataUpdateResponse, RecordsResponse
from shared.models.cache import (
    CACHE_KEY_BANK_STATEMENTS,
    CACHE_KEY_INSTALLMENTS,
    CACHE_KEY_ORDEN_TIENDA_MAP,
    CacheMetadataResponse,
    UpdateStatusesResponse,
)

router = APIRouter(prefix="/api/cache", tags=["cache"])


def _get_store(request: Request) -> CacheStore:
    return request.app.state.cache_store


################ METADATA ##################

@router.get("/metadata")
async def get_metadata(request: Request) -> CacheMetadataResponse:
    """Return the metadata of all cache keys; unpopulated keys are null."""
    return CacheMetadataResponse(success=True, data=_get_store(request).get_metadata_set())


@router.post("/metadata/update")
async def update_metadata(request: Request, body: MetadataUpdateRequest) -> MetadataUpdateResponse:
    """Create or bump the metadata entry of a cache key.

    Raises:
        HTTPException: 400 for an unknown cache key.
    """
    try:
        entry = _get_store(request).update_metadata(body.cacheKey, body.sourceDataHash)
    except UnknownCacheKeyError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return MetadataUpdateResponse(data=entry)


@router.post("/invalidate")
async def invalidate(request: Request, body: InvalidateRequest) -> AckResponse:
    """Drop metadata and records of a cache key.

    Raises:
        HTTPException: 400 for an unknown cache key.
    """
    try:
        _get_store(request).invalidate(body.cacheKey)
    except UnknownCacheKeyError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return AckResponse(cacheKey=body.cacheKey)


################ INSTALLMENTS ##################

@router.post("/installments/update-statuses")
async def update_statuses(request: Request, body: UpdateStatusesRequest) -> UpdateStatusesResponse:
    """Recompute time-dependent installment statuses as of the given instant."""
    updated = _get_store(request).update_installment_statuses(body.currentDate)
    return UpdateStatusesResponse(updated=updated)


@router.get("/installments")
async def get_installments(request: Request) -> RecordsResponse:
    records = _get_store(request).get_records(CACHE_KEY_INSTALLMENTS)
    return RecordsResponse(cacheKey=CACHE_KEY_INSTALLMENTS, data=records)


@router.post("/installments")
async def save_installments(request: Request, body: SaveInstallmentsRequest) -> AckResponse:
    count = _get_store(request).save_records(CACHE_KEY_INSTALLMENTS, body.installments)
    return AckResponse(cacheKey=CACHE_KEY_INSTALLMENTS, count=count)


################ OTHER CACHE KEYS ##################

@router.get("/bank-statements")
async def get_bank_statements(request: Request) -> RecordsResponse:
    records = _get_store(request).get_records(CACHE_KEY_BANK_STATEMENTS)
    return RecordsResponse(cacheKey=CACHE_KEY_BANK_STATEMENTS, data=records)


@router.post("/bank-statements")
async def save_bank_statements(request: Request, body: SaveBankStatementsRequest) -> AckResponse:
    count = _get_store(request).save_records(CACHE_KEY_BANK_STATEMENTS, body.bankStatements)
    return AckResponse(cacheKey=CACHE_KEY_BANK_STATEMENTS, count=count)


@router.get("/orden-tienda-map")
async def get_orden_tienda_map(request: Request) -> RecordsResponse:
    records = _get_store(request).get_records(CACHE_KEY_ORDEN_TIENDA_MAP)
    return RecordsResponse(cacheKey=CACHE_KEY_ORDEN_TIENDA_MAP, data=records)


@router.post("/orden-tienda-map")
async def save_orden_tienda_map(request: Request, body: SaveOrdenTiendaMapRequest) -> AckResponse:
    count = _get_store(request).save_records(CACHE_KEY_ORDEN_TIENDA_MAP, body.mappings)
    return AckResponse(cacheKey=CACHE_KEY_ORDEN_TIENDA_MAP, count=count)
