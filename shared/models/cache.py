"""Wire and result models for the remote cache store."""

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel

CACHE_KEY_INSTALLMENTS = "installments"
CACHE_KEY_BANK_STATEMENTS = "bankStatements"
CACHE_KEY_ORDEN_TIENDA_MAP = "ordenTiendaMap"
CACHE_KEYS = (CACHE_KEY_INSTALLMENTS, CACHE_KEY_BANK_STATEMENTS, CACHE_KEY_ORDEN_TIENDA_MAP)


class CacheMetadataEntry(BaseModel):
    """
    Stored metadata of one cache key.
    """
    sourceDataHash: str | None = None
    calculatedAt: datetime
    dataVersion: int


class CacheMetadataSet(BaseModel):
    """
    Metadata of all known cache keys. A key that was never populated (or was invalidated) is None.
    """
    installments: CacheMetadataEntry | None = None
    bankStatements: CacheMetadataEntry | None = None
    ordenTiendaMap: CacheMetadataEntry | None = None

    def get_entry(self, cache_key: str) -> CacheMetadataEntry | None:
        """
        Returns the entry for a cache key, or None for unpopulated or unknown keys.
        """
        if cache_key not in CACHE_KEYS:
            return None
        return getattr(self, cache_key)


class CacheMetadataResponse(BaseModel):
    """
    Response of GET /api/cache/metadata. On transport failure the client returns success=False and data=None.
    """
    success: bool
    data: CacheMetadataSet | None = None

    def get_entry(self, cache_key: str) -> CacheMetadataEntry | None:
        if not self.success or self.data is None:
            return None
        return self.data.get_entry(cache_key)


class UpdateStatusesResponse(BaseModel):
    updated: int = 0


class SaveResult(BaseModel):
    """
    Outcome of the two-step save.

    records_saved=True with metadata_saved=False means the records are durable but the
    metadata still describes the previous content; retry with update_metadata().
    """
    cache_key: str
    records_saved: bool = False
    metadata_saved: bool = False

    @property
    def success(self) -> bool:
        return self.records_saved and self.metadata_saved


class SyncOutcome(BaseModel):
    """
    Result of one cache synchronisation cycle.

    state:
        hit        stored hash equals the dataset fingerprint, nothing was recomputed
        populated  records were recomputed and saved together with the new hash
        partial    records were saved but the metadata update failed
        failed     recompute or records write failed, the cache is treated as stale
    """
    cache_key: str
    state: Literal["hit", "populated", "partial", "failed"]
    data_hash: str
    previous_hash: str | None = None
    invalidated: bool = False
    records: list[Any] | None = None
