from typing import Any

from pydantic import BaseModel

from shared.models.cache import CacheMetadataEntry


class AckResponse(BaseModel):
    success: bool = True
    cacheKey: str
    count: int | None = None


class MetadataUpdateResponse(BaseModel):
    success: bool = True
    data: CacheMetadataEntry


class RecordsResponse(BaseModel):
    success: bool = True
    cacheKey: str
    data: list[dict[str, Any]]
