from datetime import datetime
from typing import Any

from pydantic import BaseModel


class InvalidateRequest(BaseModel):
    cacheKey: str


class MetadataUpdateRequest(BaseModel):
    cacheKey: str
    sourceDataHash: str | None = None


class UpdateStatusesRequest(BaseModel):
    currentDate: datetime


class SaveInstallmentsRequest(BaseModel):
    installments: list[dict[str, Any]]


class SaveBankStatementsRequest(BaseModel):
    bankStatements: list[dict[str, Any]]


class SaveOrdenTiendaMapRequest(BaseModel):
    mappings: list[dict[str, Any]]
