"""In-memory cache store behind the reference cache API.

Holds one records snapshot and one metadata entry per cache key. Nothing is persisted;
the store lives as long as the server process.
"""

from datetime import datetime
from typing import Any

import pytz

from services.installments.installment_utils import parse_excel_date
from shared.helper.HelperConfig import HelperConfig
from shared.models.cache import CACHE_KEYS, CACHE_KEY_INSTALLMENTS, CacheMetadataEntry, CacheMetadataSet
from shared.models.installment import STATUS_DELAYED, STATUS_DONE, STATUS_GRACED, STATUS_SCHEDULED

# statuses the time-based update may still change
_OPEN_STATUSES = ("", "pendiente", STATUS_SCHEDULED, STATUS_GRACED)


class UnknownCacheKeyError(ValueError):
    def __init__(self, cache_key: str):
        super().__init__(f"Unknown cache key '{cache_key}'. Supported keys: {', '.join(CACHE_KEYS)}")
        self.cache_key = cache_key


class CacheStore:
    def __init__(self, helper_config: HelperConfig) -> None:
        self.logging = helper_config.get_logger()
        self._metadata: dict[str, CacheMetadataEntry] = {}
        self._records: dict[str, list[dict[str, Any]]] = {}

    def _check_key(self, cache_key: str) -> None:
        if cache_key not in CACHE_KEYS:
            raise UnknownCacheKeyError(cache_key)

    ##########################################
    ############### METADATA #################
    ##########################################

    def get_metadata_set(self) -> CacheMetadataSet:
        return CacheMetadataSet(**{key: self._metadata.get(key) for key in CACHE_KEYS})

    def update_metadata(self, cache_key: str, source_data_hash: str | None = None) -> CacheMetadataEntry:
        """
        Creates the metadata entry of a key (version 1) or bumps its version and timestamp.
        Without a new hash the stored one is kept.
        """
        self._check_key(cache_key)
        existing = self._metadata.get(cache_key)
        entry = CacheMetadataEntry(
            sourceDataHash=source_data_hash or (existing.sourceDataHash if existing else None),
            calculatedAt=datetime.now(pytz.utc),
            dataVersion=existing.dataVersion + 1 if existing else 1,
        )
        self._metadata[cache_key] = entry
        return entry

    def invalidate(self, cache_key: str) -> None:
        """
        Drops metadata and records of a key.
        """
        self._check_key(cache_key)
        self._metadata.pop(cache_key, None)
        self._records.pop(cache_key, None)
        self.logging.info("Invalidated cache and cleared data: %s", cache_key)

    ##########################################
    ################ RECORDS #################
    ##########################################

    def get_records(self, cache_key: str) -> list[dict[str, Any]]:
        self._check_key(cache_key)
        return list(self._records.get(cache_key, []))

    def save_records(self, cache_key: str, records: list[dict[str, Any]]) -> int:
        """
        Replaces the records snapshot of a key. Metadata is written separately.
        """
        self._check_key(cache_key)
        self._records[cache_key] = [dict(record) for record in records]
        self.logging.info("Saved %d records for cache '%s'", len(records), cache_key)
        return len(records)

    def update_installment_statuses(self, current_date: datetime) -> int:
        """
        Re-evaluates time-dependent statuses of the cached installments.

        Open installments with a real payment date become "done"; open installments
        whose due date lies before the given day become "delayed".

        Returns:
            int: Number of installments changed.
        """
        today = current_date.date()
        updated = 0
        for record in self._records.get(CACHE_KEY_INSTALLMENTS, []):
            status = str(record.get("estadoCuota") or "").strip().lower()
            if status not in _OPEN_STATUSES:
                continue
            due_date = parse_excel_date(record.get("fechaCuota"))
            if record.get("fechaPagoReal"):
                record["estadoCuota"] = STATUS_DONE
            elif due_date is not None and due_date < today:
                record["estadoCuota"] = STATUS_DELAYED
            else:
                continue
            updated += 1

        self.logging.info("Updated %d installment statuses based on date %s", updated, today.isoformat())
        return updated
