"""Cache coordination service.

Compares the fingerprint of a source dataset with the metadata stored in the remote
cache, and on mismatch invalidates the key, recomputes the derived records and saves
them together with the new fingerprint. Every remote call is best effort: failures are
logged and returned as results, never raised to the caller.
"""

import inspect
from datetime import datetime
from typing import Any, Awaitable, Callable

import httpx
import pytz

from shared.clients.ClientInterface import ClientRequestError
from shared.clients.cache.CacheClientInterface import CacheClientInterface
from shared.helper.HelperConfig import HelperConfig
from shared.helper.fingerprint import generate_data_hash
from shared.models.cache import CacheMetadataResponse, SaveResult, SyncOutcome
from shared.state.DailyUpdateGate import DailyUpdateGate

# errors of a single remote call that degrade to "cache state unknown"
_REMOTE_ERRORS = (httpx.HTTPError, ClientRequestError, ValueError)

RecomputeFn = Callable[[list[Any]], list[Any] | Awaitable[list[Any]]]


class CacheCoordinator:
    """Orchestrates metadata reads, invalidation, recompute and save for the cache keys."""

    def __init__(
        self,
        helper_config: HelperConfig,
        cache_client: CacheClientInterface,
        daily_gate: DailyUpdateGate,
    ) -> None:
        self.logging = helper_config.get_logger()
        self._cache_client = cache_client
        self._daily_gate = daily_gate

    ##########################################
    ########### REMOTE OPERATIONS ############
    ##########################################

    async def fetch_metadata(self) -> CacheMetadataResponse:
        """Read the stored metadata of all cache keys.

        Returns:
            CacheMetadataResponse: The stored metadata, or success=False and data=None if the
            store could not be reached. Callers treat the latter as "assume stale".
        """
        try:
            return await self._cache_client.get_metadata()
        except _REMOTE_ERRORS as e:
            self.logging.error("Error fetching cache metadata: %s", e)
            return CacheMetadataResponse(success=False, data=None)

    async def invalidate(self, cache_key: str, new_hash: str | None = None) -> bool:
        """Discard the cached records and metadata of a cache key.

        A failed invalidation does not stop the caller's recompute; the stale entry is
        overwritten by the following save or retried on the next cycle.

        Args:
            cache_key (str): The cache key to invalidate.
            new_hash (str | None): Fingerprint of the data that triggered the invalidation (logged only).

        Returns:
            bool: True if the store acknowledged the invalidation.
        """
        try:
            await self._cache_client.post_invalidate(cache_key)
        except _REMOTE_ERRORS as e:
            self.logging.error("Error invalidating cache '%s' (new hash %s): %s", cache_key, new_hash, e)
            return False
        self.logging.info("Invalidated cache '%s' (new hash %s)", cache_key, new_hash)
        return True

    async def save(self, cache_key: str, records: list[Any], new_hash: str) -> SaveResult:
        """Persist computed records, then the metadata describing them.

        If the records write fails the metadata is left untouched. If only the metadata
        write fails the records stay durable and the result reports metadata_saved=False,
        so the caller can retry with update_metadata().

        Args:
            cache_key (str): The cache key.
            records (list[Any]): Full snapshot of the computed records.
            new_hash (str): Fingerprint of the dataset the records were computed from.

        Returns:
            SaveResult: Which of the two steps succeeded.
        """
        result = SaveResult(cache_key=cache_key)
        try:
            await self._cache_client.post_records(cache_key, records)
        except _REMOTE_ERRORS as e:
            self.logging.error("Error saving records for cache '%s', metadata left unchanged: %s", cache_key, e)
            return result
        result.records_saved = True

        result.metadata_saved = await self.update_metadata(cache_key, new_hash)
        if result.metadata_saved:
            self.logging.info("Saved %d records for cache '%s' (hash %s)", len(records), cache_key, new_hash)
        else:
            self.logging.warning(
                "Records for cache '%s' are saved but its metadata still describes the previous data.",
                cache_key,
            )
        return result

    async def update_metadata(self, cache_key: str, new_hash: str) -> bool:
        """Write the metadata hash of a cache key. The store bumps calculatedAt and dataVersion.

        Returns:
            bool: True if the store acknowledged the update.
        """
        try:
            await self._cache_client.post_metadata_update(cache_key, new_hash)
        except _REMOTE_ERRORS as e:
            self.logging.error("Error updating metadata for cache '%s': %s", cache_key, e)
            return False
        return True

    async def trigger_time_based_recompute(self) -> int:
        """Ask the store to recompute installment statuses as of now.

        Returns:
            int: Number of installments updated, 0 on any failure.
        """
        try:
            response = await self._cache_client.post_update_statuses(datetime.now(pytz.utc))
        except _REMOTE_ERRORS as e:
            self.logging.error("Error updating time-based statuses: %s", e)
            return 0
        self.logging.info("Time-based status update changed %d installments", response.updated)
        return response.updated

    ##########################################
    ############# ORCHESTRATION ##############
    ##########################################

    def is_stale(self, cache_key: str, data_hash: str, metadata: CacheMetadataResponse) -> bool:
        """Whether the stored entry of a cache key no longer matches a fingerprint.

        Unknown metadata (failed fetch), an unpopulated key or an entry without a hash
        all count as stale.
        """
        entry = metadata.get_entry(cache_key)
        if entry is None or entry.sourceDataHash is None:
            return True
        return entry.sourceDataHash != data_hash

    async def sync_cache(self, cache_key: str, dataset: list[Any], recompute: RecomputeFn) -> SyncOutcome:
        """Bring one cache key in line with its source dataset.

        Fingerprints the dataset and compares it with the stored metadata. On a match
        nothing is recomputed. Otherwise the key is invalidated, ``recompute(dataset)``
        is called (sync or async) and its records are saved with the new fingerprint.

        Args:
            cache_key (str): The cache key, e.g. "installments".
            dataset (list[Any]): The raw source rows.
            recompute (RecomputeFn): Builds the derived records from the source rows.

        Returns:
            SyncOutcome: The state the key ended up in.
        """
        data_hash = generate_data_hash(dataset)
        metadata = await self.fetch_metadata()
        entry = metadata.get_entry(cache_key)
        previous_hash = entry.sourceDataHash if entry else None

        if not self.is_stale(cache_key, data_hash, metadata):
            self.logging.info("Cache '%s' is up to date (hash %s)", cache_key, data_hash)
            return SyncOutcome(cache_key=cache_key, state="hit", data_hash=data_hash, previous_hash=previous_hash)

        self.logging.info("Cache '%s' is stale (stored %s, current %s)", cache_key, previous_hash, data_hash)
        invalidated = await self.invalidate(cache_key, data_hash)

        try:
            records = recompute(dataset)
            if inspect.isawaitable(records):
                records = await records
            records = list(records)
        except Exception:
            self.logging.exception("Recompute for cache '%s' failed", cache_key)
            return SyncOutcome(
                cache_key=cache_key,
                state="failed",
                data_hash=data_hash,
                previous_hash=previous_hash,
                invalidated=invalidated,
            )

        result = await self.save(cache_key, records, data_hash)
        if result.success:
            state = "populated"
        elif result.records_saved:
            state = "partial"
        else:
            state = "failed"

        return SyncOutcome(
            cache_key=cache_key,
            state=state,
            data_hash=data_hash,
            previous_hash=previous_hash,
            invalidated=invalidated,
            records=records,
        )

    async def refresh_statuses_if_due(self) -> int:
        """Run the time-based status update at most once per local calendar day.

        Returns:
            int: Number of installments updated, 0 if not due or on failure.
        """
        if not self._daily_gate.should_update():
            self.logging.debug("Daily status update already done today (%s)", self._daily_gate.get_last_update())
            return 0
        return await self.trigger_time_based_recompute()
