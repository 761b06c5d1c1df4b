"""Cache sync runner entry point.

Loads the raw order rows from a JSON file (SOURCE_DATA_FILE), brings the remote
installments cache in line with them and runs the daily status update when due.

Usage:
    python -m services.cache_sync.cache_sync
"""

import asyncio
import json

import httpx

from services.cache_sync.CacheCoordinator import CacheCoordinator
from services.installments.installment_utils import extract_installments
from services.installments.metrics import aggregate_metrics
from shared.clients.cache.CacheClientManager import CacheClientManager
from shared.helper.HelperConfig import HelperConfig
from shared.logging.logging_setup import setup_logging
from shared.models.cache import CACHE_KEY_INSTALLMENTS
from shared.state.DailyUpdateGate import DailyUpdateGate
from shared.state.StateStore import StateStore


def load_rows(path: str) -> list:
    """Read the source rows. The file holds a JSON array of objects."""
    with open(path, "r", encoding="utf-8") as f:
        rows = json.load(f)
    return rows if isinstance(rows, list) else []


async def main() -> None:
    """Run one cache synchronisation for the installments key."""
    logger = setup_logging()
    config = HelperConfig(logger=logger)

    cache_client = CacheClientManager(helper_config=config).get_client()
    coordinator = CacheCoordinator(
        helper_config=config,
        cache_client=cache_client,
        daily_gate=DailyUpdateGate(helper_config=config, state_store=StateStore(helper_config=config)),
    )

    rows = load_rows(config.get_string_val("SOURCE_DATA_FILE"))
    logger.info("Loaded %d source rows", len(rows))

    try:
        await cache_client.boot()
        try:
            health = await cache_client.do_healthcheck()
            if not health.is_success:
                logger.warning("Cache store answered healthcheck with status %d.", health.status_code)
        except httpx.HTTPError as e:
            logger.warning("Cache store is not reachable, cache state unknown: %s", e)

        outcome = await coordinator.sync_cache(CACHE_KEY_INSTALLMENTS, rows, extract_installments)
        logger.info("Cache '%s' finished as %s (hash %s)", outcome.cache_key, outcome.state, outcome.data_hash, color="cyan")

        updated = await coordinator.refresh_statuses_if_due()
        if updated:
            logger.info("Daily status update changed %d installments", updated)

        if outcome.records is not None:
            metrics = aggregate_metrics(outcome.records)
            logger.info(
                "Paid %d (%.2f), scheduled %d (%.2f), overdue %d (%.2f)",
                metrics.paidCount,
                metrics.paidAmount,
                metrics.scheduledCount,
                metrics.scheduledAmount,
                metrics.overdueCount,
                metrics.overdueAmount,
                color="green",
            )
    finally:
        await cache_client.close()


if __name__ == "__main__":
    asyncio.run(main())
