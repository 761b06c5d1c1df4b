"""FastAPI application factory for the reference cache API."""

import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from server.core.CacheStore import CacheStore
from server.routers.CacheRouter import router as cache_router
from shared.helper.HelperConfig import HelperConfig


def create_app(helper_config: HelperConfig, store: CacheStore | None = None) -> FastAPI:
    """Build the cache API application.

    The store is attached at creation time so the app also works under transports
    that do not run lifespan events (e.g. httpx.ASGITransport).

    Args:
        helper_config (HelperConfig): Configuration and logger.
        store (CacheStore | None): Store to serve; a fresh in-memory store if omitted.

    Returns:
        FastAPI: The configured application.
    """
    app = FastAPI(
        title="cuota_cache",
        description=(
            "Reference cache store for the installment dashboard. "
            "Serves cache metadata, records snapshots per cache key and the "
            "time-based installment status update under /api/cache."
        ),
        version=os.getenv("APP_VERSION", "unknown"),
    )
    app.state.helper_config = helper_config
    app.state.logging = helper_config.get_logger()
    app.state.cache_store = store or CacheStore(helper_config=helper_config)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(cache_router)
    return app
