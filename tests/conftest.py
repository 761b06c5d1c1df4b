"""Shared fixtures: configuration from a patched environment, a fake clock and
cache clients wired to the in-memory reference server or to mock transports."""

import logging
from datetime import datetime
from typing import Callable

import httpx
import pytest
import pytest_asyncio
import pytz

from server.api.api_app import create_app
from server.core.CacheStore import CacheStore
from services.cache_sync.CacheCoordinator import CacheCoordinator
from shared.clients.cache.http.CacheClientHttp import CacheClientHttp
from shared.helper.HelperConfig import HelperConfig
from shared.logging.logging_setup import ColorLogger
from shared.state.DailyUpdateGate import DailyUpdateGate
from shared.state.StateStore import StateStore

BASE_URL = "http://cache.test"


class FakeClock:
    """Callable returning a settable instant."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def helper_config(monkeypatch, tmp_path) -> HelperConfig:
    monkeypatch.setenv("CACHE_HTTP_BASE_URL", BASE_URL)
    monkeypatch.setenv("TIMEZONE", "Europe/Berlin")
    monkeypatch.setenv("STATE_FILE", str(tmp_path / "state" / "local_state.json"))
    monkeypatch.delenv("CACHE_TIMEOUT", raising=False)
    monkeypatch.delenv("CACHE_ENGINE", raising=False)
    return HelperConfig(logger=ColorLogger(logging.getLogger("tests")))


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(pytz.utc.localize(datetime(2026, 10, 19, 8, 0)))


@pytest.fixture
def state_store(helper_config) -> StateStore:
    return StateStore(helper_config=helper_config)


@pytest.fixture
def daily_gate(helper_config, state_store, clock) -> DailyUpdateGate:
    return DailyUpdateGate(helper_config=helper_config, state_store=state_store, now=clock)


@pytest.fixture
def cache_store(helper_config) -> CacheStore:
    return CacheStore(helper_config=helper_config)


@pytest.fixture
def cache_app(helper_config, cache_store):
    return create_app(helper_config=helper_config, store=cache_store)


@pytest_asyncio.fixture
async def server_client(helper_config, cache_app):
    """Cache client talking to the reference server in-process."""
    client = CacheClientHttp(helper_config=helper_config)
    await client.boot(transport=httpx.ASGITransport(app=cache_app))
    yield client
    await client.close()


@pytest.fixture
def server_coordinator(helper_config, server_client, daily_gate) -> CacheCoordinator:
    return CacheCoordinator(helper_config=helper_config, cache_client=server_client, daily_gate=daily_gate)


@pytest_asyncio.fixture
async def make_mock_client(helper_config):
    """Factory for cache clients backed by an httpx.MockTransport handler."""
    clients: list[CacheClientHttp] = []

    async def _make(handler: Callable[[httpx.Request], httpx.Response]) -> CacheClientHttp:
        client = CacheClientHttp(helper_config=helper_config)
        await client.boot(transport=httpx.MockTransport(handler))
        clients.append(client)
        return client

    yield _make
    for client in clients:
        await client.close()
