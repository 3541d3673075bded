"""Shared test fixtures.

Redis is replaced by a dict-backed AsyncMock. Tests never require a running
Redis instance.
"""

from unittest.mock import AsyncMock

import pytest
from httpx import ASGITransport, AsyncClient

from gridboard.api.deps import (
    get_dashboard_store,
    get_data_source_registry,
    get_hint_service,
    get_redis,
)
from gridboard.core.storage import LocalStorage
from gridboard.main import app
from gridboard.services.dashboard_store import DashboardStore
from gridboard.services.data_source_registry import DataSourceRegistry
from gridboard.services.endpoint_fetcher import EndpointFetcher
from gridboard.services.hint_service import HintService


def make_redis(data: dict[str, str] | None = None, fail: bool = False) -> AsyncMock:
    """An AsyncMock Redis whose get/set read and write a plain dict."""
    store: dict[str, str] = {} if data is None else data
    redis = AsyncMock()

    async def _get(key):
        return store.get(key)

    async def _set(key, value):
        store[key] = value
        return True

    if fail:
        redis.get = AsyncMock(side_effect=ConnectionError("Redis down"))
        redis.set = AsyncMock(side_effect=ConnectionError("Redis down"))
        redis.ping = AsyncMock(side_effect=ConnectionError("Redis down"))
    else:
        redis.get = AsyncMock(side_effect=_get)
        redis.set = AsyncMock(side_effect=_set)
        redis.ping = AsyncMock(return_value=True)
    redis.data = store
    return redis


@pytest.fixture
def redis_factory():
    return make_redis


@pytest.fixture
def redis():
    return make_redis()


@pytest.fixture
def storage(redis) -> LocalStorage:
    return LocalStorage(redis, key_prefix="test:")


@pytest.fixture
def registry(storage) -> DataSourceRegistry:
    return DataSourceRegistry(storage, fetcher=EndpointFetcher())


@pytest.fixture
def store(storage) -> DashboardStore:
    return DashboardStore(storage)


@pytest.fixture
def hint_service(storage) -> HintService:
    return HintService(storage)


@pytest.fixture
async def client(redis, store, registry, hint_service) -> AsyncClient:
    """httpx AsyncClient wired to the app with in-memory services."""
    app.dependency_overrides[get_redis] = lambda: redis
    app.dependency_overrides[get_dashboard_store] = lambda: store
    app.dependency_overrides[get_data_source_registry] = lambda: registry
    app.dependency_overrides[get_hint_service] = lambda: hint_service

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
