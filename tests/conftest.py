"""
Shared fixtures: StoreClient di atas fakeredis.
Setiap test mendapat FakeServer sendiri.
"""

import fakeredis
import pytest
import pytest_asyncio
from fakeredis import FakeAsyncRedis

from coordcache.communication.store_client import StoreClient
from coordcache.services.base_service import ErrorPolicy
from coordcache.services.cache_service import CacheService
from coordcache.services.lock_manager import LockManager
from coordcache.services.ranked_set import RankedSetService
from coordcache.utils.metrics import MetricsCollector


@pytest.fixture
def metrics():
    return MetricsCollector()


@pytest.fixture
def server():
    return fakeredis.FakeServer()


@pytest_asyncio.fixture
async def store(server, metrics):
    client = StoreClient(FakeAsyncRedis(server=server, decode_responses=True), metrics=metrics)
    yield client
    await client.close()


@pytest_asyncio.fixture
async def dead_store(metrics):
    """StoreClient yang server-nya tidak bisa dihubungi"""
    dead_server = fakeredis.FakeServer()
    dead_server.connected = False
    client = StoreClient(FakeAsyncRedis(server=dead_server, decode_responses=True), metrics=metrics)
    yield client
    await client.close()


@pytest.fixture
def cache(store):
    return CacheService(store, policy=ErrorPolicy.SWALLOW)


@pytest.fixture
def locks(store):
    return LockManager(store, policy=ErrorPolicy.SWALLOW, retry_interval=0.01, max_retry_interval=0.05)


@pytest.fixture
def ranked(store):
    return RankedSetService(store, policy=ErrorPolicy.SWALLOW)
