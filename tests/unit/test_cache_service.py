"""
Unit tests untuk CacheService (cache facade).
"""

import asyncio
import logging

import pytest

from coordcache.errors import NotFound, OperationFailed, StoreUnavailable
from coordcache.services.base_service import ErrorPolicy
from coordcache.services.cache_service import CacheService
from coordcache.utils.timeunit import TimeUnit


@pytest.mark.asyncio
async def test_set_with_expire_does_not_overwrite(cache):
    """Call kedua gagal selama key masih ada"""
    assert await cache.set_with_expire('user:1', {'name': 'ana'}, 60) is True
    assert await cache.set_with_expire('user:1', {'name': 'budi'}, 60) is False
    
    assert await cache.get('user:1') == {'name': 'ana'}


@pytest.mark.asyncio
async def test_set_with_expire_uses_unit(cache, store):
    await cache.set_with_expire('k', 'v', 2, TimeUnit.MINUTES)
    
    ttl_ms = await store.ttl('k')
    assert 60_000 < ttl_ms <= 120_000


@pytest.mark.asyncio
async def test_value_stored_as_canonical_json(cache, store):
    await cache.set_with_expire('k', {'b': 2, 'a': [1, 'x']}, 60)
    
    assert await store.get('k') == '{"a":[1,"x"],"b":2}'


@pytest.mark.asyncio
async def test_get_absent_and_non_json(cache, store):
    assert await cache.get('missing') is None
    
    await store.set_if_absent('raw', 'plain text')
    assert await cache.get('raw') == 'plain text'


@pytest.mark.asyncio
async def test_get_records_hits_and_misses(cache, metrics):
    await cache.set_with_expire('k', 1, 60)
    await cache.get('k')
    await cache.get('missing')
    
    assert metrics.get_cache_hit_rate() == 0.5


@pytest.mark.asyncio
async def test_entry_expires(cache):
    await cache.set_with_expire('k', 'v', 100, TimeUnit.MILLISECONDS)
    await asyncio.sleep(0.25)
    
    assert await cache.exists('k') is False
    assert await cache.set_with_expire('k', 'v2', 60) is True


@pytest.mark.asyncio
async def test_get_key_with_expire_returns_flag_not_value(cache, store):
    await cache.set_with_expire('k', 'v', 5)
    
    result = await cache.get_key_with_expire('k', 10, TimeUnit.MINUTES)
    
    assert result is True
    assert await store.ttl('k') > 5_000
    assert await cache.get_key_with_expire('missing', 10) is None


@pytest.mark.asyncio
async def test_get_expire(cache, store):
    await cache.set_with_expire('k', 'v', 90)
    assert await cache.get_expire('k', TimeUnit.MINUTES) in (0, 1)
    assert 0 < await cache.get_expire('k') <= 90
    
    await store.set_if_absent('forever', 'v')
    assert await cache.get_expire('forever') == -1
    assert await cache.get_expire('missing') is None


@pytest.mark.asyncio
async def test_delete(cache):
    await cache.set_with_expire('k', 'v', 60)
    
    assert await cache.delete('k') is True
    assert await cache.exists('k') is False
    assert await cache.delete('k') is False


@pytest.mark.asyncio
async def test_rename_by_key(cache):
    await cache.set_with_expire('old', 'a', 60)
    await cache.set_with_expire('taken', 'b', 60)
    
    assert await cache.rename_by_key('old', 'taken') is False
    assert await cache.exists('old') is True
    
    assert await cache.rename_by_key('old', 'new') is True
    assert await cache.exists('old') is False
    assert await cache.get('new') == 'a'
    
    assert await cache.rename_by_key('missing', 'other') is False


@pytest.mark.asyncio
async def test_set_permanent_by_key(cache, store):
    await cache.set_with_expire('k', 'v', 60)
    
    assert await cache.set_permanent_by_key('k') is True
    assert await store.ttl('k') == -1
    assert await cache.set_permanent_by_key('missing') is False


@pytest.mark.asyncio
async def test_counters_and_bits(cache):
    assert await cache.increment('hits') == 1
    assert await cache.increment('hits', 9) == 10
    assert await cache.decrement('hits', 4) == 6
    
    assert await cache.set_bit('seen', 7, True) is False
    assert await cache.set_bit('seen', 7, True) is True
    assert await cache.bit_count('seen') == 1


@pytest.mark.asyncio
async def test_increment_on_text_fails_soft(cache):
    await cache.set_with_expire('k', 'not a number', 60)
    
    assert await cache.increment('k') is None


@pytest.mark.asyncio
async def test_swallow_policy_returns_sentinels(dead_store, caplog):
    """Store tidak bisa dihubungi: sentinel + error log, tanpa exception"""
    cache = CacheService(dead_store, policy=ErrorPolicy.SWALLOW)
    
    with caplog.at_level(logging.ERROR):
        assert await cache.get('k') is None
        assert await cache.exists('k') is False
        assert await cache.set_with_expire('k', 'v', 60) is False
        assert await cache.delete('k') is False
        assert await cache.rename_by_key('k', 'n') is False
        assert await cache.get_key_with_expire('k', 60) is None
    
    assert 'cache-get error, key=k' in caplog.text


@pytest.mark.asyncio
async def test_propagate_policy_raises(dead_store):
    cache = CacheService(dead_store, policy=ErrorPolicy.PROPAGATE)
    
    with pytest.raises(StoreUnavailable):
        await cache.get('k')
    
    with pytest.raises(StoreUnavailable):
        await cache.set_with_expire('k', 'v', 60)


@pytest.mark.asyncio
async def test_propagate_policy_missing_key_raises_not_found(store):
    cache = CacheService(store, policy=ErrorPolicy.PROPAGATE)
    
    with pytest.raises(NotFound) as exc_info:
        await cache.delete('missing')
    assert exc_info.value.key == 'missing'
    
    with pytest.raises(NotFound):
        await cache.set_permanent_by_key('missing')
    
    with pytest.raises(NotFound):
        await cache.get_key_with_expire('missing', 60)
    
    # get tetap return None untuk key yang tidak ada
    assert await cache.get('missing') is None


@pytest.mark.asyncio
async def test_unencodable_value_fails_soft(cache, store, caplog):
    with caplog.at_level(logging.ERROR):
        assert await cache.set_with_expire('k', {1, 2}, 60) is False
        assert await cache.set_with_expire('k', object(), 60) is False

    assert await store.exists('k') is False
    assert 'cache-setWithExpire error, key=k' in caplog.text


@pytest.mark.asyncio
async def test_unencodable_value_propagates_as_operation_failed(store):
    cache = CacheService(store, policy=ErrorPolicy.PROPAGATE)

    with pytest.raises(OperationFailed) as exc_info:
        await cache.set_with_expire('k', {1, 2}, 60)
    assert exc_info.value.key == 'k'
    assert isinstance(exc_info.value.__cause__, TypeError)


@pytest.mark.asyncio
async def test_policy_failures_logged_by_module_logger(dead_store, caplog):
    """Swallowed failures dan missing keys di-log lewat logger base_service"""
    cache = CacheService(dead_store, policy=ErrorPolicy.SWALLOW)

    with caplog.at_level(logging.ERROR, logger='coordcache.services.base_service'):
        await cache.exists('k')

    records = [r for r in caplog.records if r.name.startswith('coordcache')]
    assert [r.name for r in records] == ['coordcache.services.base_service']
    assert records[0].levelno == logging.ERROR


if __name__ == "__main__":
    pytest.main([__file__, '-v'])
