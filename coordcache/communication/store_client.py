"""
Store client: thin transport layer di atas redis.asyncio.

Semua operasi adalah single round-trip ke Redis, kecuali execute_script
yang dijalankan atomically di server. Client tidak melakukan retry;
transport failure di-raise sebagai StoreUnavailable.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence

import redis.asyncio as aioredis
from redis.asyncio.retry import Retry
from redis.backoff import NoBackoff
from redis.exceptions import (
    ConnectionError as RedisConnectionError,
    RedisError,
    ResponseError,
    TimeoutError as RedisTimeoutError,
)

from ..errors import OperationFailed, StoreUnavailable
from ..utils.config import Config
from ..utils.metrics import MetricsCollector, measure_time
from ..utils.metrics import metrics as default_metrics

logger = logging.getLogger(__name__)


class StoreClient:
    """
    Async client untuk remote key-value store.

    Dibuat secara eksplisit dan di-inject ke services; tidak ada
    global connection. Redis client harus memakai decode_responses=True.
    """

    def __init__(self, redis: aioredis.Redis, metrics: Optional[MetricsCollector] = None):
        """
        Args:
            redis: Redis client (redis.asyncio.Redis atau kompatibel)
            metrics: Metrics collector, default module-level collector
        """
        self.redis = redis
        self.metrics = metrics or default_metrics

        # Script body -> registered AsyncScript (EVALSHA dengan EVAL fallback)
        self._scripts: Dict[str, Any] = {}

    @classmethod
    def from_config(cls, config=Config, metrics: Optional[MetricsCollector] = None) -> 'StoreClient':
        """Create client dari Config"""
        redis = aioredis.Redis(
            host=config.REDIS_HOST,
            port=config.REDIS_PORT,
            db=config.REDIS_DB,
            password=config.REDIS_PASSWORD,
            socket_timeout=config.REDIS_SOCKET_TIMEOUT,
            retry=Retry(NoBackoff(), 0),
            decode_responses=True
        )
        logger.info(f"StoreClient configured for {config.REDIS_HOST}:{config.REDIS_PORT}/{config.REDIS_DB}")
        return cls(redis, metrics=metrics)

    async def close(self):
        """Close connection pool"""
        await self.redis.aclose()

    async def _call(self, command: str, key: Optional[str], func, *args, **kwargs):
        """
        Jalankan satu command dan map Redis errors ke StoreError.

        Args:
            command: Nama command untuk metrics dan error message
            key: Key yang dioperasikan (untuk error context)
            func: Coroutine function dari redis client
        """
        with measure_time() as timer:
            try:
                result = await func(*args, **kwargs)
            except (RedisConnectionError, RedisTimeoutError) as e:
                self.metrics.record_error(command, 'unavailable')
                raise StoreUnavailable(f"{command} failed, store unreachable: {e}", key=key) from e
            except RedisError as e:
                self.metrics.record_error(command, 'operation_failed')
                raise OperationFailed(f"{command} rejected by store: {e}", key=key) from e

        self.metrics.record_command(command, timer.elapsed)
        return result

    # ------------------------------------------------------------------
    # Keys dan string values
    # ------------------------------------------------------------------

    async def ping(self) -> bool:
        return bool(await self._call('PING', None, self.redis.ping))

    async def exists(self, key: str) -> bool:
        return await self._call('EXISTS', key, self.redis.exists, key) > 0

    async def get(self, key: str) -> Optional[str]:
        return await self._call('GET', key, self.redis.get, key)

    async def set_if_absent(self, key: str, value: str, ttl_ms: Optional[int] = None) -> bool:
        """SET NX PX. Returns True jika key ditulis"""
        result = await self._call('SET', key, self.redis.set, key, value, nx=True, px=ttl_ms)
        return bool(result)

    async def set_if_present(self, key: str, value: str, ttl_ms: Optional[int] = None) -> bool:
        """SET XX PX. Returns True jika key sudah ada dan ditimpa"""
        result = await self._call('SET', key, self.redis.set, key, value, xx=True, px=ttl_ms)
        return bool(result)

    async def delete(self, key: str) -> bool:
        return await self._call('DEL', key, self.redis.delete, key) > 0

    async def expire(self, key: str, ttl_ms: int) -> bool:
        return bool(await self._call('PEXPIRE', key, self.redis.pexpire, key, ttl_ms))

    async def persist(self, key: str) -> bool:
        return bool(await self._call('PERSIST', key, self.redis.persist, key))

    async def ttl(self, key: str) -> int:
        """
        Remaining TTL dalam milliseconds.
        Returns -1 jika key tanpa expiry, -2 jika key tidak ada.
        """
        return int(await self._call('PTTL', key, self.redis.pttl, key))

    async def rename_if_absent(self, old_key: str, new_key: str) -> bool:
        """
        RENAMENX. Returns False jika old_key tidak ada
        atau new_key sudah ada.
        """
        try:
            return bool(await self._call('RENAMENX', old_key, self.redis.renamenx, old_key, new_key))
        except OperationFailed as e:
            cause = e.__cause__
            if isinstance(cause, ResponseError) and 'no such key' in str(cause).lower():
                return False
            raise

    async def increment(self, key: str, delta: int = 1) -> int:
        return int(await self._call('INCRBY', key, self.redis.incrby, key, delta))

    async def decrement(self, key: str, delta: int = 1) -> int:
        return int(await self._call('DECRBY', key, self.redis.decrby, key, delta))

    async def set_bit(self, key: str, offset: int, bit: bool) -> int:
        """SETBIT. Returns bit lama di offset tersebut"""
        return int(await self._call('SETBIT', key, self.redis.setbit, key, offset, 1 if bit else 0))

    async def bit_count(self, key: str) -> int:
        return int(await self._call('BITCOUNT', key, self.redis.bitcount, key))

    # ------------------------------------------------------------------
    # Sorted sets
    # ------------------------------------------------------------------

    async def zadd(self, key: str, member: str, score: float) -> int:
        """Upsert member. Returns jumlah member baru (0 jika hanya update score)"""
        return int(await self._call('ZADD', key, self.redis.zadd, key, {member: score}))

    async def zrem(self, key: str, *members: str) -> int:
        return int(await self._call('ZREM', key, self.redis.zrem, key, *members))

    async def zincrby(self, key: str, member: str, delta: float) -> float:
        return float(await self._call('ZINCRBY', key, self.redis.zincrby, key, delta, member))

    async def zrange(self, key: str, start: int, end: int) -> List[str]:
        return list(await self._call('ZRANGE', key, self.redis.zrange, key, start, end))

    async def zrevrange(self, key: str, start: int, end: int) -> List[str]:
        return list(await self._call('ZREVRANGE', key, self.redis.zrevrange, key, start, end))

    async def zcount(self, key: str, min_score: float, max_score: float) -> int:
        return int(await self._call('ZCOUNT', key, self.redis.zcount, key, min_score, max_score))

    async def zcard(self, key: str) -> int:
        return int(await self._call('ZCARD', key, self.redis.zcard, key))

    async def zscore(self, key: str, member: str) -> Optional[float]:
        score = await self._call('ZSCORE', key, self.redis.zscore, key, member)
        return None if score is None else float(score)

    async def zrank(self, key: str, member: str) -> Optional[int]:
        return await self._call('ZRANK', key, self.redis.zrank, key, member)

    async def zrevrank(self, key: str, member: str) -> Optional[int]:
        return await self._call('ZREVRANK', key, self.redis.zrevrank, key, member)

    # ------------------------------------------------------------------
    # Server-side scripting
    # ------------------------------------------------------------------

    async def execute_script(self, script: str, keys: Sequence[str], args: Sequence[Any]) -> Any:
        """
        Execute Lua script secara atomic di server.

        Script di-register sekali per client; call berikutnya
        memakai EVALSHA (dengan EVAL fallback jika script cache di server kosong).

        Args:
            script: Lua script body
            keys: KEYS untuk script
            args: ARGV untuk script

        Returns:
            Scalar result dari script
        """
        registered = self._scripts.get(script)
        if registered is None:
            registered = self.redis.register_script(script)
            self._scripts[script] = registered

        key = keys[0] if keys else None
        return await self._call('EVALSHA', key, registered, keys=list(keys), args=list(args))
