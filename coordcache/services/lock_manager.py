"""
Distributed Lock Manager.
Implementasi distributed locks di atas StoreClient dengan:
- Acquire via SET NX PX (atomic, satu round trip)
- Refresh via SET XX PX
- Release via Lua compare-and-delete (atomic ownership check)
- Preemptive lock dengan poll dan jittered backoff

Ownership ditentukan hanya dari value: siapa pun yang bisa memberikan
value yang sama persis dengan yang tersimpan boleh release lock.
Holder yang crash bergantung pada TTL untuk recovery.
"""

import asyncio
import logging
import random
from contextlib import asynccontextmanager
from enum import Enum
from typing import Any, Optional, Union

from .base_service import BaseService, ErrorPolicy
from ..errors import LockNotOwned, LockTimeout, StoreError
from ..utils.config import Config
from ..utils.timeunit import TimeUnit

logger = logging.getLogger(__name__)

# Delete key hanya jika value masih milik caller
UNLOCK_SCRIPT = (
    "if redis.call('get', KEYS[1]) == ARGV[1] then "
    "return redis.call('del', KEYS[1]) else return 0 end"
)

RELEASED = 1


class LockMode(Enum):
    """Mode untuk distributed_lock"""
    NOT_EXIST = "NX"  # Acquire hanya jika belum di-hold
    EXIST = "XX"      # Refresh hanya jika sedang di-hold (tanpa ownership check)


def parse_lock_mode(mode: Union[LockMode, str, None]) -> Optional[LockMode]:
    """
    Parse mode dari LockMode atau string ("NX"/"XX", case-insensitive).
    Returns None untuk mode yang tidak dikenal.
    """
    if isinstance(mode, LockMode):
        return mode
    if not mode:
        return None
    for candidate in LockMode:
        if mode.upper() in (candidate.value, candidate.name):
            return candidate
    return None


class LockManager(BaseService):
    """
    Distributed Lock Manager.

    State per lock key: Unheld -> Held(owner value) -> Unheld.
    Lock hilang lewat unlock() oleh owner atau lewat TTL expiry.
    """

    def __init__(self, store, policy: Optional[ErrorPolicy] = None, metrics=None,
                 retry_interval: Optional[float] = None,
                 max_retry_interval: Optional[float] = None):
        """
        Args:
            store: StoreClient
            policy: Error policy
            metrics: Metrics collector
            retry_interval: Backoff awal preemptive_lock (seconds)
            max_retry_interval: Batas atas backoff (seconds)
        """
        super().__init__(store, policy=policy, metrics=metrics)

        if retry_interval is None:
            retry_interval = Config.LOCK_RETRY_INTERVAL_MS / 1000.0
        if max_retry_interval is None:
            max_retry_interval = Config.LOCK_MAX_RETRY_INTERVAL_MS / 1000.0

        self.retry_interval = retry_interval
        self.max_retry_interval = max(max_retry_interval, retry_interval)

    @staticmethod
    def _lock_ttl(expire: float, unit: TimeUnit) -> int:
        ttl_ms = unit.to_millis(expire)
        if ttl_ms <= 0:
            raise ValueError(f"lock TTL must be positive, got {expire} {unit.name}")
        return ttl_ms

    async def distributed_lock(self, key: str, value: Any, mode: Union[LockMode, str],
                               expire: float, unit: TimeUnit = TimeUnit.SECONDS) -> bool:
        """
        Acquire (NX) atau refresh (XX) lock.

        Mode XX tidak mengecek owner: caller mana pun bisa
        overwrite value dan TTL dari holder lain.

        Returns:
            True jika sukses; False untuk mode tidak dikenal,
            kalah race, atau store gagal
        """
        lock_mode = parse_lock_mode(mode)
        if lock_mode is None:
            logger.warning(f"Unknown lock mode {mode!r} for key={key}")
            return False

        ttl_ms = self._lock_ttl(expire, unit)

        try:
            encoded = self._encode(key, value)
            if lock_mode == LockMode.NOT_EXIST:
                acquired = await self.store.set_if_absent(key, encoded, ttl_ms)
                self.metrics.record_lock_attempt(acquired)
                if acquired:
                    return True
            else:
                logger.debug(f"Refreshing lock {key} without ownership check")
                if await self.store.set_if_present(key, encoded, ttl_ms):
                    return True
        except StoreError as e:
            return self._fail('distributedLock', key, e, False)

        logger.error(f"cache-distributedLock failed, key={key}")
        return False

    async def preemptive_lock(self, key: str, value: Any, wait_timeout: float,
                              unit: TimeUnit = TimeUnit.SECONDS,
                              expire: Optional[float] = None) -> bool:
        """
        Poll SET NX sampai lock didapat atau wait_timeout habis.

        Attempt pertama langsung; setelah itu sleep dengan
        exponential backoff + jitter, tidak pernah melewati deadline.
        Attempt terakhir dilakukan tepat di deadline.

        Args:
            key: Lock key
            value: Owner value
            wait_timeout: Berapa lama menunggu
            unit: Unit untuk wait_timeout dan expire
            expire: Lock TTL, default sama dengan wait_timeout

        Returns:
            True jika acquired sebelum deadline. wait_timeout <= 0
            berarti tepat satu attempt (butuh expire positif)
        """
        ttl_ms = self._lock_ttl(wait_timeout if expire is None else expire, unit)
        try:
            encoded = self._encode(key, value)
        except StoreError as e:
            return self._fail('preemptiveLock', key, e, False)

        loop = asyncio.get_running_loop()
        deadline = loop.time() + unit.to_seconds(wait_timeout)
        interval = self.retry_interval
        attempts = 0

        while True:
            attempts += 1
            try:
                acquired = await self.store.set_if_absent(key, encoded, ttl_ms)
            except StoreError as e:
                return self._fail('preemptiveLock', key, e, False)

            self.metrics.record_lock_attempt(acquired)
            if acquired:
                logger.debug(f"Acquired lock {key} after {attempts} attempt(s)")
                return True

            remaining = deadline - loop.time()
            if remaining <= 0:
                logger.info(f"cache-preemptiveLock timed out after {attempts} attempt(s), key={key}")
                return False

            await asyncio.sleep(min(remaining, random.uniform(interval / 2, interval)))
            interval = min(interval * 2, self.max_retry_interval)

    async def unlock(self, key: str, value: Any) -> bool:
        """
        Release lock secara atomic jika value sama dengan yang tersimpan.

        Dengan SWALLOW, "bukan owner" dan transport error
        sama-sama return False.

        Raises:
            LockNotOwned: jika policy PROPAGATE dan value tidak cocok
        """
        try:
            result = await self.store.execute_script(UNLOCK_SCRIPT, [key], [self._encode(key, value)])
        except StoreError as e:
            return self._fail('unlock', key, e, False)

        released = result == RELEASED
        self.metrics.record_unlock(released)
        if released:
            return True

        logger.error(f"cache-unlock failed, key={key}")
        if self.policy == ErrorPolicy.PROPAGATE:
            raise LockNotOwned(f"lock {key} is not held by the given value", key=key)
        return False

    @asynccontextmanager
    async def hold(self, key: str, value: Any, wait_timeout: float,
                   unit: TimeUnit = TimeUnit.SECONDS, expire: Optional[float] = None):
        """
        Context manager: acquire via preemptive_lock, release saat keluar.

        Contoh penggunaan:
            async with locks.hold('order:42', worker_id, wait_timeout=5):
                ...

        Jika body raise exception, exception itu yang sampai ke caller;
        kegagalan unlock saat itu hanya di-log.

        Raises:
            LockTimeout: jika lock tidak didapat sebelum wait_timeout
        """
        if not await self.preemptive_lock(key, value, wait_timeout, unit=unit, expire=expire):
            raise LockTimeout(f"could not acquire lock {key} within {wait_timeout} {unit.name}", key=key)
        try:
            yield
        except BaseException:
            try:
                await self.unlock(key, value)
            except StoreError as e:
                logger.error(f"cache-unlock failed while leaving hold, key={key}: {e}")
            raise
        else:
            await self.unlock(key, value)
