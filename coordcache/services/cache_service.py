"""
Cache facade di atas StoreClient.

Value di-encode ke canonical JSON sebelum disimpan dan di-decode saat dibaca.
Semua operasi fail soft: StoreError di-log dan return sentinel
(kecuali ErrorPolicy.PROPAGATE).
"""

import logging
from typing import Any, Optional

from .base_service import BaseService
from ..errors import StoreError
from ..utils.serialization import decode_value
from ..utils.timeunit import TimeUnit

logger = logging.getLogger(__name__)


class CacheService(BaseService):
    """
    Cache facade.

    Catatan: exists-then-act sequences (delete, set_permanent_by_key,
    get_key_with_expire) bukan atomic terhadap caller lain.
    """

    async def exists(self, key: str) -> bool:
        try:
            return await self.store.exists(key)
        except StoreError as e:
            return self._fail('exists', key, e, False)

    async def get(self, key: str) -> Any:
        """
        Get decoded value.

        Returns:
            Value, atau None jika key tidak ada atau store gagal
        """
        try:
            raw = await self.store.get(key)
        except StoreError as e:
            return self._fail('get', key, e, None)

        self.metrics.record_cache_read(raw is not None)
        return decode_value(raw)

    async def set_with_expire(self, key: str, value: Any, expire: float,
                              unit: TimeUnit = TimeUnit.SECONDS) -> bool:
        """
        Write value hanya jika key belum ada (SET NX).

        Returns:
            True jika ditulis, False jika key sudah ada atau store gagal
        """
        try:
            written = await self.store.set_if_absent(key, self._encode(key, value), unit.to_millis(expire))
        except StoreError as e:
            return self._fail('setWithExpire', key, e, False)

        if not written:
            logger.error(f"cache-setWithExpire failed, key={key}")
        return written

    async def get_key_with_expire(self, key: str, expire: float,
                                  unit: TimeUnit = TimeUnit.SECONDS) -> Optional[bool]:
        """
        Reset TTL dari key yang ada. Value tidak dikembalikan,
        panggil get() terpisah jika butuh value.

        Returns:
            Hasil expire (bool), atau None jika key tidak ada atau store gagal
        """
        try:
            if await self.store.get(key) is not None:
                return await self.store.expire(key, unit.to_millis(expire))
        except StoreError as e:
            return self._fail('getKeyWithExpire', key, e, None)

        return self._missing('getKeyWithExpire', key, None)

    async def get_expire(self, key: str, unit: TimeUnit = TimeUnit.SECONDS) -> Optional[int]:
        """
        Remaining TTL dalam unit yang diminta.

        Returns:
            TTL, -1 jika key permanent, None jika key tidak ada atau store gagal
        """
        try:
            ttl_ms = await self.store.ttl(key)
        except StoreError as e:
            return self._fail('getExpire', key, e, None)

        if ttl_ms == -2:
            return None
        if ttl_ms == -1:
            return -1
        return unit.from_millis(ttl_ms)

    async def delete(self, key: str) -> bool:
        try:
            if await self.store.exists(key):
                return await self.store.delete(key)
        except StoreError as e:
            return self._fail('delete', key, e, False)

        return self._missing('delete', key, False)

    async def rename_by_key(self, old_key: str, new_key: str) -> bool:
        """Rename hanya jika new_key belum ada"""
        try:
            if await self.store.rename_if_absent(old_key, new_key):
                return True
        except StoreError as e:
            return self._fail('renameByKey', old_key, e, False)

        logger.error(f"cache-renameByKey failed, {old_key} -> {new_key}")
        return False

    async def set_permanent_by_key(self, key: str) -> bool:
        """Hapus TTL dari key jika key ada"""
        try:
            if await self.store.exists(key):
                return await self.store.persist(key)
        except StoreError as e:
            return self._fail('setPermanentByKey', key, e, False)
        return self._missing('setPermanentByKey', key, False)

    # Counters dan bitmaps

    async def increment(self, key: str, delta: int = 1) -> Optional[int]:
        try:
            return await self.store.increment(key, delta)
        except StoreError as e:
            return self._fail('increment', key, e, None)

    async def decrement(self, key: str, delta: int = 1) -> Optional[int]:
        try:
            return await self.store.decrement(key, delta)
        except StoreError as e:
            return self._fail('decrement', key, e, None)

    async def set_bit(self, key: str, offset: int, value: bool) -> Optional[bool]:
        """Set bit di offset. Returns bit sebelumnya"""
        try:
            return bool(await self.store.set_bit(key, offset, value))
        except StoreError as e:
            return self._fail('setBit', key, e, None)

    async def bit_count(self, key: str) -> Optional[int]:
        try:
            return await self.store.bit_count(key)
        except StoreError as e:
            return self._fail('bitCount', key, e, None)
