"""
Ranked set operations di atas Redis sorted sets.
Dipakai untuk leaderboard dan priority-style queries.
"""

from typing import List, Optional

from .base_service import BaseService
from ..errors import StoreError


class RankedSetService(BaseService):
    """
    Wrapper untuk sorted set primitives.

    Range results adalah list dengan urutan score (ascending untuk
    zrange, descending untuk zrevrange). Negative index dihitung dari akhir.
    """

    async def zadd(self, key: str, member: str, score: float) -> bool:
        """Upsert member dengan score"""
        try:
            await self.store.zadd(key, member, score)
            return True
        except StoreError as e:
            return self._fail('zadd', key, e, False)

    async def zrem(self, key: str, *members: str) -> bool:
        """
        Remove members.
        Returns True hanya jika tepat satu member terhapus,
        juga saat caller memberikan beberapa members.
        """
        try:
            return await self.store.zrem(key, *members) == 1
        except StoreError as e:
            return self._fail('zrem', key, e, False)

    async def zincrby(self, key: str, member: str, delta: float) -> Optional[float]:
        """
        Increment score secara atomic. Member dibuat dengan score=delta
        jika belum ada.

        Returns:
            Score baru, atau None jika store gagal
        """
        try:
            return await self.store.zincrby(key, member, delta)
        except StoreError as e:
            return self._fail('zincrby', key, e, None)

    async def zrange(self, key: str, start: int, end: int) -> List[str]:
        try:
            return await self.store.zrange(key, start, end)
        except StoreError as e:
            return self._fail('zrange', key, e, [])

    async def zrevrange(self, key: str, start: int, end: int) -> List[str]:
        try:
            return await self.store.zrevrange(key, start, end)
        except StoreError as e:
            return self._fail('zrevrange', key, e, [])

    async def zlexcount(self, key: str, start: Optional[float] = None, end: Optional[float] = None) -> int:
        """
        Count members.

        Jika salah satu bound None, return jumlah semua member;
        selain itu jumlah member dengan score di [start, end].
        """
        if start is None or end is None:
            return len(await self.zrevrange(key, 0, -1))

        try:
            return await self.store.zcount(key, start, end)
        except StoreError as e:
            return self._fail('zlexcount', key, e, 0)

    async def zrank(self, key: str, member: str) -> Optional[int]:
        """0-based ascending rank, None jika member tidak ada"""
        try:
            return await self.store.zrank(key, member)
        except StoreError as e:
            return self._fail('zrank', key, e, None)

    async def zrevrank(self, key: str, member: str) -> Optional[int]:
        """0-based descending rank, None jika member tidak ada"""
        try:
            return await self.store.zrevrank(key, member)
        except StoreError as e:
            return self._fail('zrevrank', key, e, None)

    async def zscore(self, key: str, member: str) -> Optional[float]:
        try:
            return await self.store.zscore(key, member)
        except StoreError as e:
            return self._fail('zscore', key, e, None)
