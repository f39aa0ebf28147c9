"""
Time units untuk TTL dan wait timeout.
Store selalu menerima milliseconds (PX / PEXPIRE).
"""

from enum import Enum


class TimeUnit(Enum):
    """Satuan waktu, value = jumlah milliseconds per unit"""
    MILLISECONDS = 1
    SECONDS = 1000
    MINUTES = 60 * 1000
    HOURS = 60 * 60 * 1000
    DAYS = 24 * 60 * 60 * 1000

    def to_millis(self, amount: float) -> int:
        """Convert amount dalam unit ini ke integer milliseconds"""
        return int(amount * self.value)

    def to_seconds(self, amount: float) -> float:
        return amount * self.value / 1000.0

    def from_millis(self, millis: int) -> int:
        """Convert milliseconds ke unit ini (dibulatkan ke bawah)"""
        return millis // self.value
