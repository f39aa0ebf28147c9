"""
Exception hierarchy untuk coordination client.
Semua error dari store di-map ke salah satu class di bawah.
"""

from typing import Optional


class StoreError(Exception):
    """Base class untuk semua store errors"""

    def __init__(self, message: str, key: Optional[str] = None):
        super().__init__(message)
        self.key = key


class StoreUnavailable(StoreError):
    """Transport failure: connection refused, lost, atau timeout"""


class OperationFailed(StoreError):
    """Server menolak command atau return shape yang tidak diharapkan"""


class NotFound(StoreError):
    """Key atau member tidak ada padahal dibutuhkan"""


class LockNotOwned(StoreError):
    """Unlock dengan value yang tidak sama dengan owner value yang tersimpan"""


class LockTimeout(StoreError):
    """Lock tidak berhasil di-acquire sebelum wait timeout habis"""
