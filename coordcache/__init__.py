"""
Coordination Cache Client

Client library di atas Redis yang menyediakan:
- Cache facade dengan TTL dan JSON encoding
- Distributed lock dengan atomic compare-and-delete release
- Ranked set (sorted set) operations untuk leaderboard
"""

from .communication.store_client import StoreClient
from .errors import (
    StoreError,
    StoreUnavailable,
    OperationFailed,
    NotFound,
    LockNotOwned,
    LockTimeout,
)
from .services.base_service import ErrorPolicy
from .services.cache_service import CacheService
from .services.lock_manager import LockManager, LockMode
from .services.ranked_set import RankedSetService
from .services.status_node import StatusNode
from .utils.timeunit import TimeUnit

__version__ = "1.0.0"

__all__ = [
    'StoreClient',
    'CacheService',
    'LockManager',
    'LockMode',
    'RankedSetService',
    'StatusNode',
    'ErrorPolicy',
    'TimeUnit',
    'StoreError',
    'StoreUnavailable',
    'OperationFailed',
    'NotFound',
    'LockNotOwned',
    'LockTimeout',
]
