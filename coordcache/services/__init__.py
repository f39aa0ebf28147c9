"""Services package initialization"""

from .base_service import BaseService, ErrorPolicy
from .cache_service import CacheService
from .lock_manager import LockManager, LockMode, UNLOCK_SCRIPT
from .ranked_set import RankedSetService
from .status_node import StatusNode

__all__ = [
    'BaseService',
    'ErrorPolicy',
    'CacheService',
    'LockManager',
    'LockMode',
    'UNLOCK_SCRIPT',
    'RankedSetService',
    'StatusNode',
]
