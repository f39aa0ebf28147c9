"""
Base class untuk semua services di atas StoreClient.
Menyediakan error policy yang sama untuk cache, lock, dan ranked set.
"""

import logging
from enum import Enum
from typing import Any, Optional

from ..communication.store_client import StoreClient
from ..errors import NotFound, OperationFailed, StoreError
from ..utils.config import Config
from ..utils.metrics import MetricsCollector
from ..utils.serialization import encode_value

logger = logging.getLogger(__name__)


class ErrorPolicy(Enum):
    """Apa yang dilakukan service saat store command gagal"""
    SWALLOW = "swallow"      # Log error, return failure sentinel
    PROPAGATE = "propagate"  # Re-raise StoreError ke caller


class BaseService:
    """
    Base class untuk services.
    
    Dengan SWALLOW, caller tidak bisa membedakan "key tidak ada"
    dari "store tidak bisa dihubungi" kecuali lewat logs.
    PROPAGATE dipakai di tests atau caller yang butuh error detail.
    """
    
    def __init__(self, store: StoreClient,
                 policy: Optional[ErrorPolicy] = None,
                 metrics: Optional[MetricsCollector] = None):
        """
        Args:
            store: StoreClient yang sudah dibuat caller
            policy: Error policy, default dari Config.ERROR_POLICY
            metrics: Metrics collector, default milik store
        """
        self.store = store
        self.policy = policy or ErrorPolicy(Config.ERROR_POLICY.lower())
        self.metrics = metrics or store.metrics
    
    def _fail(self, operation: str, key: Optional[str], error: StoreError, default: Any = None) -> Any:
        """
        Handle StoreError sesuai policy.
        
        Returns:
            default jika policy SWALLOW
        
        Raises:
            error jika policy PROPAGATE
        """
        if self.policy == ErrorPolicy.PROPAGATE:
            raise error
        
        logger.error(f"cache-{operation} error, key={key}: {error}")
        return default
    
    def _missing(self, operation: str, key: Optional[str], default: Any = None) -> Any:
        """
        Handle key yang tidak ada padahal operasi butuh key tersebut.
        
        Raises:
            NotFound jika policy PROPAGATE
        """
        if self.policy == ErrorPolicy.PROPAGATE:
            raise NotFound(f"{operation}: key {key} does not exist", key=key)
        
        logger.error(f"cache-{operation} failed, key={key}")
        return default
    
    def _encode(self, key: Optional[str], value: Any) -> str:
        """
        Encode value ke JSON text.
        
        Raises:
            OperationFailed: jika value tidak bisa di-serialize (set, object, circular ref)
        """
        try:
            return encode_value(value)
        except (TypeError, ValueError) as e:
            raise OperationFailed(f"value for key {key} is not JSON serializable: {e}", key=key) from e
