"""
Utils package initialization.
Import semua utilities di sini agar mudah diakses.
"""

from .config import Config
from .log import setup_logging
from .metrics import MetricsCollector, metrics, measure_time
from .serialization import encode_value, decode_value
from .timeunit import TimeUnit

__all__ = [
    'Config',
    'setup_logging',
    'MetricsCollector',
    'metrics',
    'measure_time',
    'encode_value',
    'decode_value',
    'TimeUnit',
]
