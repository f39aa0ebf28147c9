"""
Logging setup untuk aplikasi yang memakai coordcache.
Library sendiri hanya memakai logging.getLogger(__name__).
"""

import logging
import sys
from typing import Optional

from .config import Config

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logging(level: Optional[str] = None, log_file: Optional[str] = None):
    """
    Setup logging configuration.
    
    Args:
        level: Log level name, default Config.LOG_LEVEL
        log_file: Path ke log file, default Config.LOG_FILE (kosong = tanpa file)
    """
    level = (level or Config.LOG_LEVEL).upper()
    log_file = log_file if log_file is not None else Config.LOG_FILE
    
    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))
    
    logging.basicConfig(
        level=getattr(logging, level),
        format=LOG_FORMAT,
        handlers=handlers,
        force=True
    )
