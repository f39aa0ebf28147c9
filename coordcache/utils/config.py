"""
Configuration manager untuk coordination client.
File ini membaca environment variables dan menyediakan
konfigurasi default untuk store client dan services.
"""

import os
from typing import Optional
from dotenv import load_dotenv

# Load environment variables dari .env file
load_dotenv()


class Config:
    """Class untuk manage semua konfigurasi client"""
    
    # Redis Configuration
    REDIS_HOST: str = os.getenv('REDIS_HOST', 'localhost')
    REDIS_PORT: int = int(os.getenv('REDIS_PORT', 6379))
    REDIS_DB: int = int(os.getenv('REDIS_DB', 0))
    REDIS_PASSWORD: Optional[str] = os.getenv('REDIS_PASSWORD') or None
    REDIS_SOCKET_TIMEOUT: float = float(os.getenv('REDIS_SOCKET_TIMEOUT', 5.0))
    
    # Error policy: "swallow" (log + sentinel) atau "propagate" (raise)
    ERROR_POLICY: str = os.getenv('ERROR_POLICY', 'swallow')
    
    # Preemptive lock backoff (dalam milliseconds)
    LOCK_RETRY_INTERVAL_MS: int = int(os.getenv('LOCK_RETRY_INTERVAL_MS', 50))
    LOCK_MAX_RETRY_INTERVAL_MS: int = int(os.getenv('LOCK_MAX_RETRY_INTERVAL_MS', 1000))
    
    # Status endpoint
    STATUS_HOST: str = os.getenv('STATUS_HOST', 'localhost')
    STATUS_PORT: int = int(os.getenv('STATUS_PORT', 9100))
    
    # Metrics
    METRICS_ENABLED: bool = os.getenv('METRICS_ENABLED', 'true').lower() in ('1', 'true', 'yes')
    
    # Logging
    LOG_LEVEL: str = os.getenv('LOG_LEVEL', 'INFO')
    LOG_FILE: str = os.getenv('LOG_FILE', '')
    
    @classmethod
    def redis_url(cls) -> str:
        """
        Format Redis connection URL.
        Password tidak pernah ikut di-print oleh display().
        """
        auth = f":{cls.REDIS_PASSWORD}@" if cls.REDIS_PASSWORD else ""
        return f"redis://{auth}{cls.REDIS_HOST}:{cls.REDIS_PORT}/{cls.REDIS_DB}"
    
    @classmethod
    def display(cls):
        """Print semua konfigurasi untuk debugging"""
        print("=== Configuration ===")
        print(f"Redis: {cls.REDIS_HOST}:{cls.REDIS_PORT}/{cls.REDIS_DB}")
        print(f"Error policy: {cls.ERROR_POLICY}")
        print(f"Lock retry: {cls.LOCK_RETRY_INTERVAL_MS}ms (max {cls.LOCK_MAX_RETRY_INTERVAL_MS}ms)")
        print(f"Status endpoint: {cls.STATUS_HOST}:{cls.STATUS_PORT}")
        print("=" * 30)


# Test configuration saat file dijalankan langsung
if __name__ == "__main__":
    Config.display()
