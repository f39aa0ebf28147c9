"""
Metrics collector menggunakan Prometheus.
File ini mengumpulkan data performa client seperti
latency store command, cache hit rate, dan lock contention.
"""

from prometheus_client import CollectorRegistry, Counter, Histogram, generate_latest
from typing import Optional
import time

from .config import Config


class MetricsCollector:
    """
    Class untuk mengumpulkan metrics client.
    Setiap instance punya CollectorRegistry sendiri supaya
    bisa dibuat berkali-kali (misalnya di tests) tanpa duplicate error.
    """
    
    def __init__(self, registry: Optional[CollectorRegistry] = None, enabled: bool = True):
        self.registry = registry or CollectorRegistry()
        self.enabled = enabled
        
        # Counter: nilai yang selalu naik (contoh: jumlah command)
        self.store_commands = Counter(
            'store_commands_total',
            'Total number of store commands',
            ['command'],
            registry=self.registry
        )
        
        self.store_errors = Counter(
            'store_errors_total',
            'Total number of failed store commands',
            ['command', 'error'],
            registry=self.registry
        )
        
        # Histogram: distribusi nilai (contoh: latency)
        self.store_latency = Histogram(
            'store_command_latency_seconds',
            'Store command latency in seconds',
            ['command'],
            registry=self.registry
        )
        
        self.cache_hits = Counter('cache_hits_total', 'Cache reads that found a value', registry=self.registry)
        self.cache_misses = Counter('cache_misses_total', 'Cache reads that found nothing', registry=self.registry)
        
        self.locks_acquired = Counter('locks_acquired_total', 'Locks acquired', registry=self.registry)
        self.locks_contended = Counter('locks_contended_total', 'Lock attempts lost to another holder', registry=self.registry)
        self.locks_released = Counter('locks_released_total', 'Locks released by their owner', registry=self.registry)
        self.locks_not_owned = Counter(
            'locks_not_owned_total',
            'Unlock attempts with a non-matching owner value',
            registry=self.registry
        )
    
    def record_command(self, command: str, duration: float):
        """
        Record store command metrics.
        
        Args:
            command: Nama command (GET, SET, ...)
            duration: Durasi command dalam seconds
        """
        if not self.enabled:
            return
        self.store_commands.labels(command=command).inc()
        self.store_latency.labels(command=command).observe(duration)
    
    def record_error(self, command: str, error: str):
        """Record command yang gagal"""
        if self.enabled:
            self.store_errors.labels(command=command, error=error).inc()
    
    def record_cache_read(self, hit: bool):
        if not self.enabled:
            return
        if hit:
            self.cache_hits.inc()
        else:
            self.cache_misses.inc()
    
    def record_lock_attempt(self, acquired: bool):
        if not self.enabled:
            return
        if acquired:
            self.locks_acquired.inc()
        else:
            self.locks_contended.inc()
    
    def record_unlock(self, released: bool):
        if not self.enabled:
            return
        if released:
            self.locks_released.inc()
        else:
            self.locks_not_owned.inc()
    
    def get_cache_hit_rate(self) -> float:
        """Calculate cache hit rate (0.0 - 1.0)"""
        hits = self.registry.get_sample_value('cache_hits_total') or 0.0
        misses = self.registry.get_sample_value('cache_misses_total') or 0.0
        total = hits + misses
        if total == 0:
            return 0.0
        return hits / total
    
    def get_metrics(self) -> bytes:
        """
        Export metrics dalam Prometheus format.
        Returns: Metrics data dalam bytes
        """
        return generate_latest(self.registry)


# Context manager untuk measure command time
class measure_time:
    """
    Context manager untuk mengukur execution time.
    
    Contoh penggunaan:
        with measure_time() as timer:
            await redis.get(key)
        print(f"Execution time: {timer.elapsed}s")
    """
    
    def __init__(self):
        self.start_time = None
        self.elapsed = None
    
    def __enter__(self):
        self.start_time = time.perf_counter()
        return self
    
    def __exit__(self, exc_type, exc_val, exc_tb):
        self.elapsed = time.perf_counter() - self.start_time
        return False


# Default instance, dipakai jika service tidak diberi collector sendiri
metrics = MetricsCollector(enabled=Config.METRICS_ENABLED)
