"""
Status node: HTTP endpoints untuk health check dan metrics.
Aplikasi yang embed coordcache bisa start node ini di samping services.
"""

import logging
from typing import Optional
from aiohttp import web

from ..communication.store_client import StoreClient
from ..errors import StoreError
from ..utils.config import Config
from ..utils.metrics import MetricsCollector

logger = logging.getLogger(__name__)


class StatusNode:
    """
    HTTP status server.

    Routes:
    - GET /health: PING ke store (200 healthy, 503 unhealthy)
    - GET /api/metrics: Prometheus metrics
    - GET /api/status: Config summary dan statistics
    """

    def __init__(self, store: StoreClient,
                 host: Optional[str] = None,
                 port: Optional[int] = None,
                 metrics: Optional[MetricsCollector] = None):
        """
        Args:
            store: StoreClient yang di-monitor
            host: Host address, default Config.STATUS_HOST
            port: Port number, default Config.STATUS_PORT
            metrics: Metrics collector, default milik store
        """
        self.store = store
        self.host = host or Config.STATUS_HOST
        self.port = port if port is not None else Config.STATUS_PORT
        self.metrics = metrics or store.metrics

        # HTTP server
        self.app = web.Application()
        self.runner: Optional[web.AppRunner] = None
        self.site: Optional[web.TCPSite] = None

        self._setup_routes()
        self._running = False

    def _setup_routes(self):
        """Setup HTTP API routes"""
        self.app.router.add_get('/health', self.handle_health)
        self.app.router.add_get('/api/metrics', self.handle_metrics)
        self.app.router.add_get('/api/status', self.handle_status)

    async def start(self):
        """Start HTTP server"""
        self.runner = web.AppRunner(self.app)
        await self.runner.setup()
        self.site = web.TCPSite(self.runner, self.host, self.port)
        await self.site.start()

        self._running = True
        logger.info(f"StatusNode started at http://{self.host}:{self.port}")

    async def stop(self):
        """Stop HTTP server dan cleanup"""
        self._running = False

        if self.site:
            await self.site.stop()
        if self.runner:
            await self.runner.cleanup()

        logger.info("StatusNode stopped")

    async def _store_healthy(self) -> bool:
        try:
            return await self.store.ping()
        except StoreError as e:
            logger.warning(f"Store health check failed: {e}")
            return False

    async def handle_health(self, request: web.Request) -> web.Response:
        """Health check endpoint"""
        if await self._store_healthy():
            return web.json_response({'status': 'healthy'})
        else:
            return web.json_response({'status': 'unhealthy'}, status=503)

    async def handle_metrics(self, request: web.Request) -> web.Response:
        """Export Prometheus metrics"""
        metrics_data = self.metrics.get_metrics()
        return web.Response(body=metrics_data, content_type='text/plain')

    async def handle_status(self, request: web.Request) -> web.Response:
        """Get client status"""
        # Target dari pool milik client yang di-inject, bukan dari Config
        target = self.store.redis.connection_pool.connection_kwargs
        status = {
            'running': self._running,
            'store': {
                'host': target.get('host'),
                'port': target.get('port'),
                'db': target.get('db'),
                'healthy': await self._store_healthy()
            },
            'error_policy': Config.ERROR_POLICY,
            'cache_hit_rate': self.metrics.get_cache_hit_rate()
        }
        return web.json_response(status)
