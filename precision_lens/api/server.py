"""
API Server - aiohttp-based REST surface for Precision Lens.

Stands in for the touch UI: it exposes the status text, the three buttons
and the hardware event inputs, and receives analysis results pushed by the
bridge.
"""

from typing import Optional

from aiohttp import web

from ..core.logging_utils import get_module_logger
from ..lens.controller import LensController
from .middleware import (
    error_handling_middleware,
    localhost_only_middleware,
    request_logging_middleware,
)
from .routes import setup_lens_routes


logger = get_module_logger("APIServer")


def create_app(controller: LensController, *, localhost_only: bool = True) -> web.Application:
    """Create and configure the aiohttp application."""
    middlewares = [request_logging_middleware, error_handling_middleware]
    if localhost_only:
        middlewares.insert(0, localhost_only_middleware)

    app = web.Application(middlewares=middlewares)
    app["controller"] = controller
    setup_lens_routes(app)
    return app


class APIServer:
    """REST server running on the application's event loop."""

    def __init__(
        self,
        controller: LensController,
        host: str = "127.0.0.1",
        port: int = 8765,
        localhost_only: bool = True,
    ):
        self.controller = controller
        self.host = host
        self.port = port
        self.localhost_only = localhost_only

        self._runner: Optional[web.AppRunner] = None
        self._site: Optional[web.TCPSite] = None
        self._running = False

    @property
    def is_running(self) -> bool:
        return self._running

    async def start(self) -> None:
        """Start the API server (non-blocking)."""
        if self._running:
            logger.warning("API server already running")
            return

        app = create_app(self.controller, localhost_only=self.localhost_only)
        self._runner = web.AppRunner(app)
        await self._runner.setup()

        self._site = web.TCPSite(self._runner, self.host, self.port)
        await self._site.start()

        self._running = True
        logger.info("API server started on http://%s:%d", self.host, self.port)

    async def stop(self) -> None:
        """Stop the API server gracefully."""
        if not self._running:
            return

        logger.info("Stopping API server...")
        if self._site:
            await self._site.stop()
            self._site = None
        if self._runner:
            await self._runner.cleanup()
            self._runner = None

        self._running = False
        logger.info("API server stopped")
