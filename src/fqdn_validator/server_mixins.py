"""
Server Lifecycle Mixin class for FqdnValidatorMCPServer.
"""

import asyncio
import signal
import sys
from typing import Any


def _shutdown_signals() -> tuple[int, ...]:
    if sys.platform == "win32":
        return (signal.SIGINT, signal.SIGBREAK)
    return (signal.SIGINT, signal.SIGTERM)


class ServerLifecycleMixin:
    """Mixin for server lifecycle management (signals, startup, shutdown).

    The mixin owns a single serving task. Shutdown cancels that task only, so
    other tasks running on the same event loop are left alone.

    Note: This mixin assumes the class has 'server' (FastMCP), 'config' (dict)
    and 'logger' attributes available when lifecycle methods are called.
    """

    # Type hints for attributes provided by the host class
    server: Any  # FastMCP instance
    config: dict[str, Any]
    logger: Any  # Logger instance

    _serve_task: asyncio.Task | None = None
    _shutdown_requested: bool = False

    def install_shutdown_handlers(self) -> None:
        """Route SIGINT/SIGTERM to ``request_shutdown``."""
        loop = asyncio.get_running_loop()
        for sig in _shutdown_signals():
            try:
                loop.add_signal_handler(sig, self.request_shutdown, sig)
            except NotImplementedError:
                signal.signal(
                    sig, lambda s, _frame: loop.call_soon_threadsafe(self.request_shutdown, s)
                )

    def remove_shutdown_handlers(self) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return
        for sig in _shutdown_signals():
            try:
                loop.remove_signal_handler(sig)
            except (NotImplementedError, ValueError):
                signal.signal(sig, signal.SIG_DFL)

    def request_shutdown(self, sig: int | None = None) -> None:
        """Ask the running server to stop; safe to call more than once."""
        if sig is not None:
            self.logger.info("Received shutdown signal %s", signal.Signals(sig).name)
        self._shutdown_requested = True
        if self._serve_task is not None and not self._serve_task.done():
            self._serve_task.cancel()

    async def start(self, host: str | None = None, port: int | None = None) -> None:
        """Start the MCP server using HTTP transport and serve until shutdown.

        Args:
            host: The host to bind to. Defaults to ``server.host`` from the
                config, or "127.0.0.1".
            port: The port to listen on. Defaults to ``server.port`` from the
                config, or 3000.
        """
        server_settings = self.config.get("server", {})
        host = host or server_settings.get("host", "127.0.0.1")
        port = port or int(server_settings.get("port", 3000))

        self._shutdown_requested = False
        self.install_shutdown_handlers()
        self.logger.info("Starting FQDN validator MCP server on %s:%d", host, port)
        self._serve_task = asyncio.create_task(
            self.server.run_async(transport="http", host=host, port=port)
        )
        try:
            await self._serve_task
        except asyncio.CancelledError:
            if not self._shutdown_requested:
                raise
            self.logger.info("FQDN validator MCP server stopped")
        except (OSError, RuntimeError) as e:
            self.logger.error("Error starting server: %s", e)
            await self.stop()
            raise
        finally:
            self.remove_shutdown_handlers()

    async def stop(self) -> None:
        """Stop the MCP server gracefully."""
        self.logger.info("Shutting down FQDN validator MCP server...")
        self._shutdown_requested = True
        task = self._serve_task
        if task is not None and not task.done() and task is not asyncio.current_task():
            task.cancel()
            try:
                await asyncio.wait_for(asyncio.gather(task, return_exceptions=True), timeout=5.0)
            except asyncio.TimeoutError:
                self.logger.warning("Timeout waiting for the server to stop")
        self.remove_shutdown_handlers()
