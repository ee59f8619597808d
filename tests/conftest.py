"""Shared fixtures for archive traversal tests."""

import asyncio
import socket
import threading
import time
from collections.abc import Generator
from contextlib import closing

import pytest
from aiohttp import web

from tests.mock_server import (
    REQUEST_LOG,
    create_app,
    generate_archive_html,
)


@pytest.fixture
def archive_html() -> str:
    """HTML of the mock archive root page."""
    return generate_archive_html()


# =============================================================================
# aiohttp test server fixtures
# =============================================================================


def find_free_port() -> int:
    """Find a free port on localhost.

    Returns:
        An available port number.
    """
    with closing(socket.socket(socket.AF_INET, socket.SOCK_STREAM)) as s:
        s.bind(("", 0))
        s.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        return s.getsockname()[1]


class AioHttpTestServer:
    """Wrapper to run aiohttp server in a background thread."""

    def __init__(self, app: web.Application, port: int) -> None:
        self.app = app
        self.port = port
        self.host = "127.0.0.1"
        self._loop: asyncio.AbstractEventLoop | None = None
        self._runner: web.AppRunner | None = None
        self._thread: threading.Thread | None = None
        self._started = threading.Event()

    @property
    def url(self) -> str:
        """Get the base URL of the server."""
        return f"http://{self.host}:{self.port}"

    def start(self) -> None:
        """Start the server in a background thread."""
        self._thread = threading.Thread(target=self._run_server, daemon=True)
        self._thread.start()
        self._started.wait(timeout=5.0)
        # Give the listener a moment to accept connections
        time.sleep(0.05)

    def _run_server(self) -> None:
        self._loop = asyncio.new_event_loop()
        asyncio.set_event_loop(self._loop)

        async def start() -> None:
            self._runner = web.AppRunner(self.app)
            await self._runner.setup()
            site = web.TCPSite(self._runner, self.host, self.port)
            await site.start()

        self._loop.run_until_complete(start())
        self._started.set()
        self._loop.run_forever()

    def stop(self) -> None:
        """Stop the server and clean up resources."""
        if self._loop and self._runner:
            runner = self._runner
            future = asyncio.run_coroutine_threadsafe(
                runner.cleanup(), self._loop
            )
            try:
                future.result(timeout=2.0)
            except Exception:
                pass  # Best effort cleanup

        if self._loop:
            self._loop.call_soon_threadsafe(self._loop.stop)

        if self._thread:
            self._thread.join(timeout=2.0)


@pytest.fixture
def archive_server() -> Generator[AioHttpTestServer, None, None]:
    """Start an aiohttp server running the mock archive on a free port.

    Yields:
        AioHttpTestServer instance with the archive app running.
    """
    app = create_app()
    server = AioHttpTestServer(app, find_free_port())
    server.start()
    yield server
    server.stop()


@pytest.fixture
def server_url(archive_server: AioHttpTestServer) -> str:
    """Base URL of the mock archive (e.g. "http://127.0.0.1:8080")."""
    return archive_server.url


@pytest.fixture
def request_log(archive_server: AioHttpTestServer) -> list[str]:
    """Paths and queries the mock archive has served, in order."""
    return archive_server.app[REQUEST_LOG]
