"""Pytest configuration and fixtures for Watjai tests."""

import asyncio
import logging
import tempfile
import uuid
from typing import Dict, List, Optional

import pytest
from aiohttp import WSMsgType, web
from aiohttp.test_utils import TestServer

from watjai.config import WatjaiConfig
from watjai.device.events import ConnectionEvents


# Configure logging for tests
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: fast tests without network access")
    config.addinivalue_line("markers", "integration: tests against local aiohttp servers")


@pytest.fixture
def temp_data_dir():
    """Create temporary directory for test data."""
    with tempfile.TemporaryDirectory() as temp_dir:
        yield temp_dir


@pytest.fixture
def events():
    """Device event channels on topics unique to the test."""
    channels = ConnectionEvents(prefix=f"test_{uuid.uuid4().hex}")
    yield channels
    channels.unsubscribe_all()


@pytest.fixture
def test_config(temp_data_dir):
    """Configuration with storage pointing at a temporary directory."""
    config = WatjaiConfig()
    config.set('storage.data_directory', temp_data_dir)
    config.set('analysis.url', "http://127.0.0.1:1/unused")
    return config


class FakeConnection:
    """Stands in for ConnectionManager in state machine tests."""

    def __init__(self, connected: bool = True):
        self.is_connected = connected
        self.sent: List[str] = []
        self.failed: List[str] = []

    async def send_command(self, command: str) -> bool:
        if not self.is_connected:
            self.failed.append(command)
            return False
        self.sent.append(command)
        return True


@pytest.fixture
def fake_connection():
    return FakeConnection()


class DeviceSimulator:
    """WebSocket server that behaves like the acquisition device.

    ``responses`` maps an inbound command to the text messages sent back.
    """

    def __init__(self, responses: Optional[Dict[str, List[str]]] = None):
        self.responses = responses or {}
        self.received: List[str] = []
        self.sockets: List[web.WebSocketResponse] = []
        self.server: Optional[TestServer] = None

    async def _handle(self, request):
        ws = web.WebSocketResponse()
        await ws.prepare(request)
        self.sockets.append(ws)

        async for msg in ws:
            if msg.type == WSMsgType.TEXT:
                self.received.append(msg.data)
                for message in self.responses.get(msg.data, []):
                    await ws.send_str(message)
        return ws

    async def start(self) -> None:
        app = web.Application()
        app.router.add_get("/", self._handle)
        self.server = TestServer(app)
        await self.server.start_server()

    @property
    def url(self) -> str:
        return f"ws://{self.server.host}:{self.server.port}/"

    async def send(self, text: str) -> None:
        for ws in self.sockets:
            if not ws.closed:
                await ws.send_str(text)

    async def drop(self) -> None:
        """Close every client connection from the device side."""
        for ws in self.sockets:
            await ws.close()

    async def close(self) -> None:
        if self.server is not None:
            await self.server.close()


@pytest.fixture
def device_simulator():
    return DeviceSimulator


async def _wait_for(predicate, timeout: float = 2.0) -> bool:
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while loop.time() < deadline:
        if predicate():
            return True
        await asyncio.sleep(0.01)
    return predicate()


@pytest.fixture
def wait_for():
    """Coroutine polling ``predicate`` until true or timed out."""
    return _wait_for


class AnalysisApi:
    """Local stand-in for the remote ECG classification API."""

    def __init__(self, status: int = 200, body: Optional[dict] = None, text: Optional[str] = None):
        self.status = status
        self.text = text
        self.body = body if body is not None else {"prediction": "Normal", "confidence": 92.5}
        self.requests: List[dict] = []
        self.server: Optional[TestServer] = None

    async def _handle(self, request):
        self.requests.append(await request.json())
        if self.status != 200:
            return web.Response(status=self.status, text="model unavailable")
        if self.text is not None:
            return web.Response(text=self.text, content_type="text/html")
        return web.json_response(self.body)

    async def start(self) -> None:
        app = web.Application()
        app.router.add_post("/api/analyze", self._handle)
        self.server = TestServer(app)
        await self.server.start_server()

    @property
    def url(self) -> str:
        return str(self.server.make_url("/api/analyze"))

    async def close(self) -> None:
        if self.server is not None:
            await self.server.close()


@pytest.fixture
def analysis_api():
    return AnalysisApi
