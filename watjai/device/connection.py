"""WebSocket link to the acquisition device."""

import asyncio
import logging
from contextlib import suppress
from typing import Optional

import aiohttp

from ..models.device import ConnectionState, DeviceConnection
from ..protocol.frames import LineAssembler
from .events import ConnectionEvents

logger = logging.getLogger(__name__)

DEFAULT_PORT = 81


class ConnectionManager:
    """Owns the device socket: connect, read loop, command sends and teardown.

    Inbound text is published on the data channel; state changes and errors
    on their own channels. Failures never retry on their own: the caller
    decides when to connect again.
    """

    def __init__(self,
                 events: Optional[ConnectionEvents] = None,
                 port: int = DEFAULT_PORT,
                 path: str = "/",
                 message_framed: bool = True):
        """Initialize connection manager.

        Args:
            events: Event channels to publish on
            port: Device port used when the address is a bare host
            path: WebSocket path used when the address is a bare host
            message_framed: True if every socket message carries whole lines;
                otherwise lines are reassembled across messages
        """
        self.events = events or ConnectionEvents()
        self.port = port
        self.path = path
        self.connection = DeviceConnection()

        self._session: Optional[aiohttp.ClientSession] = None
        self._ws: Optional[aiohttp.ClientWebSocketResponse] = None
        self._reader_task: Optional[asyncio.Task] = None
        self._closing = False
        self._assembler = None if message_framed else LineAssembler()

    @property
    def is_connected(self) -> bool:
        return self.connection.is_connected

    def build_endpoint(self, address: str) -> str:
        """Expand a bare host or IP into a WebSocket URL."""
        address = address.strip()
        if "://" in address:
            return address
        path = self.path if self.path.startswith("/") else f"/{self.path}"
        return f"ws://{address}:{self.port}{path}"

    async def connect(self, address: str) -> bool:
        """Open the socket to ``address``.

        Returns:
            True when connected, False on failure (already reported on the
            connection and error channels)
        """
        if self._ws is not None:
            await self.disconnect()

        endpoint = self.build_endpoint(address)
        self.connection.endpoint = endpoint
        self._set_state(ConnectionState.CONNECTING)
        logger.info(f"Connecting to device at {endpoint}")

        session = aiohttp.ClientSession()
        try:
            ws = await session.ws_connect(endpoint)
        except (aiohttp.ClientError, OSError, asyncio.TimeoutError, ValueError) as e:
            await session.close()
            logger.warning(f"Connection to {endpoint} failed: {e}")
            self._set_state(ConnectionState.DISCONNECTED, f"Could not connect to device: {e}")
            return False

        self._session = session
        self._ws = ws
        if self._assembler is not None:
            self._assembler.flush()
        self._reader_task = asyncio.create_task(self._read_loop(ws))
        self._reader_task.set_name("DeviceReaderTask")

        self.connection.last_error = None
        self._set_state(ConnectionState.CONNECTED)
        logger.info(f"Connected to device at {endpoint}")
        return True

    async def reconnect(self) -> bool:
        """Connect again to the last endpoint used."""
        if not self.connection.endpoint:
            self._report_error("No previous device address to reconnect to")
            return False
        return await self.connect(self.connection.endpoint)

    async def disconnect(self) -> None:
        """Close the socket; safe to call when already disconnected."""
        self._closing = True
        try:
            await self._close_transport()
        finally:
            self._closing = False
        self._set_state(ConnectionState.DISCONNECTED)
        logger.info("Disconnected from device")

    async def send_command(self, command: str) -> bool:
        """Send one command line to the device.

        Never raises: failures are logged and published on the error channel.

        Returns:
            True if the command was written to the socket
        """
        ws = self._ws
        if not self.is_connected or ws is None or ws.closed:
            self._report_error(f"Cannot send {command}: not connected to device")
            return False

        try:
            await ws.send_str(command)
        except (aiohttp.ClientError, ConnectionError, RuntimeError) as e:
            self._report_error(f"Failed to send {command}: {e}")
            return False

        logger.debug(f"Sent command: {command}")
        return True

    async def _close_transport(self) -> None:
        ws, session, task = self._ws, self._session, self._reader_task
        self._ws = None
        self._session = None
        self._reader_task = None

        if ws is not None and not ws.closed:
            await ws.close()
        if task is not None and task is not asyncio.current_task():
            task.cancel()
            with suppress(asyncio.CancelledError):
                await task
        if session is not None:
            await session.close()

    async def _read_loop(self, ws: aiohttp.ClientWebSocketResponse) -> None:
        """Dispatch inbound messages until the socket closes."""
        error = None
        try:
            async for msg in ws:
                if msg.type == aiohttp.WSMsgType.TEXT:
                    self._dispatch(msg.data)
                elif msg.type == aiohttp.WSMsgType.BINARY:
                    self._dispatch(msg.data.decode("utf-8", errors="replace"))
                elif msg.type == aiohttp.WSMsgType.ERROR:
                    error = f"Connection error: {ws.exception()}"
                    break
        except (aiohttp.ClientError, ConnectionError) as e:
            error = f"Connection error: {e}"

        if self._closing:
            return

        logger.warning(f"Device connection lost ({error or 'closed by device'})")
        await self._close_transport()
        self._set_state(ConnectionState.DISCONNECTED, error or "Connection to device lost")

    def _dispatch(self, text: str) -> None:
        if self._assembler is not None:
            lines = self._assembler.feed(text)
            if not lines:
                return
            text = "\n".join(lines) + "\n"

        try:
            self.events.publish_data(text)
        except Exception as e:
            # a failing consumer must not take the socket down
            logger.error(f"Data listener failed: {e}", exc_info=True)

    def _set_state(self, state: ConnectionState, error: Optional[str] = None) -> None:
        self.connection.state = state
        if error:
            self.connection.last_error = error
        logger.debug(f"Connection state: {state.value}")
        self.events.publish_connection(state, error)
        if error:
            self.events.publish_error(error)

    def _report_error(self, message: str) -> None:
        logger.warning(message)
        self.connection.last_error = message
        self.events.publish_error(message)
