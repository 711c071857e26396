"""Device connection data models."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ConnectionState(Enum):
    """Lifecycle state of the device socket."""
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"


@dataclass
class DeviceConnection:
    """Process-wide record of the device link, mutated only by ConnectionManager."""
    endpoint: Optional[str] = None
    state: ConnectionState = ConnectionState.DISCONNECTED
    last_error: Optional[str] = None

    @property
    def is_connected(self) -> bool:
        return self.state is ConnectionState.CONNECTED
