"""Observer channels for device connection, error and data events."""

import logging
from typing import Callable, Dict, Optional

from pubsub import pub

from ..models.device import ConnectionState

logger = logging.getLogger(__name__)

CONNECTION = "connection"
ERROR = "error"
DATA = "data"
SLOTS = (CONNECTION, ERROR, DATA)


def _connection_proto(state: ConnectionState, error: Optional[str] = None) -> None:
    pass


def _error_proto(message: str) -> None:
    pass


def _data_proto(text: str) -> None:
    pass


_PROTOTYPES = {
    CONNECTION: _connection_proto,
    ERROR: _error_proto,
    DATA: _data_proto,
}


class ConnectionEvents:
    """Publishes device events on pubsub topics with one subscriber per slot.

    Listener signatures per slot:
        connection: listener(state, error=None)
        error:      listener(message)
        data:       listener(text)

    Subscribing to a slot replaces whatever listener held it before.
    """

    def __init__(self, prefix: str = "device"):
        """Initialize device event channels.

        Args:
            prefix: Topic name prefix; topics are ``<prefix>_<slot>``
        """
        self.prefix = prefix
        self.topics = {slot: f"{prefix}_{slot}" for slot in SLOTS}
        self._listeners: Dict[str, Callable] = {}

        topic_manager = pub.getDefaultTopicMgr()
        for slot, topic in self.topics.items():
            topic_manager.getOrCreateTopic(topic, _PROTOTYPES[slot])

        logger.debug(f"ConnectionEvents initialized with topics: {list(self.topics.values())}")

    def _topic(self, slot: str) -> str:
        if slot not in self.topics:
            raise ValueError(f"Unknown event slot: {slot}")
        return self.topics[slot]

    def subscribe(self, slot: str, listener: Callable) -> None:
        """Attach ``listener`` to ``slot``, replacing the current subscriber."""
        topic = self._topic(slot)
        self.unsubscribe(slot)
        pub.subscribe(listener, topic)
        # pubsub only keeps weak references
        self._listeners[slot] = listener

    def unsubscribe(self, slot: str) -> None:
        listener = self._listeners.pop(slot, None)
        if listener is not None:
            pub.unsubscribe(listener, self._topic(slot))

    def unsubscribe_all(self) -> None:
        for slot in SLOTS:
            self.unsubscribe(slot)

    def listener(self, slot: str) -> Optional[Callable]:
        return self._listeners.get(slot)

    def publish_connection(self, state: ConnectionState, error: Optional[str] = None) -> None:
        pub.sendMessage(self.topics[CONNECTION], state=state, error=error)

    def publish_error(self, message: str) -> None:
        pub.sendMessage(self.topics[ERROR], message=message)

    def publish_data(self, text: str) -> None:
        pub.sendMessage(self.topics[DATA], text=text)
