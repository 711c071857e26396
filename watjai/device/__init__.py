"""Device link and event channels."""

from .events import ConnectionEvents
from .connection import ConnectionManager

__all__ = [
    "ConnectionEvents",
    "ConnectionManager",
]
