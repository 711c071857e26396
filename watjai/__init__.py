"""Watjai: three-lead ECG acquisition over a WebSocket link."""

__version__ = "0.1.0"
