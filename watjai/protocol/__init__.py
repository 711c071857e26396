"""Device wire protocol."""

from .frames import Frame, FrameKind, LineAssembler, classify_line, parse_frames

__all__ = [
    "Frame",
    "FrameKind",
    "LineAssembler",
    "classify_line",
    "parse_frames",
]
