"""Line-oriented device protocol: frame classification and line reassembly.

The device streams newline-delimited ASCII lines:

    STATUS:...      informational, ignored by capture
    BUFFER:FULL     device buffer filled, flush now
    DATA:START      a new sample segment begins
    DATA:END        the sample segment is over, flush
    v1,v2,...       one or more integer samples
    v               a single integer sample

Anything else is a protocol error and is dropped without a frame. A sample
line with any token that is not an integer is rejected as a whole.
"""

import logging
import re
from enum import Enum
from typing import Iterator, List, NamedTuple, Optional, Tuple

logger = logging.getLogger(__name__)

_INTEGER = re.compile(r"^[+-]?\d+$")


class FrameKind(Enum):
    STATUS = "status"
    BUFFER_FULL = "buffer_full"
    DATA_START = "data_start"
    DATA_END = "data_end"
    SAMPLE_LINE = "sample_line"
    SINGLE_SAMPLE = "single_sample"


class Frame(NamedTuple):
    """One classified protocol line."""
    kind: FrameKind
    values: Tuple[int, ...] = ()
    text: str = ""


_PREFIXES = (
    ("STATUS:", FrameKind.STATUS),
    ("BUFFER:FULL", FrameKind.BUFFER_FULL),
    ("DATA:START", FrameKind.DATA_START),
    ("DATA:END", FrameKind.DATA_END),
)


def _parse_int(token: str) -> Optional[int]:
    token = token.strip()
    if not _INTEGER.match(token):
        return None
    return int(token)


def classify_line(line: str) -> Optional[Frame]:
    """Classify a single line; returns None for blank or malformed lines."""
    text = line.strip()
    if not text:
        return None

    for prefix, kind in _PREFIXES:
        if text.startswith(prefix):
            return Frame(kind, (), text)

    if "," in text:
        values = []
        for token in text.split(","):
            value = _parse_int(token)
            if value is None:
                logger.debug(f"Dropping sample line with malformed token {token!r}: {text!r}")
                return None
            values.append(value)
        return Frame(FrameKind.SAMPLE_LINE, tuple(values), text)

    value = _parse_int(text)
    if value is None:
        logger.debug(f"Dropping unrecognised line: {text!r}")
        return None
    return Frame(FrameKind.SINGLE_SAMPLE, (value,), text)


def parse_frames(chunk: str) -> Iterator[Frame]:
    """Lazily yield the frames of every line in ``chunk``, in arrival order.

    The chunk is treated as line-complete: a trailing segment without a
    newline is parsed as a line. Use LineAssembler when the transport can
    split a line across chunks.
    """
    for line in chunk.split("\n"):
        frame = classify_line(line)
        if frame is not None:
            yield frame


class LineAssembler:
    """Reassembles lines split across transport chunks.

    Holds back the trailing partial line of every chunk until the newline
    that completes it arrives.
    """

    def __init__(self):
        self._pending = ""

    @property
    def pending(self) -> str:
        return self._pending

    def feed(self, chunk: str) -> List[str]:
        """Add a chunk and return the lines it completed."""
        data = self._pending + chunk
        lines = data.split("\n")
        self._pending = lines.pop()
        return lines

    def flush(self) -> List[str]:
        """Return the held partial line, if any, and reset."""
        remainder, self._pending = self._pending, ""
        return [remainder] if remainder else []

    def frames(self, chunk: str) -> Iterator[Frame]:
        """Feed a chunk and yield the frames of the lines it completed."""
        for line in self.feed(chunk):
            frame = classify_line(line)
            if frame is not None:
                yield frame
