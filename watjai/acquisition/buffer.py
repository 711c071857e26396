"""Sample accumulator and rolling display window for the lead being recorded."""

import logging
from collections import deque
from typing import Iterable, List

logger = logging.getLogger(__name__)

DISPLAY_WINDOW_SIZE = 500


class SampleBuffer:
    """Accumulates samples for the current lead and keeps a bounded preview window.

    The accumulator grows until it is flushed into a lead recording. The
    display window only ever holds the most recent ``window_size`` samples,
    oldest discarded first, and is independent of the accumulator.
    """

    def __init__(self, window_size: int = DISPLAY_WINDOW_SIZE):
        """Initialize sample buffer.

        Args:
            window_size: Maximum number of samples kept for live preview
        """
        self.window_size = window_size
        self.accumulator: List[int] = []
        self.display_window = deque(maxlen=window_size)
        self.total_samples = 0

        logger.debug(f"SampleBuffer initialized: display window of {window_size} samples")

    def on_sample_line(self, values: Iterable[int]) -> None:
        """Append samples, in order, to both the accumulator and the display window."""
        values = list(values)
        self.accumulator.extend(values)
        self.display_window.extend(values)
        self.total_samples += len(values)

    def on_single_sample(self, value: int) -> None:
        self.on_sample_line((value,))

    def on_data_start(self) -> None:
        """Start a new segment; the display window is left untouched."""
        if self.accumulator:
            logger.debug(f"DATA:START discarding {len(self.accumulator)} unflushed samples")
        self.accumulator = []

    def flush(self) -> List[int]:
        """Return the accumulated samples (possibly empty) and clear the accumulator."""
        samples, self.accumulator = self.accumulator, []
        return samples

    def clear_display(self) -> None:
        self.display_window.clear()

    def get_display_samples(self) -> List[int]:
        return list(self.display_window)

    def get_buffer_stats(self) -> dict:
        """Get buffer statistics."""
        return {
            "accumulated_samples": len(self.accumulator),
            "display_samples": len(self.display_window),
            "display_capacity": self.window_size,
            "total_samples": self.total_samples,
        }
