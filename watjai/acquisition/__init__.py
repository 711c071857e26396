"""Sample buffering and the lead recording state machine."""

from .buffer import SampleBuffer
from .session import RecordingSession, RecordingState, SessionPhase
from .recording import RecordingController

__all__ = [
    "SampleBuffer",
    "RecordingSession",
    "RecordingState",
    "SessionPhase",
    "RecordingController",
]
