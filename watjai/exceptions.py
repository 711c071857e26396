"""Exception types for the Watjai acquisition core.

Every error raised here is recoverable by user action (reconnect,
re-record, retry analysis); none of them is fatal to the process.
"""


class WatjaiError(Exception):
    """Base exception for all Watjai errors."""
    pass


class RecordingPreconditionError(WatjaiError):
    """Raised when a recording transition is refused (state is left unchanged)."""
    pass


class AnalysisPreconditionError(WatjaiError):
    """Raised when the captured leads cannot be submitted for analysis."""
    pass


class AnalysisError(WatjaiError):
    """Raised when the external analysis call fails.

    Attributes:
        status: HTTP status returned by the analysis service, if any
    """

    def __init__(self, message: str, status: int = None):
        super().__init__(message)
        self.status = status
