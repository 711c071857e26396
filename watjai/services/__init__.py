"""Services layer for Watjai application logic."""

from .measurement_service import MeasurementService

__all__ = [
    "MeasurementService",
]
