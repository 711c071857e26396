"""Lead derivation and external analysis."""

from .base import AbstractAnalysisBackend
from .derivation import derive_leads
from .http_backend import HttpAnalysisBackend
from .assembler import ResultsAssembler

__all__ = [
    "AbstractAnalysisBackend",
    "derive_leads",
    "HttpAnalysisBackend",
    "ResultsAssembler",
]
