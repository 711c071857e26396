"""Abstract base class for ECG analysis backends."""

from abc import ABC, abstractmethod

from ..models.analysis import AnalysisRequest, AnalysisVerdict


class AbstractAnalysisBackend(ABC):
    """Black-box ECG classifier: three lead sample sequences in, a verdict out."""

    @abstractmethod
    async def analyze(self, request: AnalysisRequest) -> AnalysisVerdict:
        """Classify the submitted leads.

        Args:
            request: Lead samples and sampling rate

        Returns:
            AnalysisVerdict with prediction label and confidence percentage

        Raises:
            AnalysisError: If the service cannot produce a verdict
        """
        pass
