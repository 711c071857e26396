"""Packages the captured leads for analysis and keeps the latest verdict."""

import logging
from typing import Mapping, Optional

from ..exceptions import AnalysisError, AnalysisPreconditionError
from ..models.analysis import SAMPLING_RATE, AnalysisRequest, AnalysisVerdict
from ..models.leads import LeadRecording
from .base import AbstractAnalysisBackend

logger = logging.getLogger(__name__)


class ResultsAssembler:
    """Submits leads I-III to the analysis backend and stores the verdict.

    A failed analysis leaves the previous verdict in place.
    """

    def __init__(self, backend: AbstractAnalysisBackend):
        self.backend = backend
        self.result: Optional[AnalysisVerdict] = None

    @staticmethod
    def build_request(leads: Mapping[int, LeadRecording]) -> AnalysisRequest:
        """Build the request; leads II and III are sent as null when empty.

        Raises:
            AnalysisPreconditionError: If lead I has no samples
        """
        lead1 = leads.get(1)
        if lead1 is None or lead1.is_empty:
            raise AnalysisPreconditionError("Please measure Lead I first")

        def optional_samples(lead_number: int):
            lead = leads.get(lead_number)
            return list(lead.samples) if lead is not None and not lead.is_empty else None

        return AnalysisRequest(
            signal_lead1=list(lead1.samples),
            signal_lead2=optional_samples(2),
            signal_lead3=optional_samples(3),
            sampling_rate=SAMPLING_RATE,
        )

    async def submit(self, leads: Mapping[int, LeadRecording]) -> AnalysisVerdict:
        """Run the analysis and replace the stored verdict on success."""
        request = self.build_request(leads)

        try:
            verdict = await self.backend.analyze(request)
        except AnalysisError as e:
            logger.error(f"Analysis failed: {e}")
            raise
        except Exception as e:
            logger.error(f"Analysis failed: {e}", exc_info=True)
            raise AnalysisError(f"Analysis failed: {e}") from e

        self.result = verdict
        logger.info(f"Analysis result: {verdict.prediction} ({verdict.confidence:.1f}%), "
                    f"{verdict.effective_risk_level}")
        return verdict
