"""Request and verdict models for the external ECG analysis service."""

from typing import List, Optional

from pydantic import BaseModel, Field

SAMPLING_RATE = 360

NORMAL_PREDICTIONS = ("Normal", "Normal Sinus Rhythm")


class AnalysisRequest(BaseModel):
    """Payload sent to the analysis service."""
    signal_lead1: List[int]
    signal_lead2: Optional[List[int]] = None
    signal_lead3: Optional[List[int]] = None
    sampling_rate: int = SAMPLING_RATE


class AnalysisVerdict(BaseModel):
    """Classification returned by the analysis service."""
    prediction: str
    confidence: float = Field(ge=0, le=100)
    risk_level: Optional[str] = None

    @property
    def is_normal_rhythm(self) -> bool:
        return (self.prediction in NORMAL_PREDICTIONS
                or "normal" in self.prediction.lower())

    @property
    def effective_risk_level(self) -> str:
        """Risk level reported by the service, or one inferred from the prediction."""
        if self.risk_level:
            return self.risk_level
        if self.prediction in NORMAL_PREDICTIONS:
            if self.confidence > 80:
                return "Low Risk"
            if self.confidence > 50:
                return "Medium Risk"
        return "High Risk"
