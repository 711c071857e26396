"""State of one three-lead measurement session."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict

from ..analysis.derivation import derive_leads
from ..models.leads import LEAD_NUMBERS, DerivedLeadSet, LeadRecording, lead_name
from .buffer import SampleBuffer

MAX_RECORDING_SECONDS = 15


class RecordingState(Enum):
    IDLE = "idle"
    RECORDING = "recording"


class SessionPhase(Enum):
    """Recording covers leads I-III; assembly follows once lead III is done."""
    RECORDING = "recording"
    ASSEMBLY = "assembly"


def _empty_leads() -> Dict[int, LeadRecording]:
    return {number: LeadRecording(number) for number in LEAD_NUMBERS}


@dataclass
class RecordingSession:
    """Session state; only RecordingController writes to it."""
    current_lead: int = 1
    elapsed_seconds: int = 0
    max_duration: int = MAX_RECORDING_SECONDS
    state: RecordingState = RecordingState.IDLE
    phase: SessionPhase = SessionPhase.RECORDING
    buffer: SampleBuffer = field(default_factory=SampleBuffer)
    leads: Dict[int, LeadRecording] = field(default_factory=_empty_leads)
    derived: DerivedLeadSet = field(default_factory=DerivedLeadSet)

    @property
    def is_recording(self) -> bool:
        return self.state is RecordingState.RECORDING

    @property
    def current_recording(self) -> LeadRecording:
        return self.leads[self.current_lead]

    def refresh_derived(self) -> None:
        """Recompute every derived lead from scratch when all base leads have data."""
        if all(not self.leads[number].is_empty for number in LEAD_NUMBERS):
            self.derived = derive_leads(self.leads[1].samples,
                                        self.leads[2].samples,
                                        self.leads[3].samples)
        else:
            self.derived = DerivedLeadSet()

    def get_status(self) -> Dict[str, Any]:
        """Read-only snapshot for display layers."""
        return {
            "current_lead": self.current_lead,
            "current_lead_name": lead_name(self.current_lead),
            "state": self.state.value,
            "phase": self.phase.value,
            "elapsed_seconds": self.elapsed_seconds,
            "max_duration": self.max_duration,
            "progress": self.elapsed_seconds / self.max_duration,
            "lead_samples": {number: len(lead.samples) for number, lead in self.leads.items()},
            "lead_complete": {number: lead.complete for number, lead in self.leads.items()},
            "display_samples": self.buffer.get_display_samples(),
            "derived_length": len(self.derived),
        }
