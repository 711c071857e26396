"""Lead recording and derived lead data models."""

from dataclasses import dataclass, field
from typing import Dict, List, Tuple

from ..exceptions import RecordingPreconditionError

LEAD_NUMBERS = (1, 2, 3)
LEAD_NAMES = {1: "I", 2: "II", 3: "III"}

LIMB_LEADS = ("I", "II", "III")
AUGMENTED_LEADS = ("aVR", "aVL", "aVF")
PRECORDIAL_LEADS = ("V1", "V2", "V3", "V4", "V5", "V6")


def lead_name(lead_number: int) -> str:
    """Return the conventional name (I, II, III) of a captured lead."""
    return LEAD_NAMES[lead_number]


@dataclass
class LeadRecording:
    """Samples captured for one of the three base leads."""
    lead_number: int
    samples: List[int] = field(default_factory=list)
    complete: bool = False

    @property
    def name(self) -> str:
        return lead_name(self.lead_number)

    @property
    def is_empty(self) -> bool:
        return not self.samples

    def append_samples(self, values: List[int]) -> None:
        """Append flushed samples; completed recordings are immutable."""
        if self.complete:
            raise RecordingPreconditionError(
                f"Lead {self.name} recording is complete and cannot be modified")
        self.samples.extend(values)

    def mark_complete(self) -> None:
        self.complete = True


@dataclass(frozen=True)
class DerivedLeadSet:
    """The nine leads computed from leads I, II and III."""
    avr: Tuple[float, ...] = ()
    avl: Tuple[float, ...] = ()
    avf: Tuple[float, ...] = ()
    v1: Tuple[float, ...] = ()
    v2: Tuple[float, ...] = ()
    v3: Tuple[float, ...] = ()
    v4: Tuple[float, ...] = ()
    v5: Tuple[float, ...] = ()
    v6: Tuple[float, ...] = ()

    def __len__(self) -> int:
        return len(self.avr)

    @property
    def is_empty(self) -> bool:
        return len(self) == 0

    def as_dict(self) -> Dict[str, List[float]]:
        """Return the derived leads keyed by their conventional names."""
        return {
            "aVR": list(self.avr),
            "aVL": list(self.avl),
            "aVF": list(self.avf),
            "V1": list(self.v1),
            "V2": list(self.v2),
            "V3": list(self.v3),
            "V4": list(self.v4),
            "V5": list(self.v5),
            "V6": list(self.v6),
        }
