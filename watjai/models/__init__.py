"""Data models for the Watjai application."""

from .device import ConnectionState, DeviceConnection
from .leads import (
    LEAD_NAMES,
    LEAD_NUMBERS,
    LIMB_LEADS,
    AUGMENTED_LEADS,
    PRECORDIAL_LEADS,
    LeadRecording,
    DerivedLeadSet,
    lead_name,
)
from .analysis import SAMPLING_RATE, AnalysisRequest, AnalysisVerdict

__all__ = [
    "ConnectionState",
    "DeviceConnection",
    "LEAD_NAMES",
    "LEAD_NUMBERS",
    "LIMB_LEADS",
    "AUGMENTED_LEADS",
    "PRECORDIAL_LEADS",
    "LeadRecording",
    "DerivedLeadSet",
    "lead_name",
    "SAMPLING_RATE",
    "AnalysisRequest",
    "AnalysisVerdict",
]
