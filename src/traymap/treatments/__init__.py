"""traymap treatments — display resolution of treatment ids."""

from traymap.treatments.cache import TreatmentLookup, TreatmentResolutionCache
from traymap.treatments.tracker import ResolutionTracker, Ticket

__all__ = [
    "ResolutionTracker",
    "Ticket",
    "TreatmentLookup",
    "TreatmentResolutionCache",
]
