"""traymap core — tray, region and treatment models plus exceptions."""

from traymap.core.exceptions import (
    CellOutOfBoundsError,
    InterchangeParseError,
    OverlapError,
    RegionNotFoundError,
    RegionValidationError,
    TrayMapError,
    TrayNotFoundError,
)
from traymap.core.models import (
    VALID_ROTATIONS,
    Cell,
    DisplayIndex,
    GridShape,
    LocationInfo,
    Region,
    ResolvedTreatment,
    SampleInfo,
    Tray,
    TrayLayout,
    TreatmentInfo,
    WellSummary,
    flatten_sample_results,
)

__all__ = [
    "VALID_ROTATIONS",
    "Cell",
    "DisplayIndex",
    "GridShape",
    "LocationInfo",
    "Region",
    "ResolvedTreatment",
    "SampleInfo",
    "Tray",
    "TrayLayout",
    "TreatmentInfo",
    "WellSummary",
    "flatten_sample_results",
    "TrayMapError",
    "TrayNotFoundError",
    "RegionNotFoundError",
    "CellOutOfBoundsError",
    "OverlapError",
    "RegionValidationError",
    "InterchangeParseError",
]
