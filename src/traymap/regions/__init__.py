"""traymap regions — creation, validation, migration and the region store."""

from traymap.regions.migration import assign_tray, migrate_regions, needs_migration
from traymap.regions.selection import (
    PALETTE,
    color_for_index,
    create_region,
    find_overlap,
    normalize_corners,
    selection_conflicts,
)
from traymap.regions.store import RegionStore
from traymap.regions.validation import (
    DUPLICATE_NAME,
    MISSING_DILUTION,
    MISSING_NAME,
    MISSING_TREATMENT,
    ValidationIssue,
    region_issues,
    require_valid,
    validate_regions,
)

__all__ = [
    "PALETTE",
    "DUPLICATE_NAME",
    "MISSING_NAME",
    "MISSING_TREATMENT",
    "MISSING_DILUTION",
    "RegionStore",
    "ValidationIssue",
    "assign_tray",
    "color_for_index",
    "create_region",
    "find_overlap",
    "migrate_regions",
    "needs_migration",
    "normalize_corners",
    "region_issues",
    "require_valid",
    "selection_conflicts",
    "validate_regions",
]
