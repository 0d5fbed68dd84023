"""Form-level validation of a region store, applied at save time."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import Sequence

from traymap.core.exceptions import RegionValidationError
from traymap.core.models import Region

DUPLICATE_NAME = "Region names must be unique"
MISSING_NAME = "All regions must have a name"
MISSING_TREATMENT = "All regions must have a treatment"
MISSING_DILUTION = "All regions must have a dilution factor"


@dataclass(frozen=True)
class ValidationIssue:
    """One problem with one region, for highlighting the offending row."""

    index: int
    field: str
    message: str


def _duplicate_names(regions: Sequence[Region]) -> set[str]:
    counts = Counter(r.name.strip() for r in regions if r.name.strip())
    return {name for name, n in counts.items() if n > 1}


def region_issues(regions: Sequence[Region]) -> list[ValidationIssue]:
    """Every issue in the store, in region order then priority order."""
    duplicates = _duplicate_names(regions)
    issues: list[ValidationIssue] = []
    for i, region in enumerate(regions):
        name = region.name.strip()
        if name in duplicates:
            issues.append(ValidationIssue(i, "name", DUPLICATE_NAME))
        if not name:
            issues.append(ValidationIssue(i, "name", MISSING_NAME))
        if not region.treatment_id.strip():
            issues.append(ValidationIssue(i, "treatment_id", MISSING_TREATMENT))
        if not region.dilution.strip():
            issues.append(ValidationIssue(i, "dilution", MISSING_DILUTION))
    return issues


def validate_regions(regions: Sequence[Region]) -> str | None:
    """The single message to show for the store, or None if it is valid.

    Priority: duplicate name, missing name, missing treatment, missing
    dilution. Duplicates compare trimmed names, case-sensitively.
    """
    messages = {issue.message for issue in region_issues(regions)}
    for message in (DUPLICATE_NAME, MISSING_NAME, MISSING_TREATMENT, MISSING_DILUTION):
        if message in messages:
            return message
    return None


def require_valid(regions: Sequence[Region]) -> None:
    """Raise RegionValidationError unless the store can be saved."""
    message = validate_regions(regions)
    if message is not None:
        raise RegionValidationError(message)
