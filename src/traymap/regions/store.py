"""RegionStore — the ordered region assignment of one experiment."""

from __future__ import annotations

import dataclasses
from typing import Any, Iterable, Iterator, Mapping, Sequence

from traymap.core.exceptions import RegionNotFoundError
from traymap.core.models import Cell, Region, Tray, TrayLayout, TreatmentInfo
from traymap.regions.migration import migrate_regions
from traymap.regions.selection import create_region
from traymap.regions.validation import (
    ValidationIssue,
    region_issues,
    require_valid,
    validate_regions,
)

_EDITABLE_FIELDS = frozenset({
    "name", "treatment_id", "dilution", "is_background_key", "treatment",
})


class RegionStore:
    """An immutable, insertion-ordered list of regions.

    Every mutation returns a new store and leaves this one untouched, so
    renderers and autosave always see a consistent snapshot.
    """

    def __init__(self, regions: Iterable[Region] = ()) -> None:
        self._regions = tuple(regions)

    # --- Construction ---

    @classmethod
    def load(cls, records: Sequence[Mapping[str, Any]], layout: TrayLayout) -> RegionStore:
        """Build a store from persisted region records.

        Legacy records without a ``tray_sequence_id`` are assigned a tray
        here, once per load.
        """
        regions = [Region.from_dict(r) for r in records]
        return cls(migrate_regions(regions, layout))

    # --- Sequence protocol ---

    def __len__(self) -> int:
        return len(self._regions)

    def __iter__(self) -> Iterator[Region]:
        return iter(self._regions)

    def __getitem__(self, index: int) -> Region:
        return self._get(index)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RegionStore):
            return NotImplemented
        return self._regions == other._regions

    def __repr__(self) -> str:
        return f"RegionStore({len(self._regions)} regions)"

    @property
    def regions(self) -> tuple[Region, ...]:
        return self._regions

    def _get(self, index: int) -> Region:
        if not 0 <= index < len(self._regions):
            raise RegionNotFoundError(index)
        return self._regions[index]

    # --- Mutations (each returns a new store) ---

    def append(self, region: Region) -> RegionStore:
        return RegionStore((*self._regions, region))

    def extend(self, regions: Iterable[Region]) -> RegionStore:
        return RegionStore((*self._regions, *regions))

    def add_selection(
        self, tray: Tray, upper_left: Cell, lower_right: Cell, name: str = "",
    ) -> RegionStore:
        """Add a region from a drag selection on ``tray``.

        Raises:
            CellOutOfBoundsError: If a corner is outside the tray.
            OverlapError: If the selection intersects a region on that tray.
        """
        region = create_region(
            tray, upper_left, lower_right, self._regions,
            store_length=len(self._regions), name=name,
        )
        return self.append(region)

    def remove(self, index: int) -> RegionStore:
        self._get(index)
        return RegionStore(r for i, r in enumerate(self._regions) if i != index)

    def update(self, index: int, field: str, value: Any) -> RegionStore:
        """Replace one editable field of the region at ``index``.

        Changing ``treatment_id`` drops a nested treatment that no longer
        matches it.

        Raises:
            RegionNotFoundError: If ``index`` is outside the store.
            ValueError: If ``field`` is not editable.
        """
        region = self._get(index)
        if field not in _EDITABLE_FIELDS:
            raise ValueError(
                f"Region field {field!r} is not editable. "
                f"Must be one of {sorted(_EDITABLE_FIELDS)}"
            )
        changes: dict[str, Any] = {field: value}
        if field == "treatment_id" and region.treatment is not None and region.treatment.id != value:
            changes["treatment"] = None
        updated = dataclasses.replace(region, **changes)
        return RegionStore(
            updated if i == index else r for i, r in enumerate(self._regions)
        )

    def apply_treatment_to_all(self, treatment_id: str) -> RegionStore:
        """Set the same treatment on every region, keeping all other fields."""
        return RegionStore(
            dataclasses.replace(
                r,
                treatment_id=treatment_id,
                treatment=r.treatment if r.treatment and r.treatment.id == treatment_id else None,
            )
            for r in self._regions
        )

    def migrate(self, layout: TrayLayout) -> RegionStore:
        return RegionStore(migrate_regions(self._regions, layout))

    def import_interchange(self, text: str, layout: TrayLayout) -> RegionStore:
        """Append the regions described by an interchange document.

        Entries that would overlap a region already on the same tray are
        skipped with a warning.

        Raises:
            InterchangeParseError: If the text holds no usable entry; the
                store is not changed.
        """
        from traymap.io.interchange import import_regions

        return self.extend(import_regions(text, layout, existing=self._regions))

    def export_interchange(self, layout: TrayLayout) -> str:
        from traymap.io.interchange import export_regions

        return export_regions(self._regions, layout)

    # --- Queries ---

    def on_tray(self, tray_sequence_id: int) -> list[Region]:
        return [r for r in self._regions if r.tray_sequence_id == tray_sequence_id]

    def region_at(self, tray_sequence_id: int, cell: Cell) -> Region | None:
        """The region covering ``cell`` on a tray, if any."""
        for region in self.on_tray(tray_sequence_id):
            if region.contains(cell):
                return region
        return None

    def existing_treatments(self, exclude_index: int | None = None) -> list[TreatmentInfo]:
        """Unique resolved treatments already used by other regions."""
        seen: set[str] = set()
        treatments = []
        for i, region in enumerate(self._regions):
            treatment = region.treatment
            if i == exclude_index or treatment is None or not region.has_resolved_treatment:
                continue
            if treatment.id in seen:
                continue
            seen.add(treatment.id)
            treatments.append(treatment)
        return treatments

    def validate(self) -> str | None:
        return validate_regions(self._regions)

    def issues(self) -> list[ValidationIssue]:
        return region_issues(self._regions)

    def require_valid(self) -> None:
        require_valid(self._regions)

    def to_records(self) -> list[dict[str, Any]]:
        return [r.to_dict() for r in self._regions]
