"""Read-only display grid for a tray: which well, region and result sit where."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, Mapping, Sequence

from traymap.core.models import Cell, DisplayIndex, Region, Tray, WellSummary
from traymap.geometry.coordinates import cell_to_label
from traymap.geometry.rotation import (
    AxisLabels,
    axis_labels,
    display_shape,
    tray_from_display,
)


@dataclass(frozen=True)
class WellView:
    """Everything a renderer needs for one drawn well."""

    display: DisplayIndex
    cell: Cell
    label: str
    region: Region | None = None
    summary: WellSummary | None = None


@dataclass(frozen=True)
class DisplayGrid:
    """Wells of one tray laid out in display order (``wells[y][x]``)."""

    tray: Tray
    axis: AxisLabels
    wells: tuple[tuple[WellView, ...], ...]

    def rows(self) -> Iterator[tuple[WellView, ...]]:
        return iter(self.wells)

    def at(self, index: DisplayIndex) -> WellView:
        return self.wells[index.y_index][index.x_index]


def format_seconds(seconds: float | None) -> str:
    """Render a duration as ``"{m}m {s}s"``, or ``"N/A"`` when unknown."""
    if seconds is None:
        return "N/A"
    total = int(seconds)
    return f"{total // 60}m {total % 60}s"


def index_summaries(
    summaries: Iterable[WellSummary], tray_name: str | None = None,
) -> dict[str, WellSummary]:
    """Key well summaries by label, optionally keeping one tray's wells only."""
    return {
        s.coordinate: s
        for s in summaries
        if tray_name is None or s.tray_name in (None, tray_name)
    }


def build_display_grid(
    tray: Tray,
    regions: Sequence[Region] = (),
    well_summaries: Mapping[str, WellSummary] | None = None,
) -> DisplayGrid:
    """Lay out a tray's wells in display order.

    Args:
        tray: The tray to draw.
        regions: Regions to overlay; only those on this tray are used.
        well_summaries: Results keyed by well label (see ``index_summaries``).

    Returns:
        A DisplayGrid whose rows follow the rotated display shape.
    """
    on_tray = [r for r in regions if r.tray_sequence_id == tray.sequence_id]
    summaries = well_summaries or {}
    shown = display_shape(tray, tray.rotation_degrees)

    wells = []
    for y in range(shown.rows):
        row = []
        for x in range(shown.columns):
            index = DisplayIndex(x, y)
            cell = tray_from_display(index, tray)
            label = cell_to_label(cell, tray)
            region = next((r for r in on_tray if r.contains(cell)), None)
            row.append(WellView(index, cell, label, region, summaries.get(label)))
        wells.append(tuple(row))

    return DisplayGrid(tray=tray, axis=axis_labels(tray), wells=tuple(wells))
