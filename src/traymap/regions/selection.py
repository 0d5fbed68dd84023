"""Region creation from a drag selection, with overlap checking."""

from __future__ import annotations

from typing import Iterable

from traymap.core.exceptions import CellOutOfBoundsError, OverlapError
from traymap.core.models import Cell, Region, Tray

# ColorBrewer "Dark2", colorblind-safe.
PALETTE = (
    "#1b9e77",
    "#d95f02",
    "#7570b3",
    "#e7298a",
    "#66a61e",
    "#e6ab02",
    "#a6761d",
    "#666666",
)


def color_for_index(index: int) -> str:
    """Palette color for the region inserted at position ``index``.

    Follows insertion order only; removing or reordering regions does not
    recolor the rest.
    """
    return PALETTE[index % len(PALETTE)]


def normalize_corners(a: Cell, b: Cell) -> tuple[int, int, int, int]:
    """Return ``(row_min, row_max, col_min, col_max)`` whatever the drag direction."""
    return (min(a.row, b.row), max(a.row, b.row), min(a.col, b.col), max(a.col, b.col))


def find_overlap(
    tray_sequence_id: int | None,
    bounds: tuple[int, int, int, int],
    regions: Iterable[Region],
) -> Region | None:
    """First region on the same tray whose box intersects ``bounds``, if any."""
    for other in regions:
        if other.tray_sequence_id == tray_sequence_id and other.intersects(*bounds):
            return other
    return None


def selection_conflicts(
    tray: Tray, start: Cell, end: Cell, regions: Iterable[Region],
) -> set[Cell]:
    """Cells of an in-progress selection already covered by a region.

    Used to flag a drag before it is released; an empty set means the
    selection can be created.
    """
    row_min, row_max, col_min, col_max = normalize_corners(start, end)
    on_tray = [r for r in regions if r.tray_sequence_id == tray.sequence_id]
    return {
        Cell(row, col)
        for row in range(row_min, row_max + 1)
        for col in range(col_min, col_max + 1)
        if any(r.contains(Cell(row, col)) for r in on_tray)
    }


def create_region(
    tray: Tray,
    upper_left: Cell,
    lower_right: Cell,
    existing_regions: Iterable[Region],
    *,
    store_length: int,
    name: str = "",
) -> Region:
    """Create a region from two selected corners.

    The new region has no treatment or dilution yet; those are filled in
    later and checked by ``validate_regions``.

    Args:
        tray: Tray the selection was made on.
        upper_left: One corner of the selection (logical coordinates).
        lower_right: The opposite corner; may precede ``upper_left``.
        existing_regions: Regions already in the store (any tray).
        store_length: Number of regions in the store, used for color.
        name: Optional initial name.

    Returns:
        The new Region.

    Raises:
        CellOutOfBoundsError: If either corner is outside the tray.
        OverlapError: If the box intersects a region on the same tray.
    """
    for corner in (upper_left, lower_right):
        if not corner.in_bounds(tray):
            raise CellOutOfBoundsError(corner, tray.rows, tray.columns)

    bounds = normalize_corners(upper_left, lower_right)
    conflict = find_overlap(tray.sequence_id, bounds, existing_regions)
    if conflict is not None:
        raise OverlapError(conflict)

    row_min, row_max, col_min, col_max = bounds
    return Region(
        name=name,
        tray_sequence_id=tray.sequence_id,
        row_min=row_min,
        row_max=row_max,
        col_min=col_min,
        col_max=col_max,
        color=color_for_index(store_length),
    )
