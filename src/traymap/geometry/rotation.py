"""Rotation transform between logical tray cells and display positions.

A tray mounted at 90° or 270° is drawn with its rows and columns swapped.
Every consumer (drag selection, the read-only result grid, axis headers,
and the interchange codec) goes through the functions here so they all
agree on which logical well sits at which display position.

Mapping for a tray with ``rows`` x ``cols`` logical wells::

    0°    x = col             y = row
    90°   x = row             y = cols - 1 - col
    180°  x = cols - 1 - col  y = rows - 1 - row
    270°  x = rows - 1 - row  y = col
"""

from __future__ import annotations

from dataclasses import dataclass

from traymap.core.models import (
    VALID_ROTATIONS,
    Cell,
    DisplayIndex,
    GridShape,
    Shaped,
    Tray,
)
from traymap.geometry.coordinates import (
    MAX_LABEL_COLUMNS,
    cell_to_label,
    column_letter,
    row_number,
)


def _check_rotation(rotation: int) -> None:
    if rotation not in VALID_ROTATIONS:
        raise ValueError(
            f"Invalid rotation: {rotation!r}. Must be one of {list(VALID_ROTATIONS)}"
        )


def inverse_rotation(rotation: int) -> int:
    """The rotation that undoes ``rotation`` (90 <-> 270, 180 and 0 self-inverse)."""
    _check_rotation(rotation)
    return (360 - rotation) % 360


def display_shape(shape: Shaped, rotation: int) -> GridShape:
    """Dimensions of the drawn grid: rows and columns swap at 90° and 270°."""
    _check_rotation(rotation)
    if rotation in (90, 270):
        return GridShape(rows=shape.columns, columns=shape.rows)
    return GridShape(rows=shape.rows, columns=shape.columns)


def to_display(cell: Cell, rotation: int, shape: Shaped) -> DisplayIndex:
    """Map a logical cell to its display position under ``rotation``."""
    _check_rotation(rotation)
    rows, cols = shape.rows, shape.columns
    if rotation == 90:
        return DisplayIndex(x_index=cell.row, y_index=cols - 1 - cell.col)
    if rotation == 180:
        return DisplayIndex(x_index=cols - 1 - cell.col, y_index=rows - 1 - cell.row)
    if rotation == 270:
        return DisplayIndex(x_index=rows - 1 - cell.row, y_index=cell.col)
    return DisplayIndex(x_index=cell.col, y_index=cell.row)


def from_display(index: DisplayIndex, rotation: int, shape: Shaped) -> Cell:
    """Map a display position back to the logical cell drawn there.

    ``shape`` is the logical (unrotated) tray shape, as for ``to_display``.
    """
    _check_rotation(rotation)
    rows, cols = shape.rows, shape.columns
    x, y = index.x_index, index.y_index
    if rotation == 90:
        return Cell(row=x, col=cols - 1 - y)
    if rotation == 180:
        return Cell(row=rows - 1 - y, col=cols - 1 - x)
    if rotation == 270:
        return Cell(row=rows - 1 - x, col=y)
    return Cell(row=y, col=x)


def as_cell(index: DisplayIndex) -> Cell:
    """Treat a display position as a cell of the display grid."""
    return Cell(row=index.y_index, col=index.x_index)


def tray_to_display(cell: Cell, tray: Tray) -> DisplayIndex:
    return to_display(cell, tray.rotation_degrees, tray)


def tray_from_display(index: DisplayIndex, tray: Tray) -> Cell:
    return from_display(index, tray.rotation_degrees, tray)


def display_label(index: DisplayIndex, tray: Tray) -> str:
    """Well label of the logical cell shown at a display position.

    Positions outside the display grid fail closed to the default label.
    """
    return cell_to_label(tray_from_display(index, tray), tray)


@dataclass(frozen=True)
class AxisLabels:
    """Header text for each display column (``x``) and display row (``y``)."""

    x: tuple[str, ...]
    y: tuple[str, ...]


def _x_axis_carries_columns(rotation: int) -> bool:
    """Whether moving along display x changes the logical column.

    Derived through ``from_display`` itself so headers cannot drift from
    the cell mapping.
    """
    unit = GridShape(rows=2, columns=2)
    origin = from_display(DisplayIndex(0, 0), rotation, unit)
    step = from_display(DisplayIndex(1, 0), rotation, unit)
    return origin.col != step.col


def _column_fragment(col: int) -> str:
    return column_letter(col) if col < MAX_LABEL_COLUMNS else "?"


def axis_labels(tray: Tray) -> AxisLabels:
    """Letters on the edge that carries logical columns, numbers on the other."""
    rotation = tray.rotation_degrees
    shown = display_shape(tray, rotation)
    columns_on_x = _x_axis_carries_columns(rotation)

    x_labels = []
    for x in range(shown.columns):
        cell = from_display(DisplayIndex(x, 0), rotation, tray)
        x_labels.append(_column_fragment(cell.col) if columns_on_x else row_number(cell.row))

    y_labels = []
    for y in range(shown.rows):
        cell = from_display(DisplayIndex(0, y), rotation, tray)
        y_labels.append(row_number(cell.row) if columns_on_x else _column_fragment(cell.col))

    return AxisLabels(x=tuple(x_labels), y=tuple(y_labels))
