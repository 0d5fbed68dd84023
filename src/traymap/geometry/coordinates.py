"""Well label codec: logical cells to ``<column letter><row number>`` and back.

Labels support a single ASCII letter and at most two digits, so only
columns 0-25 (``A``-``Z``) and rows 0-98 (``1``-``99``) are representable.
Both directions fail closed: bad input logs a warning and yields the
``A1`` / ``Cell(0, 0)`` default instead of raising, because these are
called from rendering paths.
"""

from __future__ import annotations

import logging
import re
import string

from traymap.core.models import Cell, Shaped

logger = logging.getLogger(__name__)

DEFAULT_LABEL = "A1"
MAX_LABEL_COLUMNS = len(string.ascii_uppercase)
MAX_LABEL_ROWS = 99

_LABEL_RE = re.compile(r"^([A-Za-z])(\d{1,2})$")


def column_letter(index: int) -> str:
    """Letter for a 0-based column index.

    Raises:
        ValueError: If the index is outside ``A``-``Z``.
    """
    if not 0 <= index < MAX_LABEL_COLUMNS:
        raise ValueError(f"Column index {index} has no single-letter label")
    return string.ascii_uppercase[index]


def row_number(index: int) -> str:
    """1-based row number for a 0-based row index."""
    return str(index + 1)


def is_labelable(cell: Cell) -> bool:
    """Whether a cell fits the single-letter, two-digit label form."""
    return cell.col < MAX_LABEL_COLUMNS and cell.row < MAX_LABEL_ROWS


def cell_to_label(cell: Cell, shape: Shaped) -> str:
    """Encode an in-bounds cell as a well label, e.g. ``Cell(4, 11)`` -> ``"L5"``."""
    if not cell.in_bounds(shape) or not is_labelable(cell):
        logger.warning(
            "Cell (row=%d, col=%d) has no well label in a %dx%d grid; using %s",
            cell.row, cell.col, shape.rows, shape.columns, DEFAULT_LABEL,
        )
        return DEFAULT_LABEL
    return f"{column_letter(cell.col)}{row_number(cell.row)}"


def parse_label(label: str) -> Cell | None:
    """Parse a label into a cell without bounds checking.

    Returns:
        The cell, or None if the label does not look like ``A1``..``Z99``.
    """
    m = _LABEL_RE.match(label.strip())
    if m is None:
        return None
    row = int(m.group(2)) - 1
    if row < 0:
        return None
    return Cell(row=row, col=ord(m.group(1).upper()) - ord("A"))


def label_to_cell(label: str, shape: Shaped) -> Cell:
    """Decode a well label for a grid, collapsing bad input to ``Cell(0, 0)``."""
    cell = parse_label(label)
    if cell is None:
        logger.warning("Unparsable well label %r; using %s", label, DEFAULT_LABEL)
        return Cell(0, 0)
    if not cell.in_bounds(shape):
        logger.warning(
            "Well label %r is outside a %dx%d grid; using %s",
            label, shape.rows, shape.columns, DEFAULT_LABEL,
        )
        return Cell(0, 0)
    return cell
