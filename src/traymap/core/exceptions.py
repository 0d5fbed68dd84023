"""Exception classes for the traymap core module."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from traymap.core.models import Cell, Region


class TrayMapError(Exception):
    """Base exception for all tray and region errors."""


class TrayNotFoundError(TrayMapError):
    """Raised when a tray name or sequence id is not in the tray layout."""

    def __init__(self, key: str | int | None = None) -> None:
        msg = f"Tray not found: {key}" if key is not None else "Tray not found"
        super().__init__(msg)
        self.key = key


class RegionNotFoundError(TrayMapError):
    """Raised when referencing a region index outside the store."""

    def __init__(self, index: int | None = None) -> None:
        msg = f"Region not found: {index}" if index is not None else "Region not found"
        super().__init__(msg)
        self.index = index


class CellOutOfBoundsError(TrayMapError):
    """Raised when a cell lies outside its tray's dimensions."""

    def __init__(self, cell: Cell, rows: int, columns: int) -> None:
        super().__init__(
            f"Cell (row={cell.row}, col={cell.col}) is outside a "
            f"{rows}x{columns} tray"
        )
        self.cell = cell
        self.rows = rows
        self.columns = columns


class OverlapError(TrayMapError):
    """Raised when a new region would intersect an existing one."""

    def __init__(self, conflict: Region | None = None) -> None:
        msg = "Cannot create overlapping regions."
        if conflict is not None and conflict.name:
            msg = f"Cannot create overlapping regions (overlaps {conflict.name!r})."
        super().__init__(msg)
        self.conflict = conflict


class RegionValidationError(TrayMapError):
    """Raised when a region store fails form-level validation."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InterchangeParseError(TrayMapError):
    """Raised when an interchange file yields no usable region entries."""

    def __init__(self, message: str, warnings: list[str] | None = None) -> None:
        super().__init__(message)
        self.warnings = list(warnings or [])
