"""Region interchange format: a small YAML subset grouped by region name.

Example::

    Foo:
      - tray: P1
        upper_left: A1
        lower_right: C3

    Bar:
      - tray: P2
        upper_left: D1
        lower_right: F4

A name may list several placements. ``upper_left`` and ``lower_right`` are
the corners as they appear on the mounted (rotated) tray, written as the
real well labels found there. Treatment and dilution are not part of the
format and must be filled in again after an import.

The reader is a line scanner rather than a YAML parser so that one broken
entry does not sink the whole file.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Sequence

from traymap.core.exceptions import InterchangeParseError, TrayNotFoundError
from traymap.core.models import Cell, DisplayIndex, Region, Tray, TrayLayout
from traymap.geometry.coordinates import cell_to_label, is_labelable, parse_label
from traymap.geometry.rotation import tray_from_display, tray_to_display
from traymap.regions.selection import color_for_index, find_overlap, normalize_corners

logger = logging.getLogger(__name__)

INTERCHANGE_SUFFIXES = frozenset({".yaml", ".yml"})

_NEEDS_QUOTES = set(':#"\'{}[],&*!|>%@`\n\r')


@dataclass(frozen=True)
class InterchangeEntry:
    """One placement recovered from an interchange document."""

    name: str
    tray: str
    upper_left: str
    lower_right: str
    line: int = 0


@dataclass
class ParseResult:
    """Entries recovered by ``parse_interchange`` plus per-entry warnings."""

    entries: list[InterchangeEntry] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


def _quote(value: str) -> str:
    if not value or value != value.strip() or value[0] in "-?" or _NEEDS_QUOTES & set(value):
        return json.dumps(value)
    return value


def _unquote(value: str) -> str:
    value = value.strip()
    if len(value) >= 2 and value[0] == value[-1] == '"':
        try:
            return json.loads(value)
        except json.JSONDecodeError:
            return value[1:-1]
    if len(value) >= 2 and value[0] == value[-1] == "'":
        return value[1:-1].replace("''", "'")
    return value


# --- Export ---


def _drawn_corners(region: Region, tray: Tray) -> tuple[Cell, Cell]:
    """The logical cells drawn at the region's upper-left and lower-right."""
    a = tray_to_display(region.upper_left, tray)
    b = tray_to_display(region.lower_right, tray)
    upper_left = DisplayIndex(min(a.x_index, b.x_index), min(a.y_index, b.y_index))
    lower_right = DisplayIndex(max(a.x_index, b.x_index), max(a.y_index, b.y_index))
    return tray_from_display(upper_left, tray), tray_from_display(lower_right, tray)


def _placement_tray(region: Region, layout: TrayLayout) -> Tray | None:
    if region.tray_sequence_id is None:
        return None
    try:
        return layout.by_sequence(region.tray_sequence_id)
    except TrayNotFoundError:
        return None


def export_regions(regions: Sequence[Region], layout: TrayLayout) -> str:
    """Serialize regions to the interchange format.

    Regions are grouped by name in order of first appearance. Regions on
    an unknown tray, or reaching wells that have no label (past column
    ``Z`` or row 99), are skipped with a warning.
    """
    groups: dict[str, list[str]] = {}
    for i, region in enumerate(regions):
        tray = _placement_tray(region, layout)
        if tray is None:
            logger.warning("Region %d (%r) has no known tray; not exported", i, region.name)
            continue

        if not is_labelable(region.lower_right):
            logger.warning(
                "Region %d (%r) reaches wells without a label on tray %r; not exported",
                i, region.name, tray.name,
            )
            continue
        upper_left, lower_right = _drawn_corners(region, tray)
        groups.setdefault(region.name, []).append(
            f"  - tray: {_quote(tray.name)}\n"
            f"    upper_left: {cell_to_label(upper_left, tray)}\n"
            f"    lower_right: {cell_to_label(lower_right, tray)}\n"
        )

    blocks = [f"{_quote(name)}:\n" + "".join(placements) for name, placements in groups.items()]
    return "\n".join(blocks)


# --- Import ---


@dataclass
class _Draft:
    name: str
    tray: str
    line: int
    upper_left: str | None = None
    lower_right: str | None = None


def parse_interchange(text: str) -> ParseResult:
    """Scan interchange text into entries, skipping anything malformed."""
    result = ParseResult()
    name: str | None = None
    draft: _Draft | None = None

    def close() -> None:
        nonlocal draft
        if draft is None:
            return
        if draft.upper_left and draft.lower_right:
            result.entries.append(
                InterchangeEntry(draft.name, draft.tray, draft.upper_left, draft.lower_right, draft.line)
            )
        else:
            result.warnings.append(
                f"Line {draft.line}: entry for {draft.name!r} is missing a corner; skipped"
            )
        draft = None

    for lineno, raw in enumerate(text.splitlines(), start=1):
        stripped = raw.strip()
        if not stripped or stripped.startswith("#"):
            continue

        if not raw[0].isspace() and stripped.endswith(":") and not stripped.startswith("-"):
            close()
            name = _unquote(stripped[:-1])
            continue

        if stripped.startswith("- tray:"):
            close()
            tray = _unquote(stripped[len("- tray:"):])
            if name is None:
                result.warnings.append(f"Line {lineno}: tray entry outside any region name; skipped")
            elif not tray:
                result.warnings.append(f"Line {lineno}: tray entry without a tray name; skipped")
            else:
                draft = _Draft(name=name, tray=tray, line=lineno)
            continue

        key, sep, value = stripped.partition(":")
        key = key.strip()
        if sep and key in ("upper_left", "lower_right"):
            if draft is None:
                result.warnings.append(f"Line {lineno}: {key} without a tray entry; ignored")
            else:
                setattr(draft, key, _unquote(value))
            continue

        result.warnings.append(f"Line {lineno}: unrecognized line {stripped!r}; ignored")

    close()
    return result


def _entry_to_region(entry: InterchangeEntry, layout: TrayLayout, color: str) -> Region:
    """Resolve one entry against the tray layout.

    Raises:
        ValueError: If the tray is unknown or a corner label is invalid.
    """
    try:
        tray = layout.by_name(entry.tray)
    except TrayNotFoundError:
        raise ValueError(f"unknown tray {entry.tray!r}") from None

    corners = []
    for label in (entry.upper_left, entry.lower_right):
        cell = parse_label(label)
        if cell is None or not cell.in_bounds(tray):
            raise ValueError(f"well {label!r} is not on tray {tray.name!r}")
        corners.append(cell)

    row_min, row_max, col_min, col_max = normalize_corners(*corners)
    return Region(
        name=entry.name,
        tray_sequence_id=tray.sequence_id,
        row_min=row_min,
        row_max=row_max,
        col_min=col_min,
        col_max=col_max,
        color=color,
    )


def import_regions(
    text: str,
    layout: TrayLayout,
    store_length: int | None = None,
    existing: Sequence[Region] = (),
) -> list[Region]:
    """Build regions from interchange text.

    Entries overlapping a region in ``existing`` or an entry accepted
    earlier in the same text are skipped. Colors continue the palette
    cycle from ``store_length`` (default ``len(existing)``). Imported
    regions have an empty treatment and dilution.

    Raises:
        InterchangeParseError: If no entry could be turned into a region.
    """
    if store_length is None:
        store_length = len(existing)
    parsed = parse_interchange(text)
    warnings = list(parsed.warnings)
    regions: list[Region] = []
    for entry in parsed.entries:
        try:
            region = _entry_to_region(
                entry, layout, color_for_index(store_length + len(regions)),
            )
        except ValueError as e:
            warnings.append(f"Line {entry.line}: entry for {entry.name!r}: {e}; skipped")
            continue
        conflict = find_overlap(region.tray_sequence_id, region.bounds, [*existing, *regions])
        if conflict is not None:
            warnings.append(
                f"Line {entry.line}: entry for {entry.name!r} overlaps region "
                f"{conflict.name!r} on tray {entry.tray!r}; skipped"
            )
            continue
        regions.append(region)

    for message in warnings:
        logger.warning("Interchange import: %s", message)

    if not regions:
        raise InterchangeParseError("No valid regions found in interchange file", warnings)
    return regions


def _check_suffix(path: Path) -> None:
    if path.suffix.lower() not in INTERCHANGE_SUFFIXES:
        raise ValueError(
            f"Interchange files must end in .yaml or .yml, got {path.name!r}"
        )


def read_interchange_file(path: Path) -> str:
    """Read an interchange file.

    Raises:
        ValueError: If the extension is not .yaml/.yml.
        FileNotFoundError: If the file does not exist.
    """
    path = Path(path)
    _check_suffix(path)
    return path.read_text(encoding="utf-8")


def write_interchange_file(path: Path, text: str) -> None:
    path = Path(path)
    _check_suffix(path)
    path.write_text(text, encoding="utf-8")
