"""Data models for the traymap core module."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterator, Mapping, Protocol, Sequence

from traymap.core.exceptions import TrayNotFoundError

logger = logging.getLogger(__name__)

VALID_ROTATIONS = (0, 90, 180, 270)


class Shaped(Protocol):
    """Anything with grid dimensions (a Tray or a GridShape)."""

    @property
    def rows(self) -> int: ...

    @property
    def columns(self) -> int: ...


@dataclass(frozen=True)
class GridShape:
    """Bare grid dimensions, e.g. the rotated display grid of a tray."""

    rows: int
    columns: int


@dataclass(frozen=True)
class Cell:
    """A well position in logical (unrotated) tray coordinates, 0-based."""

    row: int
    col: int

    def in_bounds(self, shape: Shaped) -> bool:
        return 0 <= self.row < shape.rows and 0 <= self.col < shape.columns


@dataclass(frozen=True)
class DisplayIndex:
    """A rotated position on screen: x is the display column, y the display row."""

    x_index: int
    y_index: int


@dataclass(frozen=True)
class Tray:
    """An immutable tray descriptor placed at one position of a configuration."""

    sequence_id: int
    name: str
    columns: int
    rows: int
    rotation_degrees: int = 0
    well_diameter: float | None = None

    def __post_init__(self) -> None:
        """Validate dimensions and rotation at construction time."""
        if self.columns < 1 or self.rows < 1:
            raise ValueError(
                f"Tray {self.name!r} must have at least one row and column, "
                f"got {self.rows}x{self.columns}"
            )
        if self.rotation_degrees not in VALID_ROTATIONS:
            raise ValueError(
                f"Invalid rotation for tray {self.name!r}: {self.rotation_degrees}. "
                f"Must be one of {list(VALID_ROTATIONS)}"
            )

    @property
    def shape(self) -> GridShape:
        return GridShape(rows=self.rows, columns=self.columns)


@dataclass(frozen=True)
class TrayLayout:
    """The trays of one tray configuration, in declaration order."""

    trays: tuple[Tray, ...] = ()

    def __post_init__(self) -> None:
        seen: set[int] = set()
        for tray in self.trays:
            if tray.sequence_id in seen:
                raise ValueError(f"Duplicate tray sequence id: {tray.sequence_id}")
            seen.add(tray.sequence_id)

    def __iter__(self) -> Iterator[Tray]:
        return iter(self.trays)

    def __len__(self) -> int:
        return len(self.trays)

    @property
    def first(self) -> Tray:
        if not self.trays:
            raise TrayNotFoundError()
        return self.trays[0]

    def by_sequence(self, sequence_id: int) -> Tray:
        for tray in self.trays:
            if tray.sequence_id == sequence_id:
                return tray
        raise TrayNotFoundError(sequence_id)

    def by_name(self, name: str) -> Tray:
        for tray in self.trays:
            if tray.name == name:
                return tray
        raise TrayNotFoundError(name)

    @classmethod
    def from_configuration(cls, entries: Sequence[Mapping[str, Any]]) -> TrayLayout:
        """Build a layout from the external tray configuration list.

        Each entry looks like ``{order_sequence, rotation_degrees, trays:
        [{name, qty_x_axis, qty_y_axis, well_relative_diameter}]}``.
        ``qty_x_axis`` is the number of columns and ``qty_y_axis`` the
        number of rows. ``order_sequence`` becomes the tray's sequence id.

        Raises:
            ValueError: If an entry is missing required keys or holds
                invalid dimensions.
        """
        trays: list[Tray] = []
        for position, entry in enumerate(entries, start=1):
            inner = entry.get("trays") or []
            if not inner:
                logger.warning("Tray configuration entry %d has no trays; skipped", position)
                continue
            if len(inner) > 1:
                logger.warning(
                    "Tray configuration entry %d lists %d trays; using the first",
                    position, len(inner),
                )
            tray_entry = inner[0]
            try:
                columns = int(tray_entry["qty_x_axis"])
                rows = int(tray_entry["qty_y_axis"])
            except KeyError as e:
                raise ValueError(
                    f"Tray configuration entry {position} is missing {e.args[0]!r}"
                ) from None
            diameter = tray_entry.get("well_relative_diameter")
            trays.append(
                Tray(
                    sequence_id=int(entry.get("order_sequence", position)),
                    name=str(tray_entry.get("name") or f"Tray {position}"),
                    columns=columns,
                    rows=rows,
                    rotation_degrees=int(entry.get("rotation_degrees") or 0),
                    well_diameter=float(diameter) if diameter not in (None, "") else None,
                )
            )
        return cls(tuple(trays))


@dataclass(frozen=True)
class LocationInfo:
    """A sampling location as returned by the location lookup."""

    id: str
    name: str

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> LocationInfo:
        return cls(id=str(data.get("id") or ""), name=str(data.get("name") or ""))


@dataclass(frozen=True)
class SampleInfo:
    """A sample, optionally carrying its location."""

    id: str
    name: str
    sample_type: str = ""
    location: LocationInfo | None = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> SampleInfo:
        # Older payloads nest the location under the sample's campaign.
        loc = data.get("location") or (data.get("campaign") or {}).get("location")
        return cls(
            id=str(data.get("id") or ""),
            name=str(data.get("name") or ""),
            sample_type=str(data.get("type") or ""),
            location=LocationInfo.from_mapping(loc) if loc else None,
        )


@dataclass(frozen=True)
class TreatmentInfo:
    """A treatment with its nested sample hierarchy, when already loaded."""

    id: str
    name: str
    sample: SampleInfo | None = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> TreatmentInfo:
        sample = data.get("sample")
        return cls(
            id=str(data.get("id") or ""),
            name=str(data.get("name") or ""),
            sample=SampleInfo.from_mapping(sample) if sample else None,
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"id": self.id, "name": self.name}
        if self.sample is not None:
            sample: dict[str, Any] = {
                "id": self.sample.id,
                "name": self.sample.name,
                "type": self.sample.sample_type,
            }
            if self.sample.location is not None:
                sample["location"] = {
                    "id": self.sample.location.id,
                    "name": self.sample.location.name,
                }
            data["sample"] = sample
        return data


@dataclass(frozen=True)
class ResolvedTreatment:
    """Display projection of a treatment id: location → sample → treatment."""

    location_name: str = ""
    sample_name: str = ""
    treatment_name: str = ""
    sample_type: str = ""

    @classmethod
    def empty(cls) -> ResolvedTreatment:
        return cls()

    @classmethod
    def from_treatment(cls, treatment: TreatmentInfo) -> ResolvedTreatment:
        sample = treatment.sample
        return cls(
            location_name=sample.location.name if sample and sample.location else "",
            sample_name=sample.name if sample else "",
            treatment_name=treatment.name,
            sample_type=sample.sample_type if sample else "",
        )

    @property
    def is_empty(self) -> bool:
        return not (self.location_name or self.sample_name or self.treatment_name)

    @property
    def is_pure_water(self) -> bool:
        return self.sample_type == "pure_water"

    def summary(self, dilution: str = "") -> str:
        """Render ``location → sample → treatment (dilution)``, skipping blanks."""
        parts = [p for p in (self.location_name, self.sample_name, self.treatment_name) if p]
        text = " → ".join(parts)
        if dilution:
            text = f"{text} ({dilution})"
        return text


_TRUE_STRINGS = frozenset({"true", "yes", "1"})
_FALSE_STRINGS = frozenset({"false", "no", "0", ""})


def _parse_flag(value: Any) -> bool:
    """Read a persisted boolean; strings such as ``"false"`` count as False.

    Raises:
        ValueError: If the value is not a recognizable boolean.
    """
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        text = value.strip().lower()
        if text in _TRUE_STRINGS:
            return True
        if text in _FALSE_STRINGS:
            return False
    raise ValueError(f"Region record has an invalid is_background_key: {value!r}")


_REGION_FIELDS = (
    "name", "tray_sequence_id", "row_min", "row_max", "col_min", "col_max",
    "color", "treatment_id", "dilution", "is_background_key",
)


@dataclass(frozen=True)
class Region:
    """A named rectangular block of wells on one tray, bound to a treatment.

    Bounds are inclusive and in logical coordinates. ``tray_sequence_id``
    is ``None`` only for legacy records awaiting migration.
    """

    name: str
    tray_sequence_id: int | None
    row_min: int
    row_max: int
    col_min: int
    col_max: int
    color: str = ""
    treatment_id: str = ""
    dilution: str = ""
    is_background_key: bool = False
    treatment: TreatmentInfo | None = field(default=None, compare=False)

    def __post_init__(self) -> None:
        """Validate the bounding box is well-formed."""
        if self.row_min < 0 or self.col_min < 0:
            raise ValueError(f"Region {self.name!r} has negative bounds")
        if self.row_min > self.row_max or self.col_min > self.col_max:
            raise ValueError(
                f"Region {self.name!r} has inverted bounds: rows "
                f"{self.row_min}-{self.row_max}, cols {self.col_min}-{self.col_max}"
            )

    @property
    def upper_left(self) -> Cell:
        return Cell(self.row_min, self.col_min)

    @property
    def lower_right(self) -> Cell:
        return Cell(self.row_max, self.col_max)

    @property
    def bounds(self) -> tuple[int, int, int, int]:
        return (self.row_min, self.row_max, self.col_min, self.col_max)

    @property
    def has_resolved_treatment(self) -> bool:
        return self.treatment is not None and self.treatment.id == self.treatment_id

    def contains(self, cell: Cell) -> bool:
        return (
            self.row_min <= cell.row <= self.row_max
            and self.col_min <= cell.col <= self.col_max
        )

    def intersects(self, row_min: int, row_max: int, col_min: int, col_max: int) -> bool:
        """Closed-interval overlap of this box with another on both axes."""
        return (
            row_min <= self.row_max and row_max >= self.row_min
            and col_min <= self.col_max and col_max >= self.col_min
        )

    def cells(self) -> Iterator[Cell]:
        for row in range(self.row_min, self.row_max + 1):
            for col in range(self.col_min, self.col_max + 1):
                yield Cell(row, col)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the persisted region record shape."""
        data: dict[str, Any] = {name: getattr(self, name) for name in _REGION_FIELDS}
        if self.treatment is not None:
            data["treatment"] = self.treatment.to_dict()
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Region:
        """Build a region from a persisted record.

        Raises:
            ValueError: If a bounding-box field is missing or not an integer,
                or ``is_background_key`` is not a recognizable boolean.
        """
        try:
            bounds = {k: int(data[k]) for k in ("row_min", "row_max", "col_min", "col_max")}
        except KeyError as e:
            raise ValueError(f"Region record is missing {e.args[0]!r}") from None
        except (TypeError, ValueError) as e:
            raise ValueError(f"Region record has a non-integer bound: {e}") from None

        tray_id = data.get("tray_sequence_id")
        treatment = data.get("treatment")
        return cls(
            name=str(data.get("name") or ""),
            tray_sequence_id=int(tray_id) if tray_id is not None else None,
            color=str(data.get("color") or ""),
            treatment_id=str(data.get("treatment_id") or ""),
            dilution=str(data.get("dilution") or ""),
            is_background_key=_parse_flag(data.get("is_background_key")),
            treatment=TreatmentInfo.from_mapping(treatment) if isinstance(treatment, Mapping) else None,
            **bounds,
        )


_SUMMARY_FIELDS = frozenset({
    "coordinate", "tray_name", "first_phase_change_seconds", "final_state",
    "treatment_name", "dilution_factor", "treatment",
})


@dataclass(frozen=True)
class WellSummary:
    """Per-well results produced by the ingestion pipeline; read-only here."""

    coordinate: str
    tray_name: str | None = None
    first_phase_change_seconds: float | None = None
    final_state: str = ""
    treatment_name: str | None = None
    dilution_factor: float | None = None
    extra: dict[str, Any] = field(default_factory=dict, compare=False)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> WellSummary:
        treatment = data.get("treatment")
        treatment_name = data.get("treatment_name")
        if treatment_name is None and isinstance(treatment, Mapping):
            treatment_name = treatment.get("name")
        seconds = data.get("first_phase_change_seconds")
        dilution = data.get("dilution_factor")
        return cls(
            coordinate=str(data["coordinate"]),
            tray_name=data.get("tray_name"),
            first_phase_change_seconds=float(seconds) if seconds is not None else None,
            final_state=str(data.get("final_state") or ""),
            treatment_name=treatment_name,
            dilution_factor=float(dilution) if dilution is not None else None,
            extra={k: v for k, v in data.items() if k not in _SUMMARY_FIELDS},
        )


def flatten_sample_results(sample_results: Sequence[Mapping[str, Any]]) -> list[WellSummary]:
    """Flatten ``sample → treatments → wells`` results into well summaries."""
    return [
        WellSummary.from_mapping(well)
        for sample in sample_results
        for treatment in sample.get("treatments", [])
        for well in treatment.get("wells", [])
    ]
