"""Load and save experiment documents (tray configuration + region array).

A document is YAML (``.yaml``/``.yml``) or JSON (``.json``)::

    tray_configuration:
      - order_sequence: 1
        rotation_degrees: 90
        trays:
          - name: P1
            qty_x_axis: 12
            qty_y_axis: 8
    regions:
      - name: Foo
        tray_sequence_id: 1
        row_min: 0
        ...
    well_summaries: []   # optional

Unknown top-level keys are preserved on save.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from traymap.core.models import TrayLayout, WellSummary
from traymap.regions.store import RegionStore

_YAML_SUFFIXES = frozenset({".yaml", ".yml"})
_KNOWN_KEYS = ("tray_configuration", "regions", "well_summaries")


@dataclass
class ExperimentDocument:
    """The parts of an experiment record this package reads and writes."""

    tray_configuration: list[dict[str, Any]]
    regions: list[dict[str, Any]] = field(default_factory=list)
    well_summaries: list[dict[str, Any]] = field(default_factory=list)
    extra: dict[str, Any] = field(default_factory=dict)

    @property
    def layout(self) -> TrayLayout:
        return TrayLayout.from_configuration(self.tray_configuration)

    def load_store(self) -> RegionStore:
        """Region store for this document, with legacy regions migrated."""
        return RegionStore.load(self.regions, self.layout)

    def summaries(self) -> list[WellSummary]:
        return [WellSummary.from_mapping(s) for s in self.well_summaries]

    def with_store(self, store: RegionStore) -> ExperimentDocument:
        return ExperimentDocument(
            tray_configuration=self.tray_configuration,
            regions=store.to_records(),
            well_summaries=self.well_summaries,
            extra=self.extra,
        )


def _read_mapping(path: Path) -> Any:
    path = Path(path)
    suffix = path.suffix.lower()
    if suffix not in _YAML_SUFFIXES and suffix != ".json":
        raise ValueError(f"Unsupported document type {path.suffix!r}; use .yaml, .yml or .json")
    with open(path, encoding="utf-8") as f:
        if suffix in _YAML_SUFFIXES:
            return yaml.safe_load(f)
        return json.load(f)


def load_tray_layout(path: Path) -> TrayLayout:
    """Load a tray configuration from a standalone file or an experiment document.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        ValueError: If the file holds no tray configuration list.
    """
    data = _read_mapping(path)
    if isinstance(data, dict):
        data = data.get("tray_configuration")
    if not isinstance(data, list):
        raise ValueError(f"Invalid tray configuration in {path}: expected a list of entries")
    return TrayLayout.from_configuration(data)


def load_experiment_document(path: Path) -> ExperimentDocument:
    """Load an experiment document.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        ValueError: If the document is not a mapping or lacks
            ``tray_configuration``.
    """
    data = _read_mapping(path)
    if not isinstance(data, dict):
        raise ValueError(
            f"Invalid experiment document: expected a mapping, got {type(data).__name__}"
        )
    if "tray_configuration" not in data:
        raise ValueError("Invalid experiment document: missing required key 'tray_configuration'")

    return ExperimentDocument(
        tray_configuration=list(data["tray_configuration"] or []),
        regions=list(data.get("regions") or []),
        well_summaries=list(data.get("well_summaries") or []),
        extra={k: v for k, v in data.items() if k not in _KNOWN_KEYS},
    )


def save_experiment_document(document: ExperimentDocument, path: Path) -> None:
    """Write a document back in the format implied by the file extension."""
    path = Path(path)
    suffix = path.suffix.lower()
    if suffix not in _YAML_SUFFIXES and suffix != ".json":
        raise ValueError(f"Unsupported document type {path.suffix!r}; use .yaml, .yml or .json")

    data: dict[str, Any] = dict(document.extra)
    data["tray_configuration"] = document.tray_configuration
    data["regions"] = document.regions
    if document.well_summaries:
        data["well_summaries"] = document.well_summaries

    with open(path, "w", encoding="utf-8") as f:
        if suffix in _YAML_SUFFIXES:
            yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False, allow_unicode=True)
        else:
            json.dump(data, f, indent=2)
