"""Shared fixtures for CLI module tests."""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml
from click.testing import CliRunner

TRAY_CONFIGURATION = [
    {
        "order_sequence": 1,
        "rotation_degrees": 0,
        "trays": [{"name": "P1", "qty_x_axis": 12, "qty_y_axis": 8}],
    },
    {
        "order_sequence": 2,
        "rotation_degrees": 90,
        "trays": [{"name": "P2", "qty_x_axis": 12, "qty_y_axis": 8}],
    },
]


def write_document(path: Path, regions: list[dict], **extra) -> Path:
    data = {"name": "Test", "tray_configuration": TRAY_CONFIGURATION, "regions": regions, **extra}
    path.write_text(yaml.safe_dump(data, sort_keys=False))
    return path


def read_document(path: Path) -> dict:
    return yaml.safe_load(Path(path).read_text())


@pytest.fixture
def runner() -> CliRunner:
    """Create a Click test runner."""
    return CliRunner()


@pytest.fixture
def experiment_path(tmp_path: Path) -> Path:
    """Experiment document with two complete regions, one per tray."""
    return write_document(tmp_path / "experiment.yaml", [
        {
            "name": "Foo", "tray_sequence_id": 1, "row_min": 0, "row_max": 2,
            "col_min": 0, "col_max": 2, "color": "#1b9e77",
            "treatment_id": "t-1", "dilution": "1",
        },
        {
            "name": "Bar", "tray_sequence_id": 2, "row_min": 0, "row_max": 1,
            "col_min": 0, "col_max": 1, "color": "#d95f02",
            "treatment_id": "t-2", "dilution": "10",
        },
    ], well_summaries=[
        {"coordinate": "A1", "tray_name": "P1", "final_state": "frozen",
         "first_phase_change_seconds": 125},
    ])


@pytest.fixture
def empty_experiment_path(tmp_path: Path) -> Path:
    """Experiment document with no regions yet."""
    return write_document(tmp_path / "empty.yaml", [])


@pytest.fixture
def legacy_experiment_path(tmp_path: Path) -> Path:
    """Experiment document whose region predates tray assignment."""
    return write_document(tmp_path / "legacy.yaml", [
        {"name": "Old", "row_min": 0, "row_max": 1, "col_min": 0, "col_max": 1,
         "treatment_id": "t-1", "dilution": "1"},
    ])
