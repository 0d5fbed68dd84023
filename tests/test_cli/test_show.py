"""Tests for traymap show command."""

from pathlib import Path

from click.testing import CliRunner
from rich.console import Console

from traymap.cli.main import cli
from traymap.cli.show import render_grid
from traymap.core.models import Tray, WellSummary
from traymap.geometry.grid import build_display_grid
from tests.conftest import make_region


class TestShowCommand:
    def test_show_all_trays(self, runner: CliRunner, experiment_path: Path):
        result = runner.invoke(cli, ["show", "-e", str(experiment_path)])
        assert result.exit_code == 0, result.output
        assert "P1 (8x12, 0°)" in result.output
        assert "P2 (8x12, 90°)" in result.output
        assert "Foo on P1" in result.output
        assert "Bar on P2" in result.output

    def test_show_one_tray(self, runner: CliRunner, experiment_path: Path):
        result = runner.invoke(cli, ["show", "-e", str(experiment_path), "--tray", "P2"])
        assert result.exit_code == 0
        assert "P1 (" not in result.output
        assert "Foo on P1" not in result.output
        assert "Bar on P2" in result.output

    def test_show_unknown_tray(self, runner: CliRunner, experiment_path: Path):
        result = runner.invoke(cli, ["show", "-e", str(experiment_path), "--tray", "P9"])
        assert result.exit_code == 1
        assert "Tray not found: P9" in result.output

    def test_show_results(self, runner: CliRunner, experiment_path: Path):
        result = runner.invoke(cli, ["show", "-e", str(experiment_path), "--tray", "P1", "--results"])
        assert result.exit_code == 0
        assert "P1 (8x12, 0°)" in result.output
        assert "Foo on P1" not in result.output


class TestRenderGrid:
    def _render(self, table) -> str:
        console = Console(width=200, record=True)
        console.print(table)
        return console.export_text()

    def test_rotated_headers(self):
        tray = Tray(sequence_id=1, name="P1", columns=12, rows=8, rotation_degrees=90)
        grid = build_display_grid(tray, [make_region("Foo", rows=(0, 0), cols=(0, 0))])
        table = render_grid(grid)
        assert len(table.columns) == 1 + 8
        assert table.columns[1].header == "1"
        assert table.row_count == 12

    def test_labels_drawn(self, plate):
        text = self._render(render_grid(build_display_grid(plate)))
        assert "L8" in text

    def test_results_drawn(self, plate):
        summaries = {"A1": WellSummary("A1", first_phase_change_seconds=125, final_state="frozen")}
        text = self._render(render_grid(build_display_grid(plate, well_summaries=summaries), results=True))
        assert "frozen 2m 5s" in text
