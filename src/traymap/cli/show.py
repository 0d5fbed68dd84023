"""traymap show — draw trays as they are mounted, with regions or results."""

from __future__ import annotations

import click
from rich.table import Table
from rich.text import Text

from traymap.cli.utils import console, error_handler, experiment_option, open_document
from traymap.geometry.grid import DisplayGrid, WellView, format_seconds


def _region_cell(well: WellView) -> Text:
    if well.region is None:
        return Text(well.label, style="dim")
    return Text(well.label, style=f"bold white on {well.region.color or 'grey37'}")


def _result_cell(well: WellView) -> Text:
    if well.summary is None:
        return Text("-", style="dim")
    return Text(
        f"{well.summary.final_state or '?'} {format_seconds(well.summary.first_phase_change_seconds)}"
    )


def render_grid(grid: DisplayGrid, results: bool = False) -> Table:
    """Build a Rich table laid out like the mounted tray."""
    tray = grid.tray
    table = Table(
        show_header=True,
        title=f"{tray.name} ({tray.rows}x{tray.columns}, {tray.rotation_degrees}°)",
    )
    table.add_column("", style="bold")
    for label in grid.axis.x:
        table.add_column(label, justify="center")

    for y_label, row in zip(grid.axis.y, grid.rows()):
        cells = [_result_cell(w) if results else _region_cell(w) for w in row]
        table.add_row(y_label, *cells)
    return table


@click.command()
@experiment_option
@click.option("--tray", "tray_name", default=None, help="Only show this tray.")
@click.option("--results", is_flag=True, help="Show well results instead of regions.")
@error_handler
def show(experiment: str, tray_name: str | None, results: bool) -> None:
    """Show trays with their regions (or well results)."""
    from traymap.geometry.grid import build_display_grid, index_summaries

    document = open_document(experiment)
    layout = document.layout
    store = document.load_store()
    summaries = document.summaries()

    trays = [layout.by_name(tray_name)] if tray_name else list(layout)
    for tray in trays:
        grid = build_display_grid(tray, store.regions, index_summaries(summaries, tray.name))
        console.print(render_grid(grid, results=results))

    if not results:
        for region in store:
            if region.tray_sequence_id not in {t.sequence_id for t in trays}:
                continue
            tray = layout.by_sequence(region.tray_sequence_id)
            console.print(
                Text("  ■ ", style=region.color or "grey37")
                + Text(f"{region.name or '(unnamed)'} on {tray.name}: "
                       f"rows {region.row_min + 1}-{region.row_max + 1}, "
                       f"cols {region.col_min + 1}-{region.col_max + 1}")
            )
