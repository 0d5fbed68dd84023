"""traymap export / import — move regions through interchange files."""

from __future__ import annotations

from pathlib import Path

import click
from rich.markup import escape

from traymap.cli.utils import console, error_handler, experiment_option, open_document, save_document
from traymap.io.interchange import INTERCHANGE_SUFFIXES


@click.command()
@click.argument("output", type=click.Path())
@experiment_option
@click.option("--overwrite", is_flag=True, help="Overwrite output file if it exists.")
@error_handler
def export(output: str, experiment: str, overwrite: bool) -> None:
    """Export regions to an interchange (.yaml) file."""
    from traymap.io.interchange import write_interchange_file

    out_path = Path(output).expanduser()

    if out_path.is_dir():
        console.print(
            f"[red]Error:[/red] Output path is a directory: {out_path}\n"
            f"Provide a file path, e.g. {out_path / 'regions.yaml'}"
        )
        raise SystemExit(1)

    if out_path.suffix.lower() not in INTERCHANGE_SUFFIXES:
        console.print(f"[red]Error:[/red] Output file must end in .yaml or .yml: {out_path}")
        raise SystemExit(1)

    if not out_path.parent.exists():
        console.print(
            f"[red]Error:[/red] Parent directory does not exist: {out_path.parent}"
        )
        raise SystemExit(1)

    if out_path.exists() and not overwrite:
        console.print(
            f"[red]Error:[/red] Output file already exists: {out_path}\n"
            "Use --overwrite to replace it."
        )
        raise SystemExit(1)

    document = open_document(experiment)
    store = document.load_store()
    write_interchange_file(out_path, store.export_interchange(document.layout))
    console.print(f"[green]Exported {len(store)} regions to {out_path}[/green]")


@click.command("import")
@click.argument("source", type=click.Path(exists=True, dir_okay=False))
@experiment_option
@click.option("--dry-run", is_flag=True, help="Show what would be imported without saving.")
@error_handler
def import_cmd(source: str, experiment: str, dry_run: bool) -> None:
    """Append regions from an interchange (.yaml) file."""
    from traymap.core.exceptions import InterchangeParseError
    from traymap.io.interchange import read_interchange_file

    try:
        text = read_interchange_file(Path(source))
    except ValueError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise SystemExit(1)

    document = open_document(experiment)
    store = document.load_store()
    try:
        updated = store.import_interchange(text, document.layout)
    except InterchangeParseError as e:
        console.print(f"[red]Error:[/red] {e}. Nothing was imported.")
        for warning in e.warnings:
            console.print(f"  [dim]{escape(warning)}[/dim]")
        raise SystemExit(1)

    added = len(updated) - len(store)
    if dry_run:
        console.print(f"[yellow]Dry run:[/yellow] would import {added} regions")
        return

    save_document(document.with_store(updated), experiment)
    console.print(
        f"[green]Imported {added} regions.[/green] "
        "Set a treatment and dilution on each before saving the experiment."
    )
