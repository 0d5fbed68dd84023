"""traymap validate / migrate / apply-treatment — region store maintenance."""

from __future__ import annotations

import click
from rich.table import Table

from traymap.cli.utils import console, error_handler, experiment_option, open_document, save_document


@click.command()
@experiment_option
@error_handler
def validate(experiment: str) -> None:
    """Check that every region has a unique name, treatment and dilution."""
    store = open_document(experiment).load_store()
    message = store.validate()
    if message is None:
        console.print(f"[green]All {len(store)} regions are valid.[/green]")
        return

    table = Table(show_header=True, title="Region issues")
    table.add_column("#", style="bold")
    table.add_column("Region")
    table.add_column("Field")
    table.add_column("Problem")
    for issue in store.issues():
        table.add_row(
            str(issue.index), store[issue.index].name or "(unnamed)", issue.field, issue.message,
        )
    console.print(table)
    console.print(f"[red]Error:[/red] {message}")
    raise SystemExit(1)


@click.command()
@experiment_option
@click.option("--dry-run", is_flag=True, help="Report assignments without saving.")
@error_handler
def migrate(experiment: str, dry_run: bool) -> None:
    """Assign a tray to legacy regions saved without one."""
    from traymap.core.models import Region
    from traymap.regions.migration import migrate_regions

    document = open_document(experiment)
    layout = document.layout
    raw = [Region.from_dict(r) for r in document.regions]
    legacy = [i for i, r in enumerate(raw) if r.tray_sequence_id is None]
    if not legacy:
        console.print("[green]No legacy regions to migrate.[/green]")
        return

    migrated = migrate_regions(raw, layout)
    for i in legacy:
        tray = layout.by_sequence(migrated[i].tray_sequence_id)
        console.print(f"  {migrated[i].name or '(unnamed)'} -> {tray.name}")

    if dry_run:
        console.print(f"[yellow]Dry run:[/yellow] would migrate {len(legacy)} regions")
        return

    document.regions = [r.to_dict() for r in migrated]
    save_document(document, experiment)
    console.print(f"[green]Migrated {len(legacy)} regions.[/green]")


@click.command("apply-treatment")
@click.argument("treatment_id")
@experiment_option
@error_handler
def apply_treatment(treatment_id: str, experiment: str) -> None:
    """Set TREATMENT_ID on every region."""
    document = open_document(experiment)
    store = document.load_store().apply_treatment_to_all(treatment_id)
    save_document(document.with_store(store), experiment)
    console.print(f"[green]Applied treatment {treatment_id} to {len(store)} regions.[/green]")
