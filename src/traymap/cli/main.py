"""traymap CLI — top-level Click group."""

from __future__ import annotations

import click


@click.group()
@click.version_option(package_name="traymap")
@click.option("--verbose", "-v", is_flag=True, help="Show full tracebacks and debug logs.")
def cli(verbose: bool) -> None:
    """traymap — tray geometry and region assignment."""
    from traymap.cli import utils

    utils.verbose = verbose
    utils.configure_logging(verbose)


def _register_commands() -> None:
    """Register all subcommands."""
    from traymap.cli.regions_cmd import apply_treatment, migrate, validate
    from traymap.cli.show import show
    from traymap.cli.transfer import export, import_cmd

    cli.add_command(apply_treatment)
    cli.add_command(export)
    cli.add_command(import_cmd)
    cli.add_command(migrate)
    cli.add_command(show)
    cli.add_command(validate)


_register_commands()
