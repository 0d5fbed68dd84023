"""Shared CLI utilities — Rich console, error handling, document helpers."""

from __future__ import annotations

import functools
import logging
import traceback
from pathlib import Path
from typing import TYPE_CHECKING, Any, Callable

import click
from rich.console import Console
from rich.logging import RichHandler

if TYPE_CHECKING:
    from traymap.io.documents import ExperimentDocument

console = Console()

# Set by the --verbose flag on the top-level CLI group.
verbose: bool = False


def configure_logging(verbose_logging: bool) -> None:
    """Route library log records through Rich unless logging is already configured."""
    logging.basicConfig(
        level=logging.DEBUG if verbose_logging else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )


def open_document(path: str) -> ExperimentDocument:
    """Load an experiment document with CLI-friendly error handling.

    Raises:
        SystemExit: With code 1 if the document is missing or malformed.
    """
    from traymap.io.documents import load_experiment_document

    try:
        return load_experiment_document(Path(path))
    except FileNotFoundError:
        console.print(f"[red]Error:[/red] No experiment document found at {path}")
        raise SystemExit(1)
    except ValueError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise SystemExit(1)


def save_document(document: ExperimentDocument, path: str) -> None:
    from traymap.io.documents import save_experiment_document

    save_experiment_document(document, Path(path))


def error_handler(func: Callable[..., Any]) -> Callable[..., Any]:
    """Decorator wrapping CLI commands with standard error handling.

    Catches TrayMapError (exit 1) and unexpected exceptions (exit 2).
    With --verbose, unexpected errors include the full traceback.
    """

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        from traymap.core.exceptions import TrayMapError

        try:
            return func(*args, **kwargs)
        except SystemExit:
            raise
        except TrayMapError as e:
            console.print(f"[red]Error:[/red] {e}")
            raise SystemExit(1)
        except Exception as e:
            if verbose:
                console.print(f"[red]Internal error:[/red] {e}")
                console.print(traceback.format_exc())
            else:
                console.print(
                    f"[red]Internal error:[/red] {type(e).__name__}: {e}\n"
                    "[dim]Use --verbose for the full traceback.[/dim]"
                )
            raise SystemExit(2)

    return wrapper


def experiment_option(func: Callable[..., Any]) -> Callable[..., Any]:
    """The ``-e/--experiment`` option shared by every command."""
    return click.option(
        "-e", "--experiment", required=True, type=click.Path(exists=True),
        help="Path to the experiment document (.yaml, .yml or .json).",
    )(func)
