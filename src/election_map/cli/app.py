"""Typer CLI root application."""

import typer

from election_map.core.config import get_settings
from election_map.core.logging import setup_logging

app = typer.Typer(name="election-map", help="County-level presidential results explorer")


@app.callback()
def _main_callback() -> None:
    """Initialize logging for all CLI commands."""
    settings = get_settings()
    setup_logging(settings.log_level, log_dir=settings.log_dir)


def _register_subcommands() -> None:
    """Register all CLI subcommand groups."""
    from election_map.cli.results_cmd import results_app

    app.add_typer(results_app, name="results", help="Reconciled results queries")


_register_subcommands()
