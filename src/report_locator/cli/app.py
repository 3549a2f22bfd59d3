"""Typer CLI root application."""

import typer

from report_locator.core.config import get_settings
from report_locator.core.logging import setup_logging

app = typer.Typer(name="report-locator", help="Street/city location resolution for waste reports")


@app.callback()
def _main_callback() -> None:
    """Initialize logging for all CLI commands."""
    settings = get_settings()
    setup_logging(settings.log_level, log_dir=settings.log_dir)


def _register_subcommands() -> None:
    """Register all CLI commands."""
    from report_locator.cli.location_cmd import distance, locate, manual, normalize, validate

    app.command("locate")(locate)
    app.command("manual")(manual)
    app.command("normalize")(normalize)
    app.command("validate")(validate)
    # Negative coordinates ("-33.86") would otherwise parse as unknown short options
    app.command("distance", context_settings={"ignore_unknown_options": True})(distance)


_register_subcommands()
