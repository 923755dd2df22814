"""Main entry point for the CSPI command line interface."""

from __future__ import annotations

import typer

from cspi.core.logging import configure_logging

from .formatters import create_formatter
from .market import register as register_market_commands


def create_app() -> typer.Typer:
    """Create a Typer application instance for CSPI."""

    app = typer.Typer(add_completion=False, help="CSPI command line interface")

    @app.callback()
    def main(
        ctx: typer.Context,
        format: str = typer.Option(
            "table",
            "--format",
            "-f",
            help="Output format (table or json).",
            show_default=True,
        ),
        log_level: str = typer.Option(
            "WARNING",
            "--log-level",
            help="Log level for the structured stderr log.",
            show_default=True,
        ),
        no_color: bool = typer.Option(
            False,
            "--no-color",
            help="Disable colorized output for table format.",
        ),
    ) -> None:
        ctx.ensure_object(dict)
        normalized_format = format.strip().lower()
        try:
            create_formatter(normalized_format, no_color=no_color)
        except ValueError as exc:
            raise typer.BadParameter(str(exc), param_hint="--format") from exc

        ctx.obj.update(
            {
                "format": normalized_format,
                "log_level": log_level.upper(),
                "no_color": no_color,
            }
        )
        _configure_logging(log_level)

    register_market_commands(app)
    return app


def _configure_logging(level_name: str) -> None:
    level = level_name.upper()
    if level not in {"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"}:
        level = "INFO"
    configure_logging(level=level)


app = create_app()
