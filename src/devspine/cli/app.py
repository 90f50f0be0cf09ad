"""
Root Typer application for the devspine CLI.
"""

from __future__ import annotations

import typer
from typer import Typer

from devspine.cli.container import app as container_app
from devspine.cli.utils import fail, load_settings
from devspine.core.logging import configure_logging

app = Typer(
    name="devspine",
    help="devspine — batch lifecycle management for containers and images.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


# ── Version callback ─────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        from importlib.metadata import PackageNotFoundError
        from importlib.metadata import version as pkg_version

        try:
            v = pkg_version("devspine")
        except PackageNotFoundError:
            v = "0.1.0"
        typer.echo(f"devspine {v}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(  # noqa: UP007
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
    log_level: str | None = typer.Option(
        None, "--log-level", "-l", help="Log level (DEBUG, INFO, WARNING, ERROR).",
    ),
    json_logs: bool | None = typer.Option(
        None, "--json-logs/--console-logs", help="Force JSON or console log format.",
    ),
) -> None:
    """devspine CLI — stop and remove containers and images in batches."""
    settings = load_settings()
    try:
        configure_logging(
            level=log_level or settings.log_level,
            json_format=json_logs if json_logs is not None else settings.json_logs,
        )
    except ValueError as exc:
        raise fail(str(exc)) from exc


# ── Sub-command registration ─────────────────────────────────────────────

app.add_typer(container_app, name="container", help="Container and image lifecycle.")
