"""
CLI utility helpers — client construction and output formatting.
"""

from __future__ import annotations

import json
from typing import Any

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from devspine.core.errors import DevspineError
from devspine.core.settings import DevspineSettings, get_settings
from devspine.lifecycle.docker import DockerLifecycleClient
from devspine.reconcile.models import OutcomeStatus, ReconciliationReport

console = Console()
err_console = Console(stderr=True)


# ── Client helper ────────────────────────────────────────────────────────


def load_settings() -> DevspineSettings:
    """Settings, or an ``Error:`` line and exit 1 if the environment is invalid."""
    try:
        return get_settings()
    except DevspineError as exc:
        raise fail(exc) from exc


def make_client() -> DockerLifecycleClient:
    """Build the Docker lifecycle client from settings."""
    settings = get_settings()
    return DockerLifecycleClient(
        docker_binary=settings.docker_binary,
        command_timeout=settings.command_timeout_seconds,
    )


def fail(error: DevspineError | str, code: int = 1) -> typer.Exit:
    """Print an error line to stderr and return the Exit to raise."""
    message = error.message if isinstance(error, DevspineError) else error
    err_console.print(f"[bold red]Error[/bold red]: {escape(message)}", soft_wrap=True)
    return typer.Exit(code=code)


# ── Output helpers ───────────────────────────────────────────────────────


def print_report(report: ReconciliationReport) -> None:
    """Print one line per succeeded or already-satisfied identifier, in input order."""
    kind = report.operation
    for outcome in report.outcomes:
        name = escape(outcome.identifier)
        if outcome.status is OutcomeStatus.SUCCEEDED:
            console.print(f"{kind.past_tense} {kind.noun} '{name}'", soft_wrap=True)
        elif outcome.status is OutcomeStatus.ALREADY_SATISFIED:
            console.print(
                f"[dim]{kind.noun.capitalize()} '{name}': {escape(outcome.reason or '')}[/dim]",
                soft_wrap=True,
            )


def print_json(payload: Any) -> None:
    console.print_json(json.dumps(payload, default=str))


def print_diagnostic(line: str) -> None:
    """Diagnostic channel for per-identifier failures."""
    err_console.print(f"- {line}", markup=False, highlight=False, soft_wrap=True)


def print_table(rows: list[dict[str, Any]], columns: list[str], *, title: str = "") -> None:
    """Render dict rows as a Rich table, showing only ``columns``."""
    table = Table(title=title or None, show_lines=False, pad_edge=False)
    for col in columns:
        table.add_column(col, overflow="fold")
    for row in rows:
        table.add_row(*(str(row.get(col, "")) for col in columns))
    console.print(table)
