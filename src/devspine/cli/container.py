"""
CLI: ``devspine container`` — batch container and image lifecycle commands.

Usage::

    devspine container stop web worker -t 5     # stop, 5s grace period
    devspine container rm web worker --force    # remove (kill if running)
    devspine container rmi app:latest old:1.0   # remove images
    devspine container status --all             # list containers
    devspine container prune --filter job-      # preview stopped job-* containers
    devspine container prune --filter job- -f   # and remove them

Batch commands exit 0 when every identifier ended in the requested state,
including identifiers that were already stopped or already gone, and 1 if any
identifier failed.
"""

from __future__ import annotations

import asyncio

import typer
from rich.markup import escape

from devspine.cli.utils import (
    console,
    err_console,
    fail,
    load_settings,
    make_client,
    print_diagnostic,
    print_json,
    print_report,
    print_table,
)
from devspine.core.errors import BatchOperationError, DevspineError
from devspine.lifecycle.docker import prunable_containers
from devspine.lifecycle.protocol import LifecycleClient
from devspine.reconcile.aggregator import raise_for_report
from devspine.reconcile.engine import reconcile
from devspine.reconcile.models import OperationConfig, OperationKind

app = typer.Typer(no_args_is_help=True)

_STATUS_COLUMNS = ["ID", "Names", "Image", "Status", "Ports"]


# ── Batch execution ──────────────────────────────────────────────────────


def _execute(
    kind: OperationKind,
    targets: list[str],
    config: OperationConfig,
    *,
    max_concurrency: int | None,
    json_out: bool,
    client: LifecycleClient | None = None,
    label: str | None = None,
) -> None:
    """Run one batch and map its outcome to an exit code."""
    limit = max_concurrency or load_settings().max_concurrency
    try:
        if client is None:
            client = make_client()
        report = asyncio.run(
            reconcile(
                kind,
                targets,
                client,
                config,
                max_concurrency=limit,
            )
        )
    except KeyboardInterrupt:
        err_console.print("[yellow]Interrupted; batch discarded.[/yellow]")
        raise typer.Exit(code=130) from None
    except DevspineError as exc:
        raise fail(exc) from exc

    if json_out:
        print_json(report.to_dict())
    else:
        print_report(report)

    if not report.ok:
        err_console.print(f"\n[bold red]Errors occurred during {label or kind.label}:[/bold red]")
    try:
        raise_for_report(report, diagnostics=print_diagnostic)
    except BatchOperationError as exc:
        raise fail(f"{exc.message}: {exc.cause}") from exc


# ── Commands ─────────────────────────────────────────────────────────────


@app.command("stop")
def stop(
    targets: list[str] = typer.Argument(..., help="Container names or IDs."),
    time: int | None = typer.Option(
        None, "--time", "-t", min=0,
        help="Seconds to wait before killing the container [default: 10].",
    ),
    max_concurrency: int | None = typer.Option(
        None, "--max-concurrency", min=1, help="Limit simultaneous docker calls.",
    ),
    json_out: bool = typer.Option(False, "--json", help="Output the report as JSON."),
) -> None:
    """Stop one or more running containers."""
    timeout = time if time is not None else load_settings().stop_timeout_seconds
    _execute(
        OperationKind.STOP,
        targets,
        OperationConfig(timeout_seconds=timeout),
        max_concurrency=max_concurrency,
        json_out=json_out,
    )


@app.command("rm")
def rm(
    targets: list[str] = typer.Argument(..., help="Container names or IDs."),
    force: bool = typer.Option(False, "--force", "-f", help="Kill running containers first."),
    max_concurrency: int | None = typer.Option(
        None, "--max-concurrency", min=1, help="Limit simultaneous docker calls.",
    ),
    json_out: bool = typer.Option(False, "--json", help="Output the report as JSON."),
) -> None:
    """Remove one or more containers."""
    _execute(
        OperationKind.REMOVE_CONTAINER,
        targets,
        OperationConfig(force=force),
        max_concurrency=max_concurrency,
        json_out=json_out,
    )


@app.command("rmi")
def rmi(
    targets: list[str] = typer.Argument(..., help="Image names, tags or IDs."),
    force: bool = typer.Option(False, "--force", "-f", help="Remove even if referenced."),
    max_concurrency: int | None = typer.Option(
        None, "--max-concurrency", min=1, help="Limit simultaneous docker calls.",
    ),
    json_out: bool = typer.Option(False, "--json", help="Output the report as JSON."),
) -> None:
    """Remove one or more images."""
    _execute(
        OperationKind.REMOVE_IMAGE,
        targets,
        OperationConfig(force=force),
        max_concurrency=max_concurrency,
        json_out=json_out,
    )


@app.command("status")
def status(
    all_containers: bool = typer.Option(
        False, "--all", "-a", help="Include stopped containers.",
    ),
    json_out: bool = typer.Option(False, "--json", help="Output as JSON."),
) -> None:
    """List containers known to the Docker daemon."""
    try:
        rows = make_client().list_containers(all_containers=all_containers)
    except DevspineError as exc:
        raise fail(exc) from exc

    if json_out:
        print_json(rows)
        return
    if not rows:
        err_console.print("[dim]No containers.[/dim]")
        return
    print_table(rows, _STATUS_COLUMNS, title="Containers")


@app.command("prune")
def prune(
    name_filter: str | None = typer.Option(
        None, "--filter", "-n", help="Only containers whose name starts with this prefix.",
    ),
    force: bool = typer.Option(False, "--force", "-f", help="Remove without a dry run."),
    max_concurrency: int | None = typer.Option(
        None, "--max-concurrency", min=1, help="Limit simultaneous docker calls.",
    ),
) -> None:
    """Remove stopped containers, optionally filtered by name prefix.

    Without ``--force`` the matching containers are only listed.
    """
    try:
        client = make_client()
        rows = prunable_containers(client.list_containers(all_containers=True), name_filter)
    except DevspineError as exc:
        raise fail(exc) from exc

    if not rows:
        console.print("No stopped containers found to prune.")
        return

    console.print("The following stopped containers will be removed:")
    for row in rows:
        names = escape(str(row.get("Names", "")))
        console.print(f"  - {escape(str(row['ID']))} ({names})", soft_wrap=True)

    if not force:
        err_console.print("[yellow]Dry run. Re-run with --force to confirm removal.[/yellow]")
        return

    _execute(
        OperationKind.REMOVE_CONTAINER,
        [str(row["ID"]) for row in rows],
        OperationConfig(force=False),
        max_concurrency=max_concurrency,
        json_out=False,
        client=client,
        label="container prune",
    )
