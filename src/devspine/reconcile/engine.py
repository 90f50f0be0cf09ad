"""Batch lifecycle reconciliation engine.

Entry points for applying one idempotent lifecycle operation to many
identifiers:

- :func:`reconcile` returns the full :class:`ReconciliationReport` and never
  raises for per-identifier failures.
- :func:`run_batch` does the same and then raises a single
  :class:`~devspine.core.errors.BatchOperationError` if anything failed.
- :func:`stop_containers`, :func:`remove_containers` and
  :func:`remove_images` are thin ``run_batch`` shortcuts.

Flow::

    normalize_targets ─► ConcurrentDispatcher.run ─► aggregate ─► raise_for_report
                          (one unit per id,          (after join)
                           classify per unit)

Example::

    client = DockerLifecycleClient()
    report = await run_batch(
        OperationKind.STOP, ["web-1", "worker-2"], client,
        OperationConfig(timeout_seconds=5),
    )
"""

from __future__ import annotations

import uuid
from collections.abc import Iterable
from datetime import UTC, datetime

from devspine.core.logging import LogContext, get_logger
from devspine.lifecycle.protocol import LifecycleClient
from devspine.reconcile.aggregator import DiagnosticWriter, aggregate, raise_for_report
from devspine.reconcile.dispatcher import ConcurrentDispatcher
from devspine.reconcile.events import OutcomeSink, log_sink
from devspine.reconcile.models import OperationConfig, OperationKind, ReconciliationReport
from devspine.reconcile.targets import normalize_targets

logger = get_logger(__name__)


async def reconcile(
    kind: OperationKind | str,
    targets: Iterable[str],
    client: LifecycleClient,
    config: OperationConfig | None = None,
    *,
    max_concurrency: int | None = None,
    sink: OutcomeSink | None = log_sink,
) -> ReconciliationReport:
    """Apply ``kind`` to every target concurrently and report on all of them.

    Raises:
        EmptyTargetListError: ``targets`` is empty.
        InvalidTargetError: a target is blank or not a string.
    """
    kind = OperationKind(kind)
    config = config or OperationConfig()
    identifiers = normalize_targets(targets)
    batch_id = uuid.uuid4().hex[:12]
    dispatcher = ConcurrentDispatcher(client, max_concurrency=max_concurrency)

    async with LogContext(operation=kind.value, batch_id=batch_id):
        started_at = datetime.now(UTC)
        logger.info(
            "reconcile.start",
            targets=len(identifiers),
            max_concurrency=max_concurrency,
            force=config.force,
            timeout_seconds=config.timeout_seconds,
        )

        outcomes = await dispatcher.run(
            kind, identifiers, config, batch_id=batch_id, sink=sink
        )
        report = aggregate(
            kind,
            outcomes,
            batch_id=batch_id,
            started_at=started_at,
            completed_at=datetime.now(UTC),
        )

        logger.info(
            "reconcile.complete",
            succeeded=len(report.succeeded),
            already_satisfied=len(report.already_satisfied),
            failed=len(report.failed),
            duration_seconds=report.duration_seconds,
        )
    return report


async def run_batch(
    kind: OperationKind | str,
    targets: Iterable[str],
    client: LifecycleClient,
    config: OperationConfig | None = None,
    *,
    max_concurrency: int | None = None,
    sink: OutcomeSink | None = log_sink,
    diagnostics: DiagnosticWriter | None = None,
) -> ReconciliationReport:
    """Like :func:`reconcile`, but raise if any identifier failed.

    Raises:
        BatchOperationError: one or more identifiers failed.  Its cause is the
            first failure in input order; every failure was written to
            ``diagnostics`` first.
    """
    report = await reconcile(
        kind,
        targets,
        client,
        config,
        max_concurrency=max_concurrency,
        sink=sink,
    )
    raise_for_report(report, diagnostics)
    return report


async def stop_containers(
    targets: Iterable[str],
    client: LifecycleClient,
    timeout_seconds: int = 10,
    **kwargs,
) -> ReconciliationReport:
    return await run_batch(
        OperationKind.STOP,
        targets,
        client,
        OperationConfig(timeout_seconds=timeout_seconds),
        **kwargs,
    )


async def remove_containers(
    targets: Iterable[str],
    client: LifecycleClient,
    force: bool = False,
    **kwargs,
) -> ReconciliationReport:
    return await run_batch(
        OperationKind.REMOVE_CONTAINER, targets, client, OperationConfig(force=force), **kwargs
    )


async def remove_images(
    targets: Iterable[str],
    client: LifecycleClient,
    force: bool = False,
    **kwargs,
) -> ReconciliationReport:
    return await run_batch(
        OperationKind.REMOVE_IMAGE, targets, client, OperationConfig(force=force), **kwargs
    )
