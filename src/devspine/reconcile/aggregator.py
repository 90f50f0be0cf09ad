"""Reconciliation Aggregator — partitions outcomes after the join barrier.

Two steps, both run only once every unit has finished:

1. :func:`aggregate` builds the :class:`ReconciliationReport` from the
   index-aligned outcome list.
2. :func:`raise_for_report` does nothing when nothing failed.  Otherwise it
   writes one ``"<identifier>: <error>"`` line per failure to the diagnostic
   channel and raises a single :class:`BatchOperationError` whose cause is the
   first failure in *input* order.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from datetime import datetime
from typing import Any

from devspine.core.errors import BatchOperationError, DevspineError, ErrorContext
from devspine.core.logging import get_logger
from devspine.reconcile.models import (
    OperationKind,
    OutcomeStatus,
    ReconciliationReport,
    TaskOutcome,
)

logger = get_logger(__name__)

DiagnosticWriter = Callable[[str], None]


def _error_fields(error: BaseException) -> dict[str, Any]:
    if isinstance(error, DevspineError):
        return error.to_dict()
    return {"error_type": type(error).__name__, "message": str(error)}


def aggregate(
    kind: OperationKind,
    outcomes: Sequence[TaskOutcome],
    *,
    batch_id: str,
    started_at: datetime | None = None,
    completed_at: datetime | None = None,
) -> ReconciliationReport:
    """Partition outcomes into a report, ordered by input position."""
    ordered = tuple(sorted(outcomes, key=lambda o: o.index))
    return ReconciliationReport(
        operation=kind,
        batch_id=batch_id,
        outcomes=ordered,
        succeeded=tuple(
            o.identifier for o in ordered if o.status is OutcomeStatus.SUCCEEDED
        ),
        already_satisfied=tuple(
            (o.identifier, o.reason or "")
            for o in ordered
            if o.status is OutcomeStatus.ALREADY_SATISFIED
        ),
        failed=tuple(
            (o.identifier, o.error) for o in ordered if o.status is OutcomeStatus.FAILED
        ),
        started_at=started_at,
        completed_at=completed_at,
    )


def failure_message(kind: OperationKind, count: int) -> str:
    """Aggregate message, e.g. ``Failed to stop 2 container(s)``."""
    return f"Failed to {kind.verb} {count} {kind.noun}(s)"


def diagnostic_lines(report: ReconciliationReport) -> list[str]:
    """One ``"<identifier>: <error>"`` line per failure, in input order."""
    return [f"{identifier}: {error}" for identifier, error in report.failed]


def raise_for_report(
    report: ReconciliationReport,
    diagnostics: DiagnosticWriter | None = None,
) -> None:
    """Raise :class:`BatchOperationError` if any identifier failed.

    Every failure is logged and, when ``diagnostics`` is given, written to it
    before the representative error is raised.
    """
    if report.ok:
        return

    for (identifier, error), line in zip(report.failed, diagnostic_lines(report)):
        logger.error(
            "reconcile.failure",
            batch_id=report.batch_id,
            operation=report.operation.value,
            identifier=identifier,
            error=_error_fields(error),
        )
        if diagnostics is not None:
            diagnostics(line)

    raise BatchOperationError(
        failure_message(report.operation, len(report.failed)),
        report=report,
        cause=report.first_error,
        context=ErrorContext(
            operation=report.operation.value,
            identifier=report.failed[0][0],
            batch_id=report.batch_id,
        ),
    )
