"""Outcome Events — one structured event per classified unit of work.

WHY
───
The engine should not care where diagnostics end up.  Each unit emits
exactly one ``OutcomeEvent`` as soon as it is classified; a sink decides
what to do with it (log it, collect it, forward it elsewhere).

ARCHITECTURE
────────────
::

    OutcomeEvent
      ├── batch_id    ─ which batch
      ├── operation   ─ stop / rm / rmi
      ├── identifier  ─ which resource
      ├── status      ─ succeeded / already_satisfied / failed
      ├── reason      ─ why it was already satisfied
      └── error       ─ str(error) for failures

    OutcomeSink = Callable[[OutcomeEvent], None]
      log_sink        ─ structlog (default)
      CollectingSink  ─ in-memory list (tests)

Related modules:
    dispatcher.py — emits one event per outcome
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from devspine.core.logging import get_logger
from devspine.reconcile.models import OperationKind, OutcomeStatus, TaskOutcome

logger = get_logger(__name__)


@dataclass(frozen=True)
class OutcomeEvent:
    """Immutable record of one unit's terminal transition."""

    batch_id: str
    operation: OperationKind
    identifier: str
    index: int
    status: OutcomeStatus
    reason: str | None = None
    error: str | None = None
    error_type: str | None = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))

    @classmethod
    def from_outcome(
        cls, batch_id: str, operation: OperationKind, outcome: TaskOutcome
    ) -> OutcomeEvent:
        return cls(
            batch_id=batch_id,
            operation=operation,
            identifier=outcome.identifier,
            index=outcome.index,
            status=outcome.status,
            reason=outcome.reason,
            error=str(outcome.error) if outcome.error is not None else None,
            error_type=type(outcome.error).__name__ if outcome.error is not None else None,
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for JSON/log fields."""
        data: dict[str, Any] = {
            "batch_id": self.batch_id,
            "operation": self.operation.value,
            "identifier": self.identifier,
            "index": self.index,
            "status": self.status.value,
            "timestamp": self.timestamp.isoformat(),
        }
        if self.reason is not None:
            data["reason"] = self.reason
        if self.error is not None:
            data["error"] = self.error
            data["error_type"] = self.error_type
        return data


OutcomeSink = Callable[[OutcomeEvent], None]


def log_sink(event: OutcomeEvent) -> None:
    """Forward an outcome event to the structured logger."""
    fields = event.to_dict()
    fields.pop("timestamp")
    if event.status is OutcomeStatus.FAILED:
        logger.warning("reconcile.outcome", **fields)
    else:
        logger.info("reconcile.outcome", **fields)


class CollectingSink:
    """Sink that keeps every event in memory, in emission order."""

    def __init__(self) -> None:
        self.events: list[OutcomeEvent] = []

    def __call__(self, event: OutcomeEvent) -> None:
        self.events.append(event)

    def by_status(self, status: OutcomeStatus) -> list[OutcomeEvent]:
        return [e for e in self.events if e.status is status]


__all__ = ["OutcomeEvent", "OutcomeSink", "log_sink", "CollectingSink"]
