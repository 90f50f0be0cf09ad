"""Data model for batch lifecycle reconciliation.

ARCHITECTURE
────────────
::

    OperationKind      ─ stop | rm | rmi
    OperationConfig    ─ force, timeout_seconds (shared by every unit)

    TaskOutcome        ─ one per dispatched identifier
      ├── SUCCEEDED
      ├── ALREADY_SATISFIED (reason)
      └── FAILED (error)

    ReconciliationReport ─ built once, after the join barrier
      ├── succeeded          (identifiers, input order)
      ├── already_satisfied  ((identifier, reason), input order)
      └── failed             ((identifier, error), input order)
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any

from devspine.core.errors import ValidationError


class OperationKind(str, Enum):
    """Idempotent lifecycle action applied to every identifier in a batch."""

    STOP = "stop"
    REMOVE_CONTAINER = "rm"
    REMOVE_IMAGE = "rmi"

    @property
    def verb(self) -> str:
        return "stop" if self is OperationKind.STOP else "remove"

    @property
    def noun(self) -> str:
        return "image" if self is OperationKind.REMOVE_IMAGE else "container"

    @property
    def past_tense(self) -> str:
        return "Stopped" if self is OperationKind.STOP else "Removed"

    @property
    def label(self) -> str:
        """Human label, e.g. ``container stop`` or ``image removal``."""
        if self is OperationKind.STOP:
            return "container stop"
        return f"{self.noun} removal"


@dataclass(frozen=True)
class OperationConfig:
    """Operation parameters shared by every unit of a batch.

    ``force`` applies to removals, ``timeout_seconds`` to stop.
    """

    force: bool = False
    timeout_seconds: int = 10

    def __post_init__(self) -> None:
        if self.timeout_seconds < 0:
            raise ValidationError(
                f"timeout_seconds must be >= 0, got {self.timeout_seconds}"
            )


class OutcomeStatus(str, Enum):
    SUCCEEDED = "succeeded"
    ALREADY_SATISFIED = "already_satisfied"
    FAILED = "failed"


@dataclass(frozen=True)
class TaskOutcome:
    """Terminal result of one unit of work."""

    identifier: str
    index: int
    status: OutcomeStatus
    reason: str | None = None
    error: BaseException | None = None

    @classmethod
    def succeeded(cls, identifier: str, index: int) -> TaskOutcome:
        return cls(identifier, index, OutcomeStatus.SUCCEEDED)

    @classmethod
    def already_satisfied(cls, identifier: str, index: int, reason: str) -> TaskOutcome:
        return cls(identifier, index, OutcomeStatus.ALREADY_SATISFIED, reason=reason)

    @classmethod
    def failed(cls, identifier: str, index: int, error: BaseException) -> TaskOutcome:
        return cls(identifier, index, OutcomeStatus.FAILED, error=error)

    @property
    def is_failure(self) -> bool:
        return self.status is OutcomeStatus.FAILED


@dataclass(frozen=True)
class ReconciliationReport:
    """Partition of every outcome in a batch, in input order."""

    operation: OperationKind
    batch_id: str
    outcomes: tuple[TaskOutcome, ...]
    succeeded: tuple[str, ...] = ()
    already_satisfied: tuple[tuple[str, str], ...] = ()
    failed: tuple[tuple[str, BaseException], ...] = ()
    started_at: datetime | None = None
    completed_at: datetime | None = None

    @property
    def ok(self) -> bool:
        """True when nothing failed (already-satisfied items count as success)."""
        return not self.failed

    @property
    def total(self) -> int:
        return len(self.outcomes)

    @property
    def first_error(self) -> BaseException | None:
        """Error of the first failed identifier in input order."""
        return self.failed[0][1] if self.failed else None

    @property
    def duration_seconds(self) -> float | None:
        if self.started_at and self.completed_at:
            return (self.completed_at - self.started_at).total_seconds()
        return None

    def to_dict(self) -> dict[str, Any]:
        """Serialise for logging / ``--json`` output."""
        return {
            "batch_id": self.batch_id,
            "operation": self.operation.value,
            "ok": self.ok,
            "total": self.total,
            "duration_seconds": self.duration_seconds,
            "succeeded": list(self.succeeded),
            "already_satisfied": [
                {"identifier": identifier, "reason": reason}
                for identifier, reason in self.already_satisfied
            ],
            "failed": [
                {"identifier": identifier, "error": str(error)}
                for identifier, error in self.failed
            ],
        }
