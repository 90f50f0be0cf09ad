"""Outcome classification.

Maps the raw ``Result`` a lifecycle client returned for one identifier to a
three-way :class:`TaskOutcome`:

=================================  ===================================
Client result                      Outcome
=================================  ===================================
``Ok(...)``                        SUCCEEDED
``Err`` kind NOT_FOUND             ALREADY_SATISFIED("resource not found")
``Err`` kind ALREADY_IN_DESIRED..  ALREADY_SATISFIED(<error message>)
anything else                      FAILED(<original error>)
=================================  ===================================

For stop and remove, a missing resource is already the requested end state,
so it is not a failure of user intent.
"""

from __future__ import annotations

from devspine.core.errors import LifecycleError, LifecycleErrorKind
from devspine.core.result import Err, Ok, Result
from devspine.reconcile.models import TaskOutcome

NOT_FOUND_REASON = "resource not found"

_SATISFIED_KINDS = frozenset(
    {LifecycleErrorKind.NOT_FOUND, LifecycleErrorKind.ALREADY_IN_DESIRED_STATE}
)


def classify(identifier: str, index: int, result: Result[object]) -> TaskOutcome:
    """Classify one client result. The original error object is kept as-is."""
    match result:
        case Ok():
            return TaskOutcome.succeeded(identifier, index)
        case Err(LifecycleError(kind=kind) as error) if kind in _SATISFIED_KINDS:
            if kind is LifecycleErrorKind.NOT_FOUND:
                reason = NOT_FOUND_REASON
            else:
                reason = error.message
            return TaskOutcome.already_satisfied(identifier, index, reason)
        case Err(error):
            return TaskOutcome.failed(identifier, index, error)
    raise TypeError(f"expected Ok or Err, got {type(result).__name__}")
