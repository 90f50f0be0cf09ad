"""
Structured error types for devspine.

Every error raised or carried by devspine extends :class:`DevspineError`, which
records a category, a retry hint, structured context and an optional chained
cause. Lifecycle errors additionally carry a :class:`LifecycleErrorKind` tag so
the reconciliation engine can classify outcomes without inspecting exception
types or message text.

Architecture:
    ::

        ┌─────────────────────────────────────────────────────────────────┐
        │                        DevspineError                             │
        │  (category, context, cause)                                     │
        ├─────────────────────────────────────────────────────────────────┤
        │                                                                  │
        │  ValidationError       ConfigError          LifecycleError(kind) │
        │       │                    │                      │              │
        │  EmptyTargetList      DockerNotFound      ResourceNotFound       │
        │  InvalidTarget                            AlreadyInDesiredState  │
        │                                           ResourceInUse          │
        │                                           RuntimeApiError        │
        │                                                                  │
        │  TaskExecutionError    BatchOperationError                       │
        │  (INTERNAL)            (aggregate, cause = first failure)        │
        └─────────────────────────────────────────────────────────────────┘

Guardrails:
    ❌ DON'T: Match on error message text to decide what happened
    ✅ DO: Check ``LifecycleError.kind``

    ❌ DON'T: Swallow the original exception
    ✅ DO: Pass it as cause= for error chaining

Tags:
    error-handling, exception-hierarchy, lifecycle, devspine
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from devspine.reconcile.models import ReconciliationReport


class ErrorCategory(str, Enum):
    """Standard error categories for classification and routing."""

    NETWORK = "NETWORK"           # Daemon unreachable, subprocess timeout
    RUNTIME = "RUNTIME"           # Container runtime rejected the request
    VALIDATION = "VALIDATION"     # Bad caller input
    CONFIG = "CONFIG"             # Missing binary, invalid settings
    CONFLICT = "CONFLICT"         # Resource in use
    INTERNAL = "INTERNAL"         # Bugs, unexpected state


class LifecycleErrorKind(str, Enum):
    """Tag carried by every :class:`LifecycleError`."""

    NOT_FOUND = "not_found"
    ALREADY_IN_DESIRED_STATE = "already_in_desired_state"
    RESOURCE_IN_USE = "resource_in_use"
    OTHER = "other"


@dataclass
class ErrorContext:
    """Structured metadata attached to an error for logging."""

    operation: str | None = None
    identifier: str | None = None
    batch_id: str | None = None
    command: str | None = None
    exit_code: int | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        result = {}
        for key in ["operation", "identifier", "batch_id", "command", "exit_code"]:
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        return result


class DevspineError(Exception):
    """
    Base exception for all devspine errors.

    Subclasses set ``default_category`` to give a sensible default for
    their domain.
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        context: ErrorContext | None = None,
        cause: BaseException | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.context = context or ErrorContext()
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
        }
        context_dict = self.context.to_dict()
        if context_dict:
            result["context"] = context_dict
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


# =============================================================================
# VALIDATION / CONFIG ERRORS
# =============================================================================


class ValidationError(DevspineError):
    """Caller input is invalid."""

    default_category = ErrorCategory.VALIDATION


class EmptyTargetListError(ValidationError):
    """A batch operation was invoked without any identifiers."""

    def __init__(self, message: str = "at least one identifier is required", **kwargs: Any):
        super().__init__(message, **kwargs)


class InvalidTargetError(ValidationError):
    """An identifier is not a usable container or image reference."""

    def __init__(self, value: Any, position: int, **kwargs: Any):
        super().__init__(f"invalid identifier at position {position}: {value!r}", **kwargs)
        self.value = value
        self.position = position


class ConfigError(DevspineError):
    """Missing or invalid configuration."""

    default_category = ErrorCategory.CONFIG


class DockerNotFoundError(ConfigError):
    """Raised when the docker CLI is not available."""


# =============================================================================
# LIFECYCLE ERRORS
# =============================================================================


class LifecycleError(DevspineError):
    """
    Error returned by a lifecycle client for a single identifier.

    The ``kind`` tag is what the reconciliation engine classifies on.
    Subclasses fix the kind; constructing ``LifecycleError`` directly requires
    one.
    """

    default_category = ErrorCategory.RUNTIME
    kind: LifecycleErrorKind = LifecycleErrorKind.OTHER

    def __init__(
        self,
        message: str,
        *,
        kind: LifecycleErrorKind | None = None,
        identifier: str | None = None,
        **kwargs: Any,
    ):
        super().__init__(message, **kwargs)
        if kind is not None:
            self.kind = kind
        self.identifier = identifier
        if identifier is not None:
            self.context.identifier = identifier

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["kind"] = self.kind.value
        return result


class ResourceNotFoundError(LifecycleError):
    """The container or image does not exist."""

    kind = LifecycleErrorKind.NOT_FOUND

    def __init__(self, message: str = "resource not found", **kwargs: Any):
        super().__init__(message, **kwargs)


class AlreadyInDesiredStateError(LifecycleError):
    """The resource already is where the operation would put it."""

    kind = LifecycleErrorKind.ALREADY_IN_DESIRED_STATE

    def __init__(self, message: str = "already in desired state", **kwargs: Any):
        super().__init__(message, **kwargs)


class ResourceInUseError(LifecycleError):
    """The resource cannot change state because something depends on it."""

    default_category = ErrorCategory.CONFLICT
    kind = LifecycleErrorKind.RESOURCE_IN_USE

    def __init__(self, message: str = "resource in use", **kwargs: Any):
        super().__init__(message, **kwargs)


class RuntimeApiError(LifecycleError):
    """Transport or API failure talking to the container runtime."""

    kind = LifecycleErrorKind.OTHER


# =============================================================================
# ENGINE ERRORS
# =============================================================================


class TaskExecutionError(DevspineError):
    """A unit of work crashed instead of returning a result."""

    default_category = ErrorCategory.INTERNAL

    def __init__(self, identifier: str, cause: BaseException, **kwargs: Any):
        super().__init__(
            f"task for {identifier!r} crashed: {type(cause).__name__}: {cause}",
            cause=cause,
            **kwargs,
        )
        self.identifier = identifier
        self.context.identifier = identifier


class BatchOperationError(DevspineError):
    """
    One or more identifiers in a batch failed.

    ``cause`` is the error of the first failed identifier in input order; the
    complete picture lives in ``report``.
    """

    def __init__(self, message: str, *, report: ReconciliationReport, **kwargs: Any):
        super().__init__(message, **kwargs)
        self.report = report


__all__ = [
    "ErrorCategory",
    "LifecycleErrorKind",
    "ErrorContext",
    "DevspineError",
    "ValidationError",
    "EmptyTargetListError",
    "InvalidTargetError",
    "ConfigError",
    "DockerNotFoundError",
    "LifecycleError",
    "ResourceNotFoundError",
    "AlreadyInDesiredStateError",
    "ResourceInUseError",
    "RuntimeApiError",
    "TaskExecutionError",
    "BatchOperationError",
]
