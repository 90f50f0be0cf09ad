"""Core primitives: errors, result envelope, logging, settings."""

from devspine.core.errors import (
    AlreadyInDesiredStateError,
    BatchOperationError,
    DevspineError,
    EmptyTargetListError,
    ErrorCategory,
    LifecycleError,
    LifecycleErrorKind,
    ResourceInUseError,
    ResourceNotFoundError,
    RuntimeApiError,
    TaskExecutionError,
)
from devspine.core.result import Err, Ok, Result

__all__ = [
    "AlreadyInDesiredStateError",
    "BatchOperationError",
    "DevspineError",
    "EmptyTargetListError",
    "ErrorCategory",
    "LifecycleError",
    "LifecycleErrorKind",
    "ResourceInUseError",
    "ResourceNotFoundError",
    "RuntimeApiError",
    "TaskExecutionError",
    "Err",
    "Ok",
    "Result",
]
