"""
Batch lifecycle reconciliation.

Takes a list of identifiers, runs one idempotent lifecycle call per
identifier concurrently, and reconciles the outcomes into a single
:class:`ReconciliationReport`.

Modules
-------
models       OperationKind, OperationConfig, TaskOutcome, ReconciliationReport
targets      normalize_targets
classifier   classify (Result → TaskOutcome)
dispatcher   ConcurrentDispatcher (asyncio fan-out + join)
aggregator   aggregate, raise_for_report
events       OutcomeEvent, log_sink, CollectingSink
engine       reconcile, run_batch and per-operation shortcuts
"""

from devspine.reconcile.aggregator import aggregate, failure_message, raise_for_report
from devspine.reconcile.classifier import NOT_FOUND_REASON, classify
from devspine.reconcile.dispatcher import ConcurrentDispatcher
from devspine.reconcile.engine import (
    reconcile,
    remove_containers,
    remove_images,
    run_batch,
    stop_containers,
)
from devspine.reconcile.events import CollectingSink, OutcomeEvent, log_sink
from devspine.reconcile.models import (
    OperationConfig,
    OperationKind,
    OutcomeStatus,
    ReconciliationReport,
    TaskOutcome,
)
from devspine.reconcile.targets import normalize_targets

__all__ = [
    "aggregate",
    "failure_message",
    "raise_for_report",
    "NOT_FOUND_REASON",
    "classify",
    "ConcurrentDispatcher",
    "reconcile",
    "remove_containers",
    "remove_images",
    "run_batch",
    "stop_containers",
    "CollectingSink",
    "OutcomeEvent",
    "log_sink",
    "OperationConfig",
    "OperationKind",
    "OutcomeStatus",
    "ReconciliationReport",
    "TaskOutcome",
    "normalize_targets",
]
