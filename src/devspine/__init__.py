"""
devspine — batch lifecycle management for containers and images.

Stops and removes containers and images in batches against a Docker daemon,
running one concurrent call per identifier and reconciling every outcome into
a single report.

Example::

    import asyncio
    from devspine import DockerLifecycleClient, OperationKind, run_batch

    report = asyncio.run(
        run_batch(OperationKind.STOP, ["web", "worker"], DockerLifecycleClient())
    )
"""

from devspine.lifecycle import DockerLifecycleClient, LifecycleClient, StubLifecycleClient
from devspine.reconcile import (
    OperationConfig,
    OperationKind,
    ReconciliationReport,
    reconcile,
    run_batch,
)

__version__ = "0.1.0"

__all__ = [
    "DockerLifecycleClient",
    "LifecycleClient",
    "StubLifecycleClient",
    "OperationConfig",
    "OperationKind",
    "ReconciliationReport",
    "reconcile",
    "run_batch",
    "__version__",
]
