"""Concurrent Dispatcher — asyncio fan-out of one lifecycle call per identifier.

ARCHITECTURE
────────────
::

    ConcurrentDispatcher(client, max_concurrency=None)
      └── .run(kind, targets, config, batch_id, sink)
            │
            ├── one coroutine per identifier ──► client.stop / remove_container / remove_image
            │       └── classify() ──► TaskOutcome ──► sink(OutcomeEvent)
            │
            └── asyncio.gather(...)   ─ join barrier; returns outcomes
                                        index-aligned with ``targets``

Each unit owns its identifier and writes exactly one slot of the outcome
list.  Nothing reads that list until ``gather`` has returned.  An exception
escaping a unit is caught at the unit boundary and recorded as a failed
outcome wrapping :class:`~devspine.core.errors.TaskExecutionError`; siblings
keep running.  ``asyncio.CancelledError`` is not caught: cancelling the batch
discards it.

``max_concurrency`` bounds in-flight client calls with a semaphore.  Left as
``None``, every identifier gets its own concurrent unit.

Related modules:
    classifier.py — Result → TaskOutcome
    aggregator.py — consumes the outcome list after the join
"""

from __future__ import annotations

import asyncio
from collections.abc import Sequence

from devspine.core.errors import TaskExecutionError
from devspine.core.logging import get_logger
from devspine.core.result import Result
from devspine.lifecycle.protocol import LifecycleClient
from devspine.reconcile.classifier import classify
from devspine.reconcile.events import OutcomeEvent, OutcomeSink
from devspine.reconcile.models import OperationConfig, OperationKind, TaskOutcome

logger = get_logger(__name__)


class ConcurrentDispatcher:
    """Fans a lifecycle operation out over a list of identifiers.

    Parameters
    ----------
    client : LifecycleClient
        Performs the actual stop/remove calls.
    max_concurrency : int | None
        Maximum simultaneous client calls (default: unbounded).
    """

    def __init__(self, client: LifecycleClient, max_concurrency: int | None = None) -> None:
        if max_concurrency is not None and max_concurrency < 1:
            raise ValueError(f"max_concurrency must be >= 1, got {max_concurrency}")
        self._client = client
        self._max_concurrency = max_concurrency

    @property
    def max_concurrency(self) -> int | None:
        return self._max_concurrency

    async def run(
        self,
        kind: OperationKind,
        targets: Sequence[str],
        config: OperationConfig,
        *,
        batch_id: str,
        sink: OutcomeSink | None = None,
    ) -> list[TaskOutcome]:
        """Run one unit per target and wait for all of them.

        Returns:
            Outcomes in the same order as ``targets``.
        """
        sem = asyncio.Semaphore(self._max_concurrency) if self._max_concurrency else None

        async def _run_one(index: int, identifier: str) -> TaskOutcome:
            try:
                if sem is None:
                    result = await self._invoke(kind, identifier, config)
                else:
                    async with sem:
                        result = await self._invoke(kind, identifier, config)
                outcome = classify(identifier, index, result)
            except Exception as exc:
                logger.error(
                    "reconcile.task_crashed",
                    identifier=identifier,
                    index=index,
                    error=f"{type(exc).__name__}: {exc}",
                )
                outcome = TaskOutcome.failed(
                    identifier, index, TaskExecutionError(identifier, exc)
                )
            if sink is not None:
                self._emit(sink, OutcomeEvent.from_outcome(batch_id, kind, outcome))
            return outcome

        return list(
            await asyncio.gather(
                *[_run_one(index, identifier) for index, identifier in enumerate(targets)]
            )
        )

    async def _invoke(
        self, kind: OperationKind, identifier: str, config: OperationConfig
    ) -> Result[None]:
        if kind is OperationKind.STOP:
            return await self._client.stop(identifier, config.timeout_seconds)
        if kind is OperationKind.REMOVE_CONTAINER:
            return await self._client.remove_container(identifier, config.force)
        if kind is OperationKind.REMOVE_IMAGE:
            return await self._client.remove_image(identifier, config.force)
        raise ValueError(f"unsupported operation: {kind!r}")

    @staticmethod
    def _emit(sink: OutcomeSink, event: OutcomeEvent) -> None:
        # Sink errors are logged, never propagated.
        try:
            sink(event)
        except Exception as exc:
            logger.error(
                "reconcile.sink_failed",
                identifier=event.identifier,
                error=f"{type(exc).__name__}: {exc}",
            )
