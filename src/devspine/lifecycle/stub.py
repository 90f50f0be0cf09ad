"""Stub Lifecycle Client — scripted, in-memory client for tests and dry-run.

WHY
───
Exercising the reconciliation engine against a real daemon is slow and
non-deterministic.  ``StubLifecycleClient`` answers every call from a script
(or from a small in-memory model of running containers and images), records
what was asked of it, and can add per-identifier delays to shuffle completion
order.

ARCHITECTURE
────────────
::

    StubLifecycleClient(
        results={"a": None, "b": ResourceNotFoundError()},   # scripted
        containers={"web": True, "db": False},                # stateful
        images={"nginx:latest"},
        delays={"a": 0.05},
    )
      ├── .stop / .remove_container / .remove_image
      ├── .list_containers  ─ docker-ps-shaped rows from the stateful model
      ├── .calls        ─ [(method, identifier, arg), ...]
      └── .call_count

A scripted entry wins over the stateful model.  A scripted value that is a
``LifecycleError`` is returned as ``Err``; any other exception instance is
*raised*, which lets tests simulate a crashing unit of work.

Related modules:
    protocol.py — LifecycleClient protocol
"""

from __future__ import annotations

import asyncio
from collections.abc import Iterable, Mapping
from typing import Any

from devspine.core.errors import (
    AlreadyInDesiredStateError,
    LifecycleError,
    ResourceInUseError,
    ResourceNotFoundError,
)
from devspine.core.result import Err, Ok, Result


class StubLifecycleClient:
    """In-memory lifecycle client.

    Without a script, the stub behaves like a tiny runtime: ``containers``
    maps container names to their running flag and ``images`` is the set of
    present images.  Removing something deletes it, so a second batch over
    the same identifiers sees NOT_FOUND.

    Example:
        >>> client = StubLifecycleClient(containers={"web": True})
        >>> await client.stop("web", 10)      # Ok(None)
        >>> await client.stop("web", 10)      # Err(already stopped)
    """

    def __init__(
        self,
        results: Mapping[str, Exception | None] | None = None,
        *,
        containers: Mapping[str, bool] | None = None,
        images: Iterable[str] | None = None,
        delays: Mapping[str, float] | None = None,
        default: Exception | None = None,
    ) -> None:
        self._results = dict(results or {})
        self._containers = dict(containers or {})
        self._images = set(images or ())
        self._delays = dict(delays or {})
        self._default = default
        self._stateful = containers is not None or images is not None
        self._calls: list[tuple[str, str, object]] = []

    # === LifecycleClient ===

    async def stop(self, identifier: str, timeout_seconds: int) -> Result[None]:
        return await self._call("stop", identifier, timeout_seconds, self._stop_state)

    async def remove_container(self, identifier: str, force: bool) -> Result[None]:
        return await self._call("remove_container", identifier, force, self._rm_state)

    async def remove_image(self, identifier: str, force: bool) -> Result[None]:
        return await self._call("remove_image", identifier, force, self._rmi_state)

    def list_containers(self, all_containers: bool = True) -> list[dict[str, Any]]:
        """Rows shaped like ``docker ps --format '{{json .}}'`` output."""
        return [
            {
                "ID": name,
                "Names": name,
                "State": "running" if running else "exited",
                "Status": "Up" if running else "Exited (0)",
            }
            for name, running in self._containers.items()
            if running or all_containers
        ]

    # === TEST HELPERS ===

    @property
    def calls(self) -> list[tuple[str, str, object]]:
        """All calls made, in call order (for test assertions)."""
        return self._calls.copy()

    @property
    def call_count(self) -> int:
        return len(self._calls)

    @property
    def containers(self) -> dict[str, bool]:
        return dict(self._containers)

    @property
    def images(self) -> set[str]:
        return set(self._images)

    # === Internals ===

    async def _call(self, method, identifier, arg, apply_state) -> Result[None]:
        self._calls.append((method, identifier, arg))
        delay = self._delays.get(identifier, 0.0)
        if delay:
            await asyncio.sleep(delay)

        if identifier in self._results:
            return self._scripted(self._results[identifier])
        if self._stateful:
            return apply_state(identifier, arg)
        return self._scripted(self._default)

    @staticmethod
    def _scripted(outcome: Exception | None) -> Result[None]:
        if outcome is None:
            return Ok(None)
        if isinstance(outcome, LifecycleError):
            return Err(outcome)
        raise outcome

    def _stop_state(self, identifier: str, timeout_seconds: int) -> Result[None]:
        if identifier not in self._containers:
            return Err(ResourceNotFoundError(identifier=identifier))
        if not self._containers[identifier]:
            return Err(AlreadyInDesiredStateError("already stopped", identifier=identifier))
        self._containers[identifier] = False
        return Ok(None)

    def _rm_state(self, identifier: str, force: bool) -> Result[None]:
        if identifier not in self._containers:
            return Err(ResourceNotFoundError(identifier=identifier))
        if self._containers[identifier] and not force:
            return Err(ResourceInUseError(identifier=identifier))
        del self._containers[identifier]
        return Ok(None)

    def _rmi_state(self, identifier: str, force: bool) -> Result[None]:
        if identifier not in self._images:
            return Err(ResourceNotFoundError(identifier=identifier))
        self._images.discard(identifier)
        return Ok(None)
