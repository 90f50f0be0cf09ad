"""Lifecycle Client Protocol — the runtime boundary of the engine.

The reconciliation engine never talks to Docker directly. It calls an object
that satisfies ``LifecycleClient``: three coroutines that each act on one
identifier and report back with a :class:`~devspine.core.result.Result`.

ARCHITECTURE
────────────
::

    LifecycleClient (Protocol)
      ├── .stop(id, timeout_seconds)    ─ Ok(None) | Err(LifecycleError)
      ├── .remove_container(id, force)  ─ Ok(None) | Err(LifecycleError)
      └── .remove_image(id, force)      ─ Ok(None) | Err(LifecycleError)

    Implementations:
      DockerLifecycleClient ─ docker CLI via subprocess  (production)
      StubLifecycleClient   ─ scripted, in-memory        (tests / dry-run)

Failures are returned, not raised. The error's ``kind`` tag
(NOT_FOUND, ALREADY_IN_DESIRED_STATE, RESOURCE_IN_USE, OTHER) is the
only thing the engine looks at to classify an outcome. No retries happen
behind this interface unless an implementation adds them itself.

Related modules:
    docker.py — DockerLifecycleClient
    stub.py   — StubLifecycleClient
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from devspine.core.result import Result


@runtime_checkable
class LifecycleClient(Protocol):
    """Performs a single state change against the container runtime."""

    async def stop(self, identifier: str, timeout_seconds: int) -> Result[None]:
        """Stop a running container.

        Args:
            identifier: Container name or ID
            timeout_seconds: Grace period before the runtime kills it

        Returns:
            ``Ok(None)`` when stopped; ``Err`` with NOT_FOUND if missing,
            ALREADY_IN_DESIRED_STATE if it was not running.
        """
        ...

    async def remove_container(self, identifier: str, force: bool) -> Result[None]:
        """Remove a container (``force`` kills it first if running)."""
        ...

    async def remove_image(self, identifier: str, force: bool) -> Result[None]:
        """Remove an image (``force`` removes it even if tagged/referenced)."""
        ...
