"""Docker lifecycle client backed by the ``docker`` CLI.

Stops and removes containers and images by shelling out to ``docker``.
There is no ``docker-py`` dependency. The client works with any runtime that exposes a
docker-compatible CLI (Docker Desktop, Podman's docker shim, Colima, CI
runners).

Key Concepts:
    DockerLifecycleClient: Implements :class:`~devspine.lifecycle.protocol.LifecycleClient`.
        Each blocking subprocess call runs in a worker thread
        (``asyncio.to_thread``) so concurrent units don't block each other.
    DockerNotFoundError: Raised at construction when ``docker`` is not on PATH.

Error Mapping:
    ==========================================  ===========================
    docker CLI condition                        LifecycleErrorKind
    ==========================================  ===========================
    "No such container/image/object"            NOT_FOUND
    stop on a container that is not running     ALREADY_IN_DESIRED_STATE
    rm of a running container without --force  RESOURCE_IN_USE
    "conflict" / "is being used" on removal     RESOURCE_IN_USE
    any other non-zero exit, timeout, OSError   OTHER (RuntimeApiError)
    ==========================================  ===========================

    The "already stopped" condition, and a missing container or image under
    ``--force``, are decided by an up-front ``docker inspect``.

Related Modules:
    - :mod:`devspine.lifecycle.protocol` — the interface implemented here
    - :mod:`devspine.reconcile.classifier` — consumes the error kinds

Tags:
    container, docker, lifecycle, subprocess
"""

from __future__ import annotations

import asyncio
import json
import shutil
import subprocess
from typing import Any

from devspine.core.errors import (
    AlreadyInDesiredStateError,
    DockerNotFoundError,
    ErrorCategory,
    ErrorContext,
    LifecycleError,
    ResourceInUseError,
    ResourceNotFoundError,
    RuntimeApiError,
)
from devspine.core.logging import get_logger
from devspine.core.result import Err, Ok, Result, try_result

logger = get_logger(__name__)

_NOT_FOUND_MARKERS = ("no such container", "no such image", "no such object")
_IN_USE_MARKERS = ("conflict", "is being used", "cannot remove a running container")
_ACTIVE_STATES = frozenset({"running", "restarting", "paused"})


class DockerLifecycleClient:
    """Lifecycle client for the local Docker daemon.

    Parameters
    ----------
    docker_binary
        Name or path of the docker CLI (resolved on PATH).
    command_timeout
        Upper bound in seconds on any single docker subprocess call. A
        ``stop`` call gets its own grace period added on top.

    Example::

        client = DockerLifecycleClient()
        result = await client.stop("web-1", timeout_seconds=10)
    """

    def __init__(self, docker_binary: str = "docker", command_timeout: int = 60) -> None:
        self.command_timeout = command_timeout
        self._docker_cmd = self._find_docker(docker_binary)

    # ------------------------------------------------------------------
    # Docker CLI discovery
    # ------------------------------------------------------------------

    @staticmethod
    def _find_docker(docker_binary: str) -> str:
        """Find the docker CLI binary."""
        docker = shutil.which(docker_binary)
        if docker is None:
            raise DockerNotFoundError(
                f"Docker CLI {docker_binary!r} not found on PATH. Install Docker or add it to PATH.\n"
                "  - Linux:   https://docs.docker.com/engine/install/\n"
                "  - macOS:   https://docs.docker.com/desktop/install/mac-install/\n"
                "  - Windows: https://docs.docker.com/desktop/install/windows-install/"
            )
        return docker

    @staticmethod
    def is_docker_available(docker_binary: str = "docker") -> bool:
        """Check if Docker is installed and the daemon is running."""
        docker = shutil.which(docker_binary)
        if docker is None:
            return False
        try:
            result = subprocess.run(
                [docker, "info"],
                capture_output=True,
                timeout=10,
            )
            return result.returncode == 0
        except (subprocess.TimeoutExpired, OSError):
            return False

    # ------------------------------------------------------------------
    # LifecycleClient
    # ------------------------------------------------------------------

    async def stop(self, identifier: str, timeout_seconds: int) -> Result[None]:
        match await self._container_running(identifier):
            case Err() as failed:
                return failed
            case Ok(False):
                return Err(AlreadyInDesiredStateError("already stopped", identifier=identifier))

        match await self._docker(
            ["stop", "--time", str(timeout_seconds), identifier],
            timeout=self.command_timeout + timeout_seconds,
        ):
            case Err() as failed:
                return failed
            case Ok(completed) if completed.returncode != 0:
                return Err(self._failure(identifier, "stop", completed))

        logger.info("container.stopped", container=identifier, timeout_seconds=timeout_seconds)
        return Ok(None)

    async def remove_container(self, identifier: str, force: bool) -> Result[None]:
        # `docker rm --force` exits 0 for a missing container; inspect reports NOT_FOUND.
        match await self._container_running(identifier):
            case Err() as failed:
                return failed
            case Ok(True) if not force:
                return Err(
                    ResourceInUseError(
                        f"resource in use: container {identifier!r} is running; "
                        "stop it first or use --force",
                        identifier=identifier,
                    )
                )

        args = ["rm", "--force", identifier] if force else ["rm", identifier]
        match await self._docker(args):
            case Err() as failed:
                return failed
            case Ok(completed) if completed.returncode != 0:
                return Err(self._failure(identifier, "rm", completed))

        logger.info("container.removed", container=identifier, force=force)
        return Ok(None)

    async def remove_image(self, identifier: str, force: bool) -> Result[None]:
        if force:
            # Same for `docker rmi --force` on recent CLIs.
            match await self._docker(
                ["image", "inspect", "--format", "{{.Id}}", identifier]
            ):
                case Err() as failed:
                    return failed
                case Ok(completed) if completed.returncode != 0:
                    return Err(self._failure(identifier, "inspect", completed))

        args = ["rmi", "--force", identifier] if force else ["rmi", identifier]
        match await self._docker(args):
            case Err() as failed:
                return failed
            case Ok(completed) if completed.returncode != 0:
                return Err(self._failure(identifier, "rmi", completed))

        logger.info("image.removed", image=identifier, force=force)
        return Ok(None)

    # ------------------------------------------------------------------
    # Inspection
    # ------------------------------------------------------------------

    def list_containers(self, all_containers: bool = True) -> list[dict[str, Any]]:
        """List containers as dicts decoded from ``docker ps --format '{{json .}}'``.

        Raises
        ------
        RuntimeApiError
            If the daemon cannot be reached or ``docker ps`` fails.
        """
        args = ["ps", "--format", "{{json .}}"]
        if all_containers:
            args.insert(1, "--all")

        completed = self._run_docker(args).unwrap()
        if completed.returncode != 0:
            raise self._failure("", "ps", completed)

        containers = []
        for line in completed.stdout.strip().splitlines():
            if not line.strip():
                continue
            match try_result(lambda: json.loads(line)):
                case Ok(row):
                    containers.append(row)
                case Err(error):
                    logger.warning("docker.ps.unparseable", line=line, error=str(error))
        return containers

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    async def _container_running(self, identifier: str) -> Result[bool]:
        """Report whether a container is running; NOT_FOUND if it doesn't exist."""
        match await self._docker(
            ["inspect", "--type", "container", "--format", "{{.State.Running}}", identifier]
        ):
            case Err() as failed:
                return failed
            case Ok(completed) if completed.returncode != 0:
                return Err(self._failure(identifier, "inspect", completed))
            case Ok(completed):
                return Ok(completed.stdout.strip().lower() == "true")

    async def _docker(
        self, args: list[str], timeout: int | None = None
    ) -> Result[subprocess.CompletedProcess[str]]:
        return await asyncio.to_thread(self._run_docker, args, timeout)

    def _run_docker(
        self,
        args: list[str],
        timeout: int | None = None,
    ) -> Result[subprocess.CompletedProcess[str]]:
        """Run a docker CLI command.

        Any exit code is ``Ok``; only failures to run the command at all
        (timeout, missing binary, permission) are ``Err``.
        """
        timeout = timeout or self.command_timeout
        cmd = [self._docker_cmd, *args]
        logger.debug("docker.exec", cmd=" ".join(cmd))
        try:
            return Ok(
                subprocess.run(
                    cmd,
                    capture_output=True,
                    text=True,
                    timeout=timeout,
                )
            )
        except subprocess.TimeoutExpired as exc:
            return Err(
                RuntimeApiError(
                    f"docker {args[0]} timed out after {timeout}s",
                    identifier=args[-1],
                    category=ErrorCategory.NETWORK,
                    context=ErrorContext(command=" ".join(args)),
                    cause=exc,
                )
            )
        except OSError as exc:
            return Err(
                RuntimeApiError(
                    f"could not run docker {args[0]}: {exc}",
                    identifier=args[-1],
                    category=ErrorCategory.NETWORK,
                    context=ErrorContext(command=" ".join(args)),
                    cause=exc,
                )
            )

    @staticmethod
    def _failure(
        identifier: str,
        verb: str,
        completed: subprocess.CompletedProcess[str],
    ) -> LifecycleError:
        """Map a non-zero docker exit to a typed lifecycle error."""
        stderr = (completed.stderr or "").strip()
        lowered = stderr.lower()
        context = ErrorContext(command=f"docker {verb}", exit_code=completed.returncode)

        if any(marker in lowered for marker in _NOT_FOUND_MARKERS):
            return ResourceNotFoundError(
                f"resource not found: {stderr}" if stderr else "resource not found",
                identifier=identifier or None,
                context=context,
            )
        if verb in ("rm", "rmi") and any(marker in lowered for marker in _IN_USE_MARKERS):
            return ResourceInUseError(
                f"resource in use: {stderr}",
                identifier=identifier or None,
                context=context,
            )
        return RuntimeApiError(
            f"docker {verb} failed (exit {completed.returncode}): {stderr}",
            identifier=identifier or None,
            context=context,
        )


def container_names(row: dict[str, Any]) -> list[str]:
    """Names from a ``docker ps`` row (comma separated, maybe slash-prefixed)."""
    names = str(row.get("Names", "")).split(",")
    return [name.strip().lstrip("/") for name in names if name.strip()]


def prunable_containers(
    rows: list[dict[str, Any]], name_filter: str | None = None
) -> list[dict[str, Any]]:
    """Stopped containers from ``docker ps --all`` rows.

    A container qualifies when its ``State`` is not running, restarting or
    paused and, if ``name_filter`` is given, one of its names starts with it.
    """
    selected = []
    for row in rows:
        if str(row.get("State", "")).lower() in _ACTIVE_STATES:
            continue
        if name_filter and not any(n.startswith(name_filter) for n in container_names(row)):
            continue
        selected.append(row)
    return selected


__all__ = [
    "DockerLifecycleClient",
    "DockerNotFoundError",
    "container_names",
    "prunable_containers",
]
