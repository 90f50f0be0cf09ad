"""Tests for StubLifecycleClient."""

import pytest

from devspine.core.errors import (
    AlreadyInDesiredStateError,
    ResourceInUseError,
    ResourceNotFoundError,
    RuntimeApiError,
)
from devspine.core.result import Err, Ok
from devspine.lifecycle.protocol import LifecycleClient
from devspine.lifecycle.stub import StubLifecycleClient


class TestScripted:
    def test_satisfies_protocol(self, stub_client):
        assert isinstance(stub_client, LifecycleClient)

    @pytest.mark.asyncio
    async def test_default_is_ok(self, stub_client):
        assert await stub_client.stop("anything", 10) == Ok(None)

    @pytest.mark.asyncio
    async def test_lifecycle_error_is_returned(self):
        error = ResourceInUseError(identifier="c")
        client = StubLifecycleClient({"c": error})
        result = await client.remove_container("c", False)
        assert isinstance(result, Err)
        assert result.error is error

    @pytest.mark.asyncio
    async def test_other_exception_is_raised(self):
        client = StubLifecycleClient({"boom": RuntimeError("crash")})
        with pytest.raises(RuntimeError, match="crash"):
            await client.remove_image("boom", False)

    @pytest.mark.asyncio
    async def test_default_error(self):
        client = StubLifecycleClient(default=RuntimeApiError("daemon down"))
        result = await client.stop("x", 1)
        assert isinstance(result.error, RuntimeApiError)

    @pytest.mark.asyncio
    async def test_calls_recorded(self, stub_client):
        await stub_client.stop("a", 5)
        await stub_client.remove_container("b", True)
        await stub_client.remove_image("c", False)
        assert stub_client.calls == [
            ("stop", "a", 5),
            ("remove_container", "b", True),
            ("remove_image", "c", False),
        ]
        assert stub_client.call_count == 3


class TestStateful:
    @pytest.mark.asyncio
    async def test_stop_then_stop_again(self, runtime_client):
        assert await runtime_client.stop("web", 10) == Ok(None)
        again = await runtime_client.stop("web", 10)
        assert isinstance(again.error, AlreadyInDesiredStateError)
        assert runtime_client.containers["web"] is False

    @pytest.mark.asyncio
    async def test_stop_missing(self, runtime_client):
        result = await runtime_client.stop("ghost", 10)
        assert isinstance(result.error, ResourceNotFoundError)

    @pytest.mark.asyncio
    async def test_rm_running_needs_force(self, runtime_client):
        result = await runtime_client.remove_container("web", False)
        assert isinstance(result.error, ResourceInUseError)
        assert "web" in runtime_client.containers

        assert await runtime_client.remove_container("web", True) == Ok(None)
        assert "web" not in runtime_client.containers

    @pytest.mark.asyncio
    async def test_rm_stopped(self, runtime_client):
        assert await runtime_client.remove_container("db", False) == Ok(None)
        result = await runtime_client.remove_container("db", False)
        assert isinstance(result.error, ResourceNotFoundError)

    @pytest.mark.asyncio
    async def test_rmi(self, runtime_client):
        assert await runtime_client.remove_image("redis:7", False) == Ok(None)
        assert "redis:7" not in runtime_client.images
        result = await runtime_client.remove_image("redis:7", False)
        assert isinstance(result.error, ResourceNotFoundError)

    @pytest.mark.asyncio
    async def test_script_wins_over_state(self):
        client = StubLifecycleClient(
            {"web": RuntimeApiError("flaky")}, containers={"web": True}
        )
        result = await client.stop("web", 10)
        assert isinstance(result.error, RuntimeApiError)
        assert client.containers["web"] is True

    def test_list_containers(self, runtime_client):
        rows = runtime_client.list_containers(all_containers=True)
        assert [(row["Names"], row["State"]) for row in rows] == [
            ("web", "running"),
            ("worker", "running"),
            ("db", "exited"),
        ]
        running = runtime_client.list_containers(all_containers=False)
        assert [row["ID"] for row in running] == ["web", "worker"]
