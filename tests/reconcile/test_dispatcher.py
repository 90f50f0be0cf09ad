"""Tests for ConcurrentDispatcher."""

import asyncio

import pytest

from devspine.core.errors import ResourceInUseError, ResourceNotFoundError, TaskExecutionError
from devspine.core.result import Ok
from devspine.lifecycle.stub import StubLifecycleClient
from devspine.reconcile.dispatcher import ConcurrentDispatcher
from devspine.reconcile.models import OperationConfig, OperationKind, OutcomeStatus


class GaugeClient:
    """Counts how many calls are in flight at once."""

    def __init__(self, delay: float = 0.01):
        self.delay = delay
        self.in_flight = 0
        self.peak = 0

    async def _work(self):
        self.in_flight += 1
        self.peak = max(self.peak, self.in_flight)
        await asyncio.sleep(self.delay)
        self.in_flight -= 1
        return Ok(None)

    async def stop(self, identifier, timeout_seconds):
        return await self._work()

    async def remove_container(self, identifier, force):
        return await self._work()

    async def remove_image(self, identifier, force):
        return await self._work()


class TestConcurrentDispatcher:
    def test_invalid_max_concurrency(self, stub_client):
        with pytest.raises(ValueError):
            ConcurrentDispatcher(stub_client, max_concurrency=0)

    @pytest.mark.asyncio
    async def test_outcomes_in_input_order(self):
        # Later identifiers finish first.
        client = StubLifecycleClient(delays={"a": 0.05, "b": 0.02, "c": 0.0})
        outcomes = await ConcurrentDispatcher(client).run(
            OperationKind.STOP, ["a", "b", "c"], OperationConfig(), batch_id="b1"
        )
        assert [o.identifier for o in outcomes] == ["a", "b", "c"]
        assert [o.index for o in outcomes] == [0, 1, 2]

    @pytest.mark.asyncio
    async def test_routes_operation_and_config(self, stub_client):
        dispatcher = ConcurrentDispatcher(stub_client)
        await dispatcher.run(
            OperationKind.STOP, ["a"], OperationConfig(timeout_seconds=3), batch_id="b"
        )
        await dispatcher.run(
            OperationKind.REMOVE_CONTAINER, ["b"], OperationConfig(force=True), batch_id="b"
        )
        await dispatcher.run(
            OperationKind.REMOVE_IMAGE, ["c"], OperationConfig(), batch_id="b"
        )
        assert stub_client.calls == [
            ("stop", "a", 3),
            ("remove_container", "b", True),
            ("remove_image", "c", False),
        ]

    @pytest.mark.asyncio
    async def test_units_run_concurrently_by_default(self):
        client = GaugeClient()
        await ConcurrentDispatcher(client).run(
            OperationKind.STOP, [f"c{i}" for i in range(10)], OperationConfig(), batch_id="b"
        )
        assert client.peak == 10

    @pytest.mark.asyncio
    async def test_max_concurrency_bounds_in_flight(self):
        client = GaugeClient()
        dispatcher = ConcurrentDispatcher(client, max_concurrency=3)
        outcomes = await dispatcher.run(
            OperationKind.STOP, [f"c{i}" for i in range(10)], OperationConfig(), batch_id="b"
        )
        assert client.peak == 3
        assert len(outcomes) == 10

    @pytest.mark.asyncio
    async def test_crash_is_isolated(self):
        client = StubLifecycleClient({"boom": RuntimeError("kaboom")})
        outcomes = await ConcurrentDispatcher(client).run(
            OperationKind.REMOVE_IMAGE, ["ok", "boom", "ok2"], OperationConfig(), batch_id="b"
        )
        statuses = [o.status for o in outcomes]
        assert statuses == [
            OutcomeStatus.SUCCEEDED,
            OutcomeStatus.FAILED,
            OutcomeStatus.SUCCEEDED,
        ]
        error = outcomes[1].error
        assert isinstance(error, TaskExecutionError)
        assert isinstance(error.cause, RuntimeError)

    @pytest.mark.asyncio
    async def test_non_result_return_is_a_crash(self):
        class BadClient(GaugeClient):
            async def stop(self, identifier, timeout_seconds):
                return "done"

        outcomes = await ConcurrentDispatcher(BadClient()).run(
            OperationKind.STOP, ["a"], OperationConfig(), batch_id="b"
        )
        assert isinstance(outcomes[0].error, TaskExecutionError)

    @pytest.mark.asyncio
    async def test_one_event_per_outcome(self, sink):
        client = StubLifecycleClient(
            {"a": None, "b": ResourceNotFoundError(), "c": ResourceInUseError()}
        )
        await ConcurrentDispatcher(client).run(
            OperationKind.REMOVE_CONTAINER,
            ["a", "b", "c"],
            OperationConfig(),
            batch_id="batch-1",
            sink=sink,
        )
        assert sorted(e.identifier for e in sink.events) == ["a", "b", "c"]
        assert {e.batch_id for e in sink.events} == {"batch-1"}
        assert [e.identifier for e in sink.by_status(OutcomeStatus.FAILED)] == ["c"]
        failed = sink.by_status(OutcomeStatus.FAILED)[0]
        assert failed.error_type == "ResourceInUseError"

    @pytest.mark.asyncio
    async def test_sink_failure_does_not_change_outcome(self, stub_client):
        def broken_sink(event):
            raise RuntimeError("sink down")

        outcomes = await ConcurrentDispatcher(stub_client).run(
            OperationKind.STOP, ["a", "b"], OperationConfig(), batch_id="b", sink=broken_sink
        )
        assert all(o.status is OutcomeStatus.SUCCEEDED for o in outcomes)

    @pytest.mark.asyncio
    async def test_cancellation_propagates(self):
        client = StubLifecycleClient(delays={"slow": 10.0})
        task = asyncio.create_task(
            ConcurrentDispatcher(client).run(
                OperationKind.STOP, ["slow"], OperationConfig(), batch_id="b"
            )
        )
        await asyncio.sleep(0.01)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task
