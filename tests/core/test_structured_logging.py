"""Tests for devspine.core.logging."""

import json

import pytest

from devspine.core.logging import LogContext, configure_logging, get_logger


class TestConfigureLogging:
    def test_json_output_goes_to_stderr(self, capsys):
        configure_logging(level="INFO", json_format=True, service="devspine-test")
        get_logger("tests").info("something.happened", count=3)

        captured = capsys.readouterr()
        assert captured.out == ""
        record = json.loads(captured.err.strip().splitlines()[-1])
        assert record["event"] == "something.happened"
        assert record["count"] == 3
        assert record["service.name"] == "devspine-test"
        assert record["log.level"] == "info"
        assert "@timestamp" in record

    def test_level_filters(self, capsys):
        configure_logging(level="WARNING", json_format=True)
        log = get_logger("tests")
        log.info("hidden")
        log.warning("shown")

        err = capsys.readouterr().err
        assert "hidden" not in err
        assert "shown" in err

    def test_unknown_level_rejected(self):
        with pytest.raises(ValueError):
            configure_logging(level="CHATTY")


class TestGetLogger:
    def test_module_logger_after_package_import(self, capsys):
        import devspine  # noqa: F401

        configure_logging(level="INFO", json_format=True)
        get_logger(__name__).info("named.event")

        record = json.loads(capsys.readouterr().err.strip().splitlines()[-1])
        assert record["event"] == "named.event"
        assert record["logger"] == __name__

    def test_unconfigured_logger_does_not_raise(self):
        get_logger(__name__).debug("before.configure")

    def test_anonymous_logger(self, capsys):
        configure_logging(level="INFO", json_format=True)
        get_logger().info("anonymous.event")

        record = json.loads(capsys.readouterr().err.strip().splitlines()[-1])
        assert record["event"] == "anonymous.event"
        assert record["logger"] is None


class TestLogContext:
    def test_binds_and_unbinds(self, capsys):
        configure_logging(level="INFO", json_format=True)
        log = get_logger("tests")
        with LogContext(operation="stop", batch_id="b1"):
            log.info("inside")
        log.info("outside")

        lines = [json.loads(line) for line in capsys.readouterr().err.strip().splitlines()]
        inside, outside = lines[-2], lines[-1]
        assert inside["operation"] == "stop"
        assert inside["batch_id"] == "b1"
        assert "operation" not in outside

    def test_nested_contexts_restore_outer_values(self, capsys):
        configure_logging(level="INFO", json_format=True)
        log = get_logger("tests")
        with LogContext(operation="stop", batch_id="outer"):
            with LogContext(batch_id="inner"):
                log.info("nested")
            log.info("outer")

        lines = [json.loads(line) for line in capsys.readouterr().err.strip().splitlines()]
        nested, outer = lines[-2], lines[-1]
        assert nested["batch_id"] == "inner"
        assert nested["operation"] == "stop"
        assert outer["batch_id"] == "outer"

    @pytest.mark.asyncio
    async def test_async_context(self, capsys):
        configure_logging(level="INFO", json_format=True)
        async with LogContext(batch_id="b2"):
            get_logger("tests").info("inside")
        record = json.loads(capsys.readouterr().err.strip().splitlines()[-1])
        assert record["batch_id"] == "b2"
