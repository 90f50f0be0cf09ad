"""Tests for devspine.core.result module."""

import pytest

from devspine.core.errors import LifecycleError, LifecycleErrorKind, ResourceNotFoundError
from devspine.core.result import Err, Ok, try_result


class TestOk:
    def test_unwrap(self):
        assert Ok(42).unwrap() == 42

    def test_equality(self):
        assert Ok(None) == Ok(None)
        assert Ok(1) != Ok(2)

    def test_frozen(self):
        with pytest.raises(AttributeError):
            Ok(1).value = 2


class TestErr:
    def test_unwrap_raises_original(self):
        error = ValueError("bad")
        with pytest.raises(ValueError) as exc_info:
            Err(error).unwrap()
        assert exc_info.value is error

    def test_never_equal_to_ok(self):
        assert Err(ValueError("bad")) != Ok(None)


class TestPatternMatching:
    def test_match_ok_and_err(self):
        def describe(result):
            match result:
                case Ok():
                    return "ok"
                case Err(error):
                    return f"err: {error}"

        assert describe(Ok(None)) == "ok"
        assert describe(Err(ResourceNotFoundError())) == "err: resource not found"

    def test_match_on_error_kind(self):
        def absent(result):
            match result:
                case Err(LifecycleError(kind=LifecycleErrorKind.NOT_FOUND)):
                    return True
            return False

        assert absent(Err(ResourceNotFoundError(identifier="web")))
        assert not absent(Err(LifecycleError("boom")))
        assert not absent(Ok(None))


class TestTryResult:
    def test_success(self):
        assert try_result(lambda: int("3")) == Ok(3)

    def test_failure(self):
        result = try_result(lambda: int("x"))
        assert isinstance(result, Err)
        assert isinstance(result.error, ValueError)
