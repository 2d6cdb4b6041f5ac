"""Tests for ghr.core.result module."""

import pytest

from ghr.core.result import Err, Ok, Result


class TestOk:
    def test_create_ok(self) -> None:
        result = Ok("v1.2.0")
        assert result.value == "v1.2.0"

    def test_ok_repr(self) -> None:
        assert repr(Ok("tag")) == "Ok('tag')"

    def test_ok_frozen(self) -> None:
        result = Ok(1)
        with pytest.raises(AttributeError):
            result.value = 2  # type: ignore[misc]


class TestErr:
    def test_create_err(self) -> None:
        assert Err("boom").error == "boom"

    def test_err_repr(self) -> None:
        assert repr(Err("boom")) == "Err('boom')"

    def test_ok_and_err_never_equal(self) -> None:
        assert Ok("x") != Err("x")


class TestPatternMatching:
    """Results are consumed with match statements throughout the pipeline."""

    def test_match_ok(self) -> None:
        result: Result[int, str] = Ok(3)
        match result:
            case Ok(value):
                assert value == 3
            case Err(_):
                pytest.fail("expected Ok")

    def test_match_err(self) -> None:
        result: Result[int, str] = Err("nope")
        match result:
            case Ok(_):
                pytest.fail("expected Err")
            case Err(error):
                assert error == "nope"
