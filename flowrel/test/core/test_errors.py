"""Tests for flowrel.core.errors module."""

from flowrel.core.errors import ErrorCode


def test_values_are_stable() -> None:
    assert ErrorCode.OK == 0
    assert ErrorCode.FAILURE == 1


def test_usable_as_exit_code() -> None:
    code: int = ErrorCode.FAILURE
    assert int(code) == 1
