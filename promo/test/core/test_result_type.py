"""Tests for promo.core.result."""

import pytest

from promo.core.result import Err, Ok, Result


class TestOk:
    def test_unwrap(self) -> None:
        assert Ok(42).unwrap() == 42

    def test_frozen(self) -> None:
        result = Ok(42)
        with pytest.raises(AttributeError):
            result.value = 0  # type: ignore[misc]


class TestErr:
    def test_unwrap_raises(self) -> None:
        with pytest.raises(ValueError, match="called unwrap on Err"):
            Err("boom").unwrap()

    def test_match(self) -> None:
        result: Result[int, str] = Err("boom")
        match result:
            case Ok(_):
                pytest.fail("expected Err")
            case Err(error):
                assert error == "boom"

    def test_repr(self) -> None:
        assert repr(Err("x")) == "Err('x')"
        assert repr(Ok(1)) == "Ok(1)"
