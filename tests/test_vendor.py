from __future__ import annotations

import pytest

from pureio import Err, FrozenDict, Ok


def test_ok_accessors():
    result = Ok(3)
    assert result.is_ok()
    assert not result.is_err()
    assert result.ok() == 3
    assert result.err() is None
    assert result.unwrap() == 3
    assert result.unwrap_or(0) == 3
    assert result.map(lambda x: x + 1) == Ok(4)
    assert bool(result)
    with pytest.raises(RuntimeError):
        result.unwrap_err()


def test_err_accessors():
    error = ValueError("bad")
    result = Err(error)
    assert result.is_err()
    assert result.ok() is None
    assert result.err() is error
    assert result.unwrap_err() is error
    assert result.unwrap_or(0) == 0
    assert result.map(lambda x: x + 1) is result
    assert not result
    with pytest.raises(ValueError):
        result.unwrap()


def test_frozen_dict_is_immutable():
    mapping = FrozenDict(a=1)
    assert mapping["a"] == 1
    with pytest.raises(TypeError):
        mapping["a"] = 2  # type: ignore[index]
    assert hash(mapping) == hash(FrozenDict(a=1))
