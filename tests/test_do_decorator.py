from __future__ import annotations

import pytest

from pureio import (
    DoFunction,
    EffectGenerator,
    EffectNode,
    ScriptedConsole,
    do,
    fail,
    print_line,
    read_line,
    ref,
    run,
    unit,
)


def test_do_function_is_lazy():
    started: list[str] = []

    @do
    def program() -> EffectGenerator[int]:
        started.append("body")
        value = yield unit(1)
        return value + 1

    node = program()
    assert isinstance(node, EffectNode)
    assert started == []
    assert run(node) == 2
    assert started == ["body"]


def test_do_preserves_metadata():
    @do
    def named(x: int) -> EffectGenerator[int]:
        """Docstring kept."""
        return (yield unit(x))

    assert isinstance(named, DoFunction)
    assert named.__name__ == "named"
    assert named.__doc__ == "Docstring kept."
    assert "named" in repr(named)


def test_do_binds_yielded_values(console: ScriptedConsole):
    console.feed("Ada")

    @do
    def greet() -> EffectGenerator[str]:
        yield print_line(console, "Name?")
        name = yield read_line(console)
        yield print_line(console, f"Hello, {name}")
        return name

    assert run(greet()) == "Ada"
    assert console.written == ["Name?", "Hello, Ada"]


def test_same_node_runs_fresh_generator_each_time():
    @do
    def counter() -> EffectGenerator[int]:
        cell = yield ref(0)
        yield cell.modify(lambda x: x + 1)
        return (yield cell.get())

    node = counter()
    assert run(node) == 1
    assert run(node) == 1


def test_do_with_arguments():
    @do
    def add(a: int, b: int = 0) -> EffectGenerator[int]:
        x = yield unit(a)
        y = yield unit(b)
        return x + y

    assert run(add(2, b=3)) == 5


def test_non_generator_function_result_is_lifted():
    @do
    def plain() -> int:  # type: ignore[misc]
        return 9

    @do
    def returns_node() -> EffectNode[int]:  # type: ignore[misc]
        return unit(4)

    assert run(plain()) == 9
    assert run(returns_node()) == 4


def test_yielding_non_node_fails():
    @do
    def bad() -> EffectGenerator[int]:
        yield 5  # type: ignore[misc]
        return 0

    with pytest.raises(TypeError, match="must yield EffectNode"):
        run(bad())


def test_failure_stops_generator():
    reached: list[str] = []

    @do
    def program() -> EffectGenerator[None]:
        yield fail(ValueError("stop"))
        reached.append("after")

    with pytest.raises(ValueError):
        run(program())
    assert reached == []


def test_attempt_inside_generator():
    @do
    def program() -> EffectGenerator[str]:
        outcome = yield fail(KeyError("missing")).attempt()
        if outcome.is_err():
            return "handled"
        return "unexpected"

    assert run(program()) == "handled"


def test_nested_do_functions():
    @do
    def inner(x: int) -> EffectGenerator[int]:
        return (yield unit(x * 2))

    @do
    def outer() -> EffectGenerator[int]:
        a = yield inner(1)
        b = yield inner(a)
        return a + b

    assert run(outer()) == 6
