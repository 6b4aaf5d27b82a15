"""
The do decorator for pureio.

This module provides the @do decorator that turns generator functions into
functions returning EffectNodes, giving do-notation over FlatMap.
"""

from __future__ import annotations

import inspect
from collections.abc import Callable, Generator
from functools import update_wrapper
from typing import Any, Generic, ParamSpec, TypeVar

from pureio.node import Done, EffectNode, FlatMap, suspend

P = ParamSpec("P")
T = TypeVar("T")

EffectGenerator = Generator[EffectNode[Any], Any, T]


def _resume(gen: Generator[Any, Any, T], value: Any) -> EffectNode[T]:
    try:
        yielded = gen.send(value)
    except StopIteration as stop_exc:
        return Done(stop_exc.value)
    if not isinstance(yielded, EffectNode):
        gen.close()
        raise TypeError(
            f"@do generators must yield EffectNode values; got {type(yielded).__name__}"
        )
    return FlatMap(yielded, lambda sent: _resume(gen, sent))


def _start(produced: Any) -> EffectNode[Any]:
    if inspect.isgenerator(produced):
        return _resume(produced, None)
    if isinstance(produced, EffectNode):
        return produced
    return Done(produced)


class DoFunction(Generic[P, T]):
    """Callable wrapper produced by @do."""

    def __init__(self, func: Callable[P, EffectGenerator[T]]) -> None:
        self.original_func = func
        update_wrapper(self, func)

    def __call__(self, *args: P.args, **kwargs: P.kwargs) -> EffectNode[T]:
        func = self.original_func
        return suspend(lambda: _start(func(*args, **kwargs)))

    def __repr__(self) -> str:
        return f"<do {self.original_func.__qualname__}>"


def do(func: Callable[P, EffectGenerator[T]]) -> DoFunction[P, T]:
    """
    Decorator that converts a generator function into an EffectNode factory.

    Calling the decorated function builds a node and runs nothing. The
    generator itself is created when the interpreter reaches that node, so
    the same node can be interpreted several times. Every yielded node is
    bound with FlatMap and the value is sent back into the generator; the
    generator's return value becomes the node's result.

    ERROR HANDLING WARNING:
    Failures are not thrown back into the generator. A try/except around a
    yield will NOT catch a failing effect. Use ``recover`` or ``attempt``:

        @do
        def program(console):
            outcome = yield read_line(console).attempt()
            if outcome.is_err():
                return "no input"
            return outcome.unwrap()

    Usage:
        @do
        def greet(console) -> EffectGenerator[str]:
            yield print_line(console, "Name?")
            name = yield read_line(console)
            yield print_line(console, f"Hello, {name}")
            return name
    """

    return DoFunction(func)


__all__ = ["DoFunction", "EffectGenerator", "do"]
