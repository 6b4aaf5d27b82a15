"""
EffectNode data model for pureio.

An ``EffectNode`` is an immutable description of a deferred computation. It is
one of a closed set of variants:

- ``Done``: a value that is already available.
- ``Delay``: one suspended external action (a zero-argument thunk).
- ``FlatMap``: run ``source`` and feed its value to ``continuation``.
- ``Recover``: run ``source``; if it fails, hand the error to ``handler``.

Building nodes never runs anything. Only ``pureio.interpreter`` invokes thunks
and continuations.
"""

from __future__ import annotations

from abc import ABC
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Generic, NoReturn, TypeVar

if TYPE_CHECKING:
    from pureio._vendor import Result

T = TypeVar("T")
U = TypeVar("U")
V = TypeVar("V")


class EffectNode(ABC, Generic[T]):
    """Runtime base class for every effect description."""

    __slots__ = ()

    def map(self, f: Callable[[T], U]) -> EffectNode[U]:
        """Map a function over this node's result."""

        if not callable(f):
            raise TypeError("mapper must be callable")
        return FlatMap(self, lambda value: Done(f(value)))

    def flat_map(self, f: Callable[[T], EffectNode[U]]) -> EffectNode[U]:
        """Monadic bind operation."""

        if not callable(f):
            raise TypeError("binder must be callable returning an EffectNode")
        return FlatMap(self, f)

    def then(self, other: EffectNode[U]) -> EffectNode[U]:
        """Run this node, discard its value, then run ``other``."""

        if not isinstance(other, EffectNode):
            raise TypeError(f"then expects an EffectNode, got {type(other).__name__}")
        return FlatMap(self, lambda _: other)

    def skip(self) -> EffectNode[None]:
        """Run this node and discard its value."""

        return FlatMap(self, _to_unit)

    def as_(self, value: U) -> EffectNode[U]:
        """Run this node and replace its value with ``value``."""

        return FlatMap(self, lambda _: Done(value))

    def recover(self, handler: Callable[[Exception], EffectNode[T]]) -> EffectNode[T]:
        """Run this node; on failure continue with ``handler(error)``."""

        if not callable(handler):
            raise TypeError("recovery handler must be callable returning an EffectNode")
        return Recover(self, handler)

    def attempt(self) -> EffectNode[Result[T]]:
        """Run this node and capture its outcome as ``Ok``/``Err``."""

        from pureio._vendor import Err, Ok

        return Recover(
            FlatMap(self, lambda value: Done(Ok(value))),
            lambda error: Done(Err(error)),
        )

    def __pow__(self, other: EffectNode[U]) -> EffectNode[tuple[T, U]]:
        """Product: run both nodes left to right and pair their values."""

        if not isinstance(other, EffectNode):
            return NotImplemented
        return FlatMap(self, lambda a: FlatMap(other, lambda b: Done((a, b))))


@dataclass(frozen=True, eq=False, repr=False)
class Done(EffectNode[T]):
    """A completed pure result."""

    value: T

    def __repr__(self) -> str:
        return f"Done({self.value!r})"


@dataclass(frozen=True, eq=False, repr=False)
class Delay(EffectNode[T]):
    """A suspended external action; only the interpreter invokes ``thunk``."""

    thunk: Callable[[], T]
    label: str | None = None

    def __post_init__(self) -> None:
        if not callable(self.thunk):
            raise TypeError("Delay thunk must be callable")

    def __repr__(self) -> str:
        return f"Delay({self.label or _callable_name(self.thunk)})"


@dataclass(frozen=True, eq=False, repr=False)
class FlatMap(EffectNode[T]):
    """Run ``source`` then continue with ``continuation(value)``."""

    source: EffectNode[Any]
    continuation: Callable[[Any], EffectNode[T]]

    def __repr__(self) -> str:
        # Shallow on purpose: graphs can be arbitrarily deep.
        return (
            f"FlatMap({type(self.source).__name__}, "
            f"{_callable_name(self.continuation)})"
        )


@dataclass(frozen=True, eq=False, repr=False)
class Recover(EffectNode[T]):
    """Run ``source``; if it fails, continue with ``handler(error)``."""

    source: EffectNode[T]
    handler: Callable[[Exception], EffectNode[T]]

    def __repr__(self) -> str:
        return (
            f"Recover({type(self.source).__name__}, "
            f"{_callable_name(self.handler)})"
        )


def _to_unit(_: Any) -> EffectNode[None]:
    return UNIT


def _callable_name(func: Callable[..., Any]) -> str:
    return getattr(func, "__qualname__", None) or type(func).__name__


UNIT: Done[None] = Done(None)


def unit(value: T) -> EffectNode[T]:
    """Lift a pure value into an EffectNode."""

    return Done(value)


def pure(value: T) -> EffectNode[T]:
    return Done(value)


def delay(thunk: Callable[[], T], label: str | None = None) -> EffectNode[T]:
    """Defer an external action until interpretation."""

    return Delay(thunk, label)


def suspend(factory: Callable[[], EffectNode[T]]) -> EffectNode[T]:
    """
    Defer building a node until the interpreter reaches it.

    No external effect is performed; the factory is invoked as an ordinary
    continuation. Looping combinators use this to build their next iteration
    lazily instead of recursing at construction time.
    """

    if not callable(factory):
        raise TypeError("suspend expects a callable returning an EffectNode")
    return FlatMap(UNIT, lambda _: factory())


def fail(error: Exception, label: str | None = None) -> EffectNode[NoReturn]:
    """A node whose execution fails with ``error``."""

    if not isinstance(error, Exception):
        raise TypeError(f"fail expects an Exception instance, got {type(error).__name__}")

    def raise_error() -> NoReturn:
        raise error

    return Delay(raise_error, label or f"fail({type(error).__name__})")


__all__ = [
    "Delay",
    "Done",
    "EffectNode",
    "FlatMap",
    "Recover",
    "UNIT",
    "delay",
    "fail",
    "pure",
    "suspend",
    "unit",
]
