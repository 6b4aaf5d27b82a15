"""Ref: an effect-described mutable cell.

Usage:
    from pureio import ref, run

    program = ref(1).flat_map(
        lambda cell: cell.modify(lambda x: x * 2).then(cell.get())
    )
    run(program)  # 2

A ``Ref`` is only allocated, read and written by interpreting the nodes
returned here; the cell's value is never handed out directly.

The interpreter is single threaded, so ``modify`` needs no lock. An
interpreter that runs graphs concurrently would have to synchronize Ref
access externally.
"""

from __future__ import annotations

import itertools
from collections.abc import Callable
from typing import Generic, TypeVar

from pureio.node import Delay, EffectNode

T = TypeVar("T")

_ref_id_counter = itertools.count(1)


class Ref(Generic[T]):
    """Handle to a mutable cell; every access is an EffectNode."""

    __slots__ = ("_value", "ref_id")

    def __init__(self, initial: T) -> None:
        self._value = initial
        self.ref_id = next(_ref_id_counter)

    def get(self) -> EffectNode[T]:
        """Read the current value."""

        return Delay(self._read, f"Ref#{self.ref_id}.get")

    def set(self, value: T) -> EffectNode[None]:
        """Overwrite the current value."""

        def write() -> None:
            self._value = value

        return Delay(write, f"Ref#{self.ref_id}.set")

    def modify(self, f: Callable[[T], T]) -> EffectNode[T]:
        """Read, apply ``f``, write back and return the new value."""

        if not callable(f):
            raise TypeError("Ref.modify expects a callable")

        def update() -> T:
            new_value = f(self._value)
            self._value = new_value
            return new_value

        return Delay(update, f"Ref#{self.ref_id}.modify")

    def _read(self) -> T:
        return self._value

    def __repr__(self) -> str:
        return f"Ref#{self.ref_id}"


def ref(initial: T) -> EffectNode[Ref[T]]:
    """Allocate a fresh cell seeded with ``initial`` when interpreted."""

    return Delay(lambda: Ref(initial), "Ref.new")


__all__ = ["Ref", "ref"]
