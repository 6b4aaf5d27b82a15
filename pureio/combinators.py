"""
Pure combinators over EffectNode values.

Nothing in this module performs an effect. Every loop is expressed as graph
construction: the next iteration is built inside a continuation, so the
interpreter's heap-allocated continuation stack carries the growth and the
native stack never does.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator
from typing import Any, NoReturn, TypeVar

from pureio._vendor import Result
from pureio.node import UNIT, Done, EffectNode, FlatMap, suspend

A = TypeVar("A")
B = TypeVar("B")
C = TypeVar("C")


def _require_node(node: Any, where: str) -> None:
    if not isinstance(node, EffectNode):
        raise TypeError(f"{where} expects EffectNode values, got {type(node).__name__}")


def _require_count(n: Any, where: str) -> None:
    if not isinstance(n, int):
        raise TypeError(f"{where} count must be an int, got {type(n).__name__}")


def flat_map(node: EffectNode[A], f: Callable[[A], EffectNode[B]]) -> EffectNode[B]:
    return node.flat_map(f)


def map_(node: EffectNode[A], f: Callable[[A], B]) -> EffectNode[B]:
    return node.map(f)


def map2(
    na: EffectNode[A], nb: EffectNode[B], f: Callable[[A, B], C]
) -> EffectNode[C]:
    """Run ``na`` then ``nb`` and combine their values with ``f``."""

    _require_node(na, "map2")
    _require_node(nb, "map2")
    return FlatMap(na, lambda a: FlatMap(nb, lambda b: Done(f(a, b))))


def product(na: EffectNode[A], nb: EffectNode[B]) -> EffectNode[tuple[A, B]]:
    return map2(na, nb, lambda a, b: (a, b))


def skip(node: EffectNode[Any]) -> EffectNode[None]:
    return node.skip()


def as_(node: EffectNode[Any], value: B) -> EffectNode[B]:
    return node.as_(value)


def sequence_(*nodes: EffectNode[Any]) -> EffectNode[None]:
    """Run ``nodes`` in order and discard their results."""

    for node in nodes:
        _require_node(node, "sequence_")
    return foreach_m(nodes, lambda node: node)


def combine(*nodes: EffectNode[Any]) -> EffectNode[None]:
    """
    Monoid-style combination of side-effecting nodes.

    The first failure wins: the remaining nodes are not run.
    """

    return sequence_(*nodes)


def sequence(nodes: Iterable[EffectNode[A]]) -> EffectNode[list[A]]:
    """Run ``nodes`` in order and collect their results."""

    items = list(nodes)
    for node in items:
        _require_node(node, "sequence")
    return traverse(items, lambda node: node)


def traverse(
    items: Iterable[A], f: Callable[[A], EffectNode[B]]
) -> EffectNode[list[B]]:
    """Apply ``f`` to every item and run the resulting nodes in order."""

    def start() -> EffectNode[list[B]]:
        results: list[B] = []

        def collect(acc: None, item: A) -> EffectNode[None]:
            return FlatMap(f(item), lambda value: _append(results, value))

        return FlatMap(fold_m(items, None, collect), lambda _: Done(results))

    return suspend(start)


def _append(results: list[Any], value: Any) -> EffectNode[None]:
    results.append(value)
    return UNIT


def replicate_m(n: int, node: EffectNode[A]) -> EffectNode[list[A]]:
    """
    Run ``node`` exactly ``n`` times and collect the results in order.

    ``n == 0`` yields an empty list without interpreting ``node``. A fresh
    result list is created per interpretation, so the returned graph can be
    run any number of times.
    """

    _require_node(node, "replicate_m")
    _require_count(n, "replicate_m")
    if n < 0:
        raise ValueError(f"replicate_m count must be >= 0, got {n}")

    def start() -> EffectNode[list[A]]:
        results: list[A] = []

        def step(value: A) -> EffectNode[list[A]]:
            results.append(value)
            return loop()

        def loop() -> EffectNode[list[A]]:
            if len(results) >= n:
                return Done(results)
            return FlatMap(node, step)

        return loop()

    return suspend(start)


def replicate_m_(n: int, node: EffectNode[Any]) -> EffectNode[None]:
    """Run ``node`` exactly ``n`` times, discarding the results."""

    _require_node(node, "replicate_m_")
    _require_count(n, "replicate_m_")
    if n < 0:
        raise ValueError(f"replicate_m_ count must be >= 0, got {n}")
    return fold_m_(range(n), None, lambda acc, _: node.skip())


def fold_m(
    elements: Iterable[A],
    initial: B,
    step: Callable[[B, A], EffectNode[B]],
) -> EffectNode[B]:
    """
    Fold ``elements`` left to right with an effectful ``step``.

    The iterable is opened when the interpreter reaches the fold, and the next
    element is pulled only after the previous step completed. Lazily produced
    iterables are therefore consumed one element at a time; a one-shot
    iterator can only be folded by a single run.
    """

    if not callable(step):
        raise TypeError("fold_m step must be callable returning an EffectNode")

    def go(iterator: Iterator[A], acc: B) -> EffectNode[B]:
        try:
            element = next(iterator)
        except StopIteration:
            return Done(acc)
        return FlatMap(step(acc, element), lambda next_acc: go(iterator, next_acc))

    return suspend(lambda: go(iter(elements), initial))


def fold_m_(
    elements: Iterable[A],
    initial: B,
    step: Callable[[B, A], EffectNode[B]],
) -> EffectNode[None]:
    return fold_m(elements, initial, step).skip()


def foreach_m(
    elements: Iterable[A], f: Callable[[A], EffectNode[Any]]
) -> EffectNode[None]:
    """Run ``f`` for every element in order, discarding the results."""

    return fold_m(elements, None, lambda _, element: f(element).skip())


def do_while(
    body: EffectNode[A], cond: Callable[[A], EffectNode[bool]]
) -> EffectNode[None]:
    """
    Run ``body``, then ``cond(result)``; repeat while it yields true.

    ``body`` always runs at least once.
    """

    _require_node(body, "do_while")

    def check(result: A) -> EffectNode[None]:
        return FlatMap(cond(result), lambda again: loop() if again else UNIT)

    def loop() -> EffectNode[None]:
        return FlatMap(body, check)

    return suspend(loop)


def while_m(cond: EffectNode[bool], body: EffectNode[Any]) -> EffectNode[None]:
    """Evaluate ``cond``; run ``body`` and repeat while it yields true."""

    _require_node(cond, "while_m")
    _require_node(body, "while_m")

    def loop() -> EffectNode[None]:
        return FlatMap(
            cond, lambda again: FlatMap(body, lambda _: loop()) if again else UNIT
        )

    return suspend(loop)


def forever(node: EffectNode[Any]) -> EffectNode[NoReturn]:
    """
    Repeat ``node`` indefinitely.

    The resulting node never completes normally; it ends only with a failure
    or when the process is interrupted.
    """

    _require_node(node, "forever")

    def loop() -> EffectNode[NoReturn]:
        return FlatMap(node, lambda _: loop())

    return suspend(loop)


def when(condition: bool, node: EffectNode[Any]) -> EffectNode[None]:
    """Run ``node`` only if ``condition`` holds."""

    _require_node(node, "when")
    return node.skip() if condition else UNIT


def unless(condition: bool, node: EffectNode[Any]) -> EffectNode[None]:
    return when(not condition, node)


def recover(
    node: EffectNode[A], handler: Callable[[Exception], EffectNode[A]]
) -> EffectNode[A]:
    return node.recover(handler)


def attempt(node: EffectNode[A]) -> EffectNode[Result[A]]:
    return node.attempt()


__all__ = [
    "as_",
    "attempt",
    "combine",
    "do_while",
    "flat_map",
    "fold_m",
    "fold_m_",
    "foreach_m",
    "forever",
    "map2",
    "map_",
    "product",
    "recover",
    "replicate_m",
    "replicate_m_",
    "sequence",
    "sequence_",
    "skip",
    "traverse",
    "unless",
    "when",
    "while_m",
]
