from __future__ import annotations

from pureio import (
    Console,
    EffectNode,
    delay,
    fail,
    print_line,
    read_line,
    replicate_m,
    unit,
)

sample_program: EffectNode[int] = unit(5)

unit_program: EffectNode[None] = unit(None)

failing_program: EffectNode[int] = unit(1).then(fail(ValueError("bad input")))

not_a_program = 42


def make_program() -> EffectNode[str]:
    return unit("made")


def echo_program(console: Console) -> EffectNode[str]:
    return read_line(console).flat_map(
        lambda line: print_line(console, f"echo: {line}").as_(line)
    )


def deep_program() -> EffectNode[int]:
    return replicate_m(50, unit(1)).map(len)


def object_program() -> EffectNode[object]:
    return unit(object())


def _interrupt() -> None:
    raise KeyboardInterrupt


interrupted_program: EffectNode[None] = delay(_interrupt, "Interrupt")


def partial_failure_program(console: Console) -> EffectNode[None]:
    return print_line(console, "before failure").then(fail(RuntimeError("boom")))


def circular_program() -> EffectNode[list[object]]:
    items: list[object] = []
    items.append(items)
    return unit(items)
