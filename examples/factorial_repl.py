"""Factorial REPL built from pureio effects.

Reads a number per line, prints its factorial, and stops at ``q`` or at the
end of input. The factorial itself is computed with a Ref and foreach_m, so
the loop is an effect graph rather than Python recursion.

Run with: python -m pureio run --program examples.factorial_repl:main
"""

from __future__ import annotations

from pureio import (
    Console,
    EffectGenerator,
    EffectNode,
    do,
    do_while,
    foreach_m,
    parse_number,
    print_line,
    read_line,
    ref,
    unit,
)

HELP_TEXT = "\n".join(
    [
        "The Amazing Factorial REPL",
        "Enter a non-negative integer to see its factorial, or q to quit.",
    ]
)


def factorial(n: int) -> EffectNode[int]:
    return ref(1).flat_map(
        lambda acc: foreach_m(range(1, n + 1), lambda i: acc.modify(lambda x: x * i)).then(
            acc.get()
        )
    )


def main(console: Console) -> EffectNode[None]:
    @do
    def step() -> EffectGenerator[bool]:
        line = yield read_line(console).attempt()
        if line.is_err():
            return False
        text = line.unwrap().strip()
        if text == "q":
            return False
        number = yield parse_number(text).attempt()
        if number.is_err() or not isinstance(number.unwrap(), int) or number.unwrap() < 0:
            yield print_line(console, f"Not a non-negative integer: {text!r}")
            return True
        result = yield factorial(number.unwrap())
        yield print_line(console, f"factorial: {result}")
        return True

    return print_line(console, HELP_TEXT).then(do_while(step(), unit))


__all__ = ["factorial", "main"]
