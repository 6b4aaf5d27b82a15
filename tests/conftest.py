"""
Pytest configuration shared by the pureio tests.

Provides a scripted console, a default interpreter, and a fixture that lowers
the recursion limit so stack-safety tests fail loudly if any code path
recurses per FlatMap link.
"""

from __future__ import annotations

import sys
from collections.abc import Iterator

import pytest

from pureio import Interpreter, ScriptedConsole

# Head-room above the current depth for the interpreter loop, a thunk and a
# continuation; far below what a recursive evaluation of 100k links needs.
SHALLOW_STACK_HEADROOM = 120


def _current_depth() -> int:
    depth = 0
    frame = sys._getframe()
    while frame is not None:
        depth += 1
        frame = frame.f_back
    return depth


@pytest.fixture
def console() -> ScriptedConsole:
    return ScriptedConsole()


@pytest.fixture
def interpreter() -> Interpreter:
    return Interpreter(trace_steps=False)


@pytest.fixture
def shallow_stack() -> Iterator[int]:
    """Temporarily cap the native recursion limit close to the current depth."""
    original = sys.getrecursionlimit()
    limit = _current_depth() + SHALLOW_STACK_HEADROOM
    sys.setrecursionlimit(limit)
    try:
        yield limit
    finally:
        sys.setrecursionlimit(original)
