"""
Utility functions for the pureio library.
"""

from __future__ import annotations

import os
from typing import Any

TRUTHY = ("1", "true", "yes")


def env_flag(name: str) -> bool:
    return os.environ.get(name, "").strip().lower() in TRUTHY


def env_int(name: str) -> int | None:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


def debug_steps_enabled() -> bool:
    """Environment variable PUREIO_DEBUG turns on per-step trace logging."""

    return env_flag("PUREIO_DEBUG")


def default_max_stack_depth() -> int | None:
    """Continuation stack limit from PUREIO_MAX_STACK_DEPTH (unbounded if unset)."""

    return env_int("PUREIO_MAX_STACK_DEPTH")


def describe_node(node: Any, max_length: int = 80) -> str:
    """Short, non-recursive description of a node for log lines."""

    text = repr(node)
    if len(text) > max_length:
        return text[: max_length - 3] + "..."
    return text


__all__ = [
    "debug_steps_enabled",
    "default_max_stack_depth",
    "describe_node",
    "env_flag",
    "env_int",
]
