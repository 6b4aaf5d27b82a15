"""
Trampolined interpreter for EffectNode graphs.

This is the only place where thunks and continuations are invoked. The
interpreter is an explicit state machine: a current node plus a
heap-allocated continuation stack standing in for call frames.

Key properties:
- NO recursive calls: native stack usage does not depend on graph size
- Thunks run in the left-to-right depth-first order implied by FlatMap
- First failure wins: pending continuations are discarded, never invoked
- Single-threaded and synchronous; one run owns one graph traversal
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Generic, TypeVar

from pureio._vendor import Err, FrozenDict, Ok, Result
from pureio.errors import (
    ContinuationStackOverflowError,
    InterpreterInvariantError,
    SuspendedEffectFailure,
)
from pureio.node import Delay, Done, EffectNode, FlatMap, Recover, _callable_name
from pureio.utils import debug_steps_enabled, default_max_stack_depth, describe_node

T = TypeVar("T")

logger = logging.getLogger(__name__)


# ============================================
# Frames
# ============================================

@dataclass(frozen=True, eq=False)
class ContinuationFrame:
    """Work deferred by a FlatMap: feed the next value to ``continuation``."""

    continuation: Callable[[Any], EffectNode[Any]]


@dataclass(frozen=True, eq=False)
class RecoverFrame:
    """Boundary pushed by a Recover node; catches failures from inside it."""

    handler: Callable[[Exception], EffectNode[Any]]


Frame = ContinuationFrame | RecoverFrame


# ============================================
# Interpretation Stats
# ============================================

@dataclass
class InterpretationStats:
    """
    Statistics collected during interpretation.

    All updates are O(1) increments performed by the loop itself.
    """

    # Incremented once per iteration of the main loop
    total_steps: int = 0

    # Delay thunks executed successfully
    total_effects: int = 0

    # FlatMap continuations invoked
    total_continuations: int = 0

    # Failures caught by a Recover boundary
    total_recoveries: int = 0

    # High-water mark of the continuation stack
    max_stack_depth: int = 0

    # Frames dropped without being invoked because of a failure
    discarded_continuations: int = 0

    start_time_ns: int | None = None
    end_time_ns: int | None = None

    @property
    def duration_ns(self) -> int | None:
        if self.start_time_ns is not None and self.end_time_ns is not None:
            return self.end_time_ns - self.start_time_ns
        return None

    def to_dict(self) -> FrozenDict[str, int | None]:
        return FrozenDict(
            total_steps=self.total_steps,
            total_effects=self.total_effects,
            total_continuations=self.total_continuations,
            total_recoveries=self.total_recoveries,
            max_stack_depth=self.max_stack_depth,
            discarded_continuations=self.discarded_continuations,
            duration_ns=self.duration_ns,
        )


# ============================================
# Interpreter State
# ============================================

@dataclass
class InterpreterState:
    """
    Complete state of one run.

    Invariants:
    - ``current`` is always an EffectNode
    - the run completes only when ``current`` is Done and the stack is empty
    """

    current: EffectNode[Any]
    continuation_stack: list[Frame] = field(default_factory=list)
    stats: InterpretationStats = field(default_factory=InterpretationStats)

    def push_frame(self, frame: Frame) -> None:
        self.continuation_stack.append(frame)
        depth = len(self.continuation_stack)
        if depth > self.stats.max_stack_depth:
            self.stats.max_stack_depth = depth

    @property
    def stack_depth(self) -> int:
        return len(self.continuation_stack)


# ============================================
# Run Result
# ============================================

@dataclass(frozen=True)
class RunResult(Generic[T]):
    """
    Outcome of one interpreted run.

    ``result`` holds ``Ok(value)`` or ``Err(original_exception)``. When the run
    failed because a thunk or continuation raised, ``failure`` describes where.
    """

    result: Result[T]
    stats: InterpretationStats
    failure: SuspendedEffectFailure | None = None

    @property
    def value(self) -> T:
        """Get the successful value or raise the original exception."""
        if isinstance(self.result, Ok):
            return self.result.value
        raise self.result.error

    @property
    def error(self) -> Exception:
        if isinstance(self.result, Err):
            return self.result.error
        raise ValueError("Cannot access error on successful result")

    def is_ok(self) -> bool:
        return isinstance(self.result, Ok)

    def is_err(self) -> bool:
        return isinstance(self.result, Err)

    def unwrap(self) -> T:
        return self.value


# ============================================
# Interpreter
# ============================================

class Interpreter:
    """
    Runs EffectNode graphs with a trampoline.

    Configuration:
        max_stack_depth: Optional limit on the continuation stack. ``None``
            lets it grow on the heap without bound. Defaults to the
            PUREIO_MAX_STACK_DEPTH environment variable.
        trace_steps: Log every step at DEBUG level. Defaults to the
            PUREIO_DEBUG environment variable.

    An Interpreter keeps no per-run state and can be reused sequentially.
    """

    def __init__(
        self,
        *,
        max_stack_depth: int | None = None,
        trace_steps: bool | None = None,
    ) -> None:
        if max_stack_depth is None:
            max_stack_depth = default_max_stack_depth()
        if max_stack_depth is not None and max_stack_depth < 1:
            raise ValueError("max_stack_depth must be >= 1 or None")
        self._max_stack_depth = max_stack_depth
        self._trace_steps = debug_steps_enabled() if trace_steps is None else trace_steps

    @property
    def max_stack_depth(self) -> int | None:
        return self._max_stack_depth

    @property
    def trace_steps(self) -> bool:
        return self._trace_steps

    def run(self, node: EffectNode[T]) -> T:
        """Interpret ``node`` and return its value.

        A failing thunk or continuation is re-raised unchanged.
        """
        return self.run_result(node).value

    def run_result(self, node: EffectNode[T]) -> RunResult[T]:
        """Interpret ``node`` and report the outcome without raising."""
        if not isinstance(node, EffectNode):
            raise TypeError(f"Interpreter expects an EffectNode, got {type(node).__name__}")

        state = InterpreterState(
            current=node,
            stats=InterpretationStats(start_time_ns=time.perf_counter_ns()),
        )
        logger.debug("Run started: %s", describe_node(node))

        try:
            outcome = self._drive(state)
        except BaseException:
            # KeyboardInterrupt/SystemExit: drop pending work and re-raise
            state.stats.discarded_continuations += state.stack_depth
            state.continuation_stack.clear()
            logger.debug("Run interrupted after %d steps", state.stats.total_steps)
            raise
        finally:
            state.stats.end_time_ns = time.perf_counter_ns()

        if isinstance(outcome, Ok):
            logger.debug(
                "Run completed in %d steps (%d effects, max depth %d)",
                state.stats.total_steps,
                state.stats.total_effects,
                state.stats.max_stack_depth,
            )
            return RunResult(outcome, state.stats)

        failure = outcome.error if isinstance(outcome.error, SuspendedEffectFailure) else None
        if failure is not None:
            logger.debug("Run failed: %s", failure)
            return RunResult(Err(failure.cause), state.stats, failure)
        logger.debug("Run aborted by interpreter: %s", outcome.error)
        return RunResult(outcome, state.stats)

    # TRAMPOLINED LOOP
    def _drive(self, state: InterpreterState) -> Result[Any]:
        stats = state.stats
        stack = state.continuation_stack
        limit = self._max_stack_depth
        trace = self._trace_steps

        while True:
            stats.total_steps += 1
            current = state.current

            if trace:
                logger.debug(
                    "step %d depth=%d %s",
                    stats.total_steps,
                    len(stack),
                    describe_node(current),
                )

            if isinstance(current, Done):
                if not stack:
                    return Ok(current.value)
                frame = stack.pop()
                if isinstance(frame, RecoverFrame):
                    # Success leaves the recovered region untouched
                    continue
                stats.total_continuations += 1
                try:
                    next_node = frame.continuation(current.value)
                except Exception as exc:
                    failure = self._unwind(state, exc, _callable_name(frame.continuation))
                    if failure is not None:
                        return Err(failure)
                    continue
                if not isinstance(next_node, EffectNode):
                    exc = TypeError(
                        "continuation must return an EffectNode; got "
                        f"{type(next_node).__name__}"
                    )
                    failure = self._unwind(state, exc, _callable_name(frame.continuation))
                    if failure is not None:
                        return Err(failure)
                    continue
                state.current = next_node

            elif isinstance(current, Delay):
                # The only point at which an external effect happens
                try:
                    value = current.thunk()
                except Exception as exc:
                    failure = self._unwind(state, exc, current.label or _callable_name(current.thunk))
                    if failure is not None:
                        return Err(failure)
                    continue
                stats.total_effects += 1
                state.current = Done(value)

            elif isinstance(current, FlatMap):
                state.push_frame(ContinuationFrame(current.continuation))
                state.current = current.source

            elif isinstance(current, Recover):
                state.push_frame(RecoverFrame(current.handler))
                state.current = current.source

            else:
                stats.discarded_continuations += len(stack)
                stack.clear()
                return Err(
                    InterpreterInvariantError(
                        f"Unknown EffectNode variant: {type(current).__name__}"
                    )
                )

            if limit is not None and len(stack) > limit:
                actual = len(stack)
                stats.discarded_continuations += actual
                stack.clear()
                return Err(ContinuationStackOverflowError(limit, actual))

    def _unwind(
        self, state: InterpreterState, exc: Exception, label: str | None
    ) -> SuspendedEffectFailure | None:
        """Pop frames up to the nearest Recover boundary.

        Returns None when a boundary took over (``state.current`` is then the
        handler's node), otherwise the failure to report to the caller.
        """
        stats = state.stats
        stack = state.continuation_stack
        discarded = 0
        while stack:
            frame = stack.pop()
            if isinstance(frame, RecoverFrame):
                stats.total_recoveries += 1
                stats.discarded_continuations += discarded
                logger.debug(
                    "Recovering from %s in %s (%d continuation(s) discarded)",
                    type(exc).__name__,
                    label,
                    discarded,
                )
                state.current = FlatMap(Done(exc), frame.handler)
                return None
            discarded += 1
        stats.discarded_continuations += discarded
        return SuspendedEffectFailure(
            exc, label=label, step=stats.total_steps, discarded=discarded
        )

    def __repr__(self) -> str:
        return (
            f"Interpreter(max_stack_depth={self._max_stack_depth}, "
            f"trace_steps={self._trace_steps})"
        )


def run(node: EffectNode[T], **config: Any) -> T:
    """Interpret ``node`` with a fresh Interpreter and return its value."""
    return Interpreter(**config).run(node)


def run_result(node: EffectNode[T], **config: Any) -> RunResult[T]:
    """Interpret ``node`` with a fresh Interpreter and return a RunResult."""
    return Interpreter(**config).run_result(node)


__all__ = [
    "ContinuationFrame",
    "Frame",
    "InterpretationStats",
    "Interpreter",
    "InterpreterState",
    "RecoverFrame",
    "RunResult",
    "run",
    "run_result",
]
