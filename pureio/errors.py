from __future__ import annotations


class PureIOError(Exception):
    """Base class for all errors raised by pureio."""


class InputUnavailable(PureIOError, EOFError):
    """Raised by a line reader when no more input exists."""

    def __init__(self, message: str = "No more input available") -> None:
        super().__init__(message)


class ParseError(PureIOError, ValueError):
    """Raised when text cannot be parsed as a number."""

    def __init__(self, text: str) -> None:
        self.text = text
        super().__init__(f"Not a number: {text!r}")


class SuspendedEffectFailure(PureIOError):
    """
    Report of a run that stopped because a thunk or continuation failed.

    The original exception is kept in ``cause``; the interpreter never alters
    it. ``label`` names the failing node, ``step`` is the loop iteration at
    which the failure happened and ``discarded`` counts the pending
    continuations that were dropped without being invoked.
    """

    def __init__(
        self,
        cause: BaseException,
        *,
        label: str | None = None,
        step: int = 0,
        discarded: int = 0,
    ) -> None:
        self.cause = cause
        self.label = label
        self.step = step
        self.discarded = discarded
        where = f" in {label}" if label else ""
        super().__init__(
            f"Effect failed{where} at step {step}: "
            f"{type(cause).__name__}: {cause} "
            f"({discarded} pending continuation(s) discarded)"
        )


class InterpreterException(PureIOError):
    """Base class for all interpreter-originated exceptions."""


class ContinuationStackOverflowError(InterpreterException):
    """
    Raised when the continuation stack exceeds the configured limit.
    """

    def __init__(self, max_depth: int, actual_depth: int) -> None:
        super().__init__(
            f"Continuation stack depth {actual_depth} exceeds limit {max_depth}"
        )
        self.max_depth = max_depth
        self.actual_depth = actual_depth


class InterpreterInvariantError(InterpreterException):
    """
    Raised when something other than an EffectNode reaches the interpreter.
    """


__all__ = [
    "ContinuationStackOverflowError",
    "InputUnavailable",
    "InterpreterException",
    "InterpreterInvariantError",
    "ParseError",
    "PureIOError",
    "SuspendedEffectFailure",
]
