"""
pureio - Effects as values, run by a stack-safe trampoline.

Effects (console I/O, mutable cells, loops) are described by immutable
EffectNode values built with pure combinators. Nothing happens until the
graph is handed to the Interpreter, which executes it with an explicit
continuation stack so that arbitrarily long chains never exhaust the native
call stack.

Example:
    >>> from pureio import ScriptedConsole, do, print_line, read_line, run
    >>>
    >>> console = ScriptedConsole(["Ada"])
    >>>
    >>> @do
    ... def greet():
    ...     yield print_line(console, "Name?")
    ...     name = yield read_line(console)
    ...     yield print_line(console, f"Hello, {name}")
    ...     return name
    >>>
    >>> run(greet())
    'Ada'
"""

from pureio._vendor import Err, FrozenDict, Ok, Result
from pureio.combinators import (
    as_,
    attempt,
    combine,
    do_while,
    flat_map,
    fold_m,
    fold_m_,
    foreach_m,
    forever,
    map2,
    map_,
    product,
    recover,
    replicate_m,
    replicate_m_,
    sequence,
    sequence_,
    skip,
    traverse,
    unless,
    when,
    while_m,
)
from pureio.console import (
    Console,
    LineReader,
    LineWriter,
    PrintLine,
    ReadLine,
    ScriptedConsole,
    StreamConsole,
    parse_number,
    print_line,
    read_line,
)
from pureio.do import DoFunction, EffectGenerator, do
from pureio.errors import (
    ContinuationStackOverflowError,
    InputUnavailable,
    InterpreterException,
    InterpreterInvariantError,
    ParseError,
    PureIOError,
    SuspendedEffectFailure,
)
from pureio.interpreter import (
    InterpretationStats,
    Interpreter,
    RunResult,
    run,
    run_result,
)
from pureio.node import (
    UNIT,
    Delay,
    Done,
    EffectNode,
    FlatMap,
    Recover,
    delay,
    fail,
    pure,
    suspend,
    unit,
)
from pureio.ref import Ref, ref

__version__ = "0.1.0"

__all__ = [
    # Data model
    "EffectNode",
    "Done",
    "Delay",
    "FlatMap",
    "Recover",
    "UNIT",
    "unit",
    "pure",
    "delay",
    "suspend",
    "fail",
    # Combinators
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
    # Do-notation
    "do",
    "DoFunction",
    "EffectGenerator",
    # Console primitives
    "Console",
    "LineReader",
    "LineWriter",
    "StreamConsole",
    "ScriptedConsole",
    "read_line",
    "print_line",
    "ReadLine",
    "PrintLine",
    "parse_number",
    # Ref
    "Ref",
    "ref",
    # Interpreter
    "Interpreter",
    "InterpretationStats",
    "RunResult",
    "run",
    "run_result",
    # Results
    "Result",
    "Ok",
    "Err",
    "FrozenDict",
    # Errors
    "PureIOError",
    "InputUnavailable",
    "ParseError",
    "SuspendedEffectFailure",
    "InterpreterException",
    "ContinuationStackOverflowError",
    "InterpreterInvariantError",
]
