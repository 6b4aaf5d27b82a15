from __future__ import annotations

import argparse
import importlib
import inspect
import json
import logging
import sys
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from pureio import EffectNode, Interpreter, RunResult
from pureio.console import Console, ScriptedConsole, StreamConsole


class ProgramFailed(Exception):
    """A run ended in failure; carries the error and any scripted output."""

    def __init__(self, error: Exception, output: list[str] | None) -> None:
        super().__init__(str(error))
        self.error = error
        self.output = output


@dataclass
class RunContext:
    program_path: str
    input_path: str | None
    output_format: str
    show_stats: bool
    max_stack_depth: int | None


class SymbolResolver:
    """Helper for importing symbols while caching module lookups."""

    def __init__(self) -> None:
        self._cache: dict[str, Any] = {}

    def resolve(self, path: str) -> Any:
        if path not in self._cache:
            self._cache[path] = _import_symbol(path)
        return self._cache[path]

    def program(self, path: str, console: Console) -> EffectNode[Any]:
        return _ensure_node(self.resolve(path), console, f"'{path}'")


def _import_symbol(path: str) -> Any:
    if ":" in path:
        module_name, attr_path = path.split(":", 1)
        module = importlib.import_module(module_name)
        return _resolve_attr(module, attr_path)
    parts = path.split(".")
    if len(parts) < 2:
        raise ValueError(
            f"'{path}' is not a fully-qualified symbol. Use module.symbol or module:symbol format."
        )
    module_name = ".".join(parts[:-1])
    module = importlib.import_module(module_name)
    return getattr(module, parts[-1])


def _resolve_attr(obj: Any, attr_path: str) -> Any:
    current = obj
    for attr in attr_path.split("."):
        current = getattr(current, attr)
    return current


def _ensure_node(obj: Any, console: Console, description: str) -> EffectNode[Any]:
    if isinstance(obj, EffectNode):
        return obj
    if callable(obj):
        produced = obj(console) if _accepts_argument(obj) else obj()
        if isinstance(produced, EffectNode):
            return produced
    raise TypeError(f"{description} did not resolve to an EffectNode.")


def _accepts_argument(func: Any) -> bool:
    try:
        signature = inspect.signature(func)
    except (TypeError, ValueError):
        return False
    for param in signature.parameters.values():
        if param.kind in (param.POSITIONAL_ONLY, param.POSITIONAL_OR_KEYWORD, param.VAR_POSITIONAL):
            return True
    return False


def _build_console(input_path: str | None) -> Console:
    if input_path is None:
        return StreamConsole()
    lines = Path(input_path).read_text(encoding="utf-8").splitlines()
    return ScriptedConsole(lines)


def _json_safe(value: Any) -> Any:
    try:
        json.dumps(value)
        return value
    except (TypeError, ValueError):
        return repr(value)


def _scripted_output(console: Console) -> list[str] | None:
    if isinstance(console, ScriptedConsole):
        return list(console.written)
    return None


def _echo_output(context: RunContext, output: list[str] | None) -> None:
    # Program output written to a scripted console is echoed so --input runs stay visible
    if output is not None and context.output_format == "text":
        for line in output:
            print(line)


def _render_run_output(context: RunContext, console: Console, result: RunResult[Any]) -> None:
    output = _scripted_output(console)
    _echo_output(context, output)

    stats = dict(result.stats.to_dict())
    if context.output_format == "json":
        payload: dict[str, Any] = {
            "status": "ok",
            "program": context.program_path,
            "result": _json_safe(result.value),
            "result_type": type(result.value).__name__,
        }
        if output is not None:
            payload["output"] = output
        if context.show_stats:
            payload["stats"] = stats
        print(json.dumps(payload))
        return

    if result.value is not None:
        print(result.value)
    if context.show_stats:
        for key, value in stats.items():
            print(f"{key}: {value}", file=sys.stderr)


def handle_run(args: argparse.Namespace) -> int:
    context = RunContext(
        program_path=args.program,
        input_path=args.input,
        output_format=args.format,
        show_stats=args.stats,
        max_stack_depth=args.max_stack_depth,
    )
    console = _build_console(context.input_path)
    program = SymbolResolver().program(context.program_path, console)
    interpreter = Interpreter(
        max_stack_depth=context.max_stack_depth,
        trace_steps=True if args.debug else None,
    )
    result = interpreter.run_result(program)
    if result.is_err():
        error = result.failure if result.failure is not None else result.error
        # Lines written before the failure stay visible
        output = _scripted_output(console)
        _echo_output(context, output)
        raise ProgramFailed(error, output) from error
    _render_run_output(context, console, result)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="pureio", description="Utilities for running pureio programs")
    subparsers = parser.add_subparsers(dest="command", required=True)

    run_parser = subparsers.add_parser(
        "run",
        help="Interpret an EffectNode",
        description=(
            "Interpret an EffectNode resolved from a module path. The target may be an "
            "EffectNode, a zero-argument factory, or a factory taking the Console.\n\n"
            "Examples:\n"
            "  pureio run --program examples.factorial_repl:main\n"
            "  pureio run --program examples.factorial_repl:main --input answers.txt --format json"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    run_parser.add_argument("--program", required=True, help="Fully-qualified path to the EffectNode or factory")
    run_parser.add_argument(
        "--input",
        help="Replay lines from this file instead of reading the terminal",
    )
    run_parser.add_argument(
        "--format",
        choices=("text", "json"),
        default="text",
        help="Output format (default: text)",
    )
    run_parser.add_argument(
        "--stats",
        action="store_true",
        help="Report interpretation statistics",
    )
    run_parser.add_argument(
        "--max-stack-depth",
        type=int,
        default=None,
        help="Limit on the continuation stack (default: unbounded)",
    )
    run_parser.add_argument("--debug", action="store_true", help="Enable DEBUG logging and per-step tracing")
    run_parser.set_defaults(func=handle_run)

    return parser


def _report_error(args: argparse.Namespace, exc: Exception, output: list[str] | None) -> int:
    if getattr(args, "format", "text") == "json":
        payload: dict[str, Any] = {
            "status": "error",
            "error": exc.__class__.__name__,
            "message": str(exc),
        }
        cause = getattr(exc, "cause", None)
        if cause is not None:
            payload["cause"] = cause.__class__.__name__
        if output is not None:
            payload["output"] = output
        print(json.dumps(payload))
    else:
        print(f"Error: {exc}", file=sys.stderr)
    return 1


def main(argv: Iterable[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)
    logging.basicConfig(
        level=logging.DEBUG if getattr(args, "debug", False) else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        return args.func(args)
    except KeyboardInterrupt:
        print("Interrupted", file=sys.stderr)
        return 130
    except ProgramFailed as failed:
        return _report_error(args, failed.error, failed.output)
    except Exception as exc:
        return _report_error(args, exc, None)


if __name__ == "__main__":
    sys.exit(main())
