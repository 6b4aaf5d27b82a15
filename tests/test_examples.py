from __future__ import annotations

import pytest

from examples import factorial_repl, temperature
from pureio import InputUnavailable, ParseError, ScriptedConsole, run


class TestFactorialRepl:
    @pytest.mark.parametrize("n, expected", [(0, 1), (1, 1), (5, 120), (10, 3628800)])
    def test_factorial(self, n: int, expected: int):
        assert run(factorial_repl.factorial(n)) == expected

    def test_large_factorial_is_stack_safe(self, shallow_stack: int):
        assert run(factorial_repl.factorial(2000)) > 0

    def test_session(self):
        console = ScriptedConsole(["5", "abc", "0", "q", "7"])
        program = factorial_repl.main(console)
        assert console.written == []

        assert run(program) is None
        assert console.written == [
            factorial_repl.HELP_TEXT,
            "factorial: 120",
            "Not a non-negative integer: 'abc'",
            "factorial: 1",
        ]
        assert console.remaining == 1

    def test_stops_at_end_of_input(self):
        console = ScriptedConsole(["3"])
        run(factorial_repl.main(console))
        assert console.written[-1] == "factorial: 6"

    def test_rejects_negative_and_fractional(self):
        console = ScriptedConsole(["-2", "1.5"])
        run(factorial_repl.main(console))
        assert console.written[1:] == [
            "Not a non-negative integer: '-2'",
            "Not a non-negative integer: '1.5'",
        ]


class TestTemperature:
    def test_conversion(self):
        assert temperature.fahrenheit_to_celsius(212) == pytest.approx(100.0)
        assert temperature.fahrenheit_to_celsius(32) == pytest.approx(0.0)

    def test_program(self):
        console = ScriptedConsole(["98.6"])
        assert run(temperature.main(console)) == pytest.approx(37.0)
        assert console.written == [
            "Enter a temperature in degrees Fahrenheit: ",
            "37.0 degrees Celsius",
        ]

    def test_invalid_input_fails(self):
        console = ScriptedConsole(["warm"])
        with pytest.raises(ParseError):
            run(temperature.main(console))
        assert len(console.written) == 1

    def test_missing_input_fails(self):
        with pytest.raises(InputUnavailable):
            run(temperature.main(ScriptedConsole()))
