"""Fahrenheit to Celsius conversion as a pure effect description.

Run with: python -m pureio run --program examples.temperature:main
"""

from __future__ import annotations

from pureio import Console, EffectNode, parse_number, print_line, read_line


def fahrenheit_to_celsius(f: float) -> float:
    return (f - 32) * 5.0 / 9.0


def main(console: Console) -> EffectNode[float]:
    return (
        print_line(console, "Enter a temperature in degrees Fahrenheit: ")
        .then(read_line(console))
        .flat_map(parse_number)
        .map(fahrenheit_to_celsius)
        .flat_map(lambda c: print_line(console, f"{c:.1f} degrees Celsius").as_(c))
    )


__all__ = ["fahrenheit_to_celsius", "main"]
