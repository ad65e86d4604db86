"""Command line encoding."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Union

from .filter import Filter
from .messages import Range

Argument = Union[str, int, float, bool, Range, range, Filter, Mapping[str, Any], None]


def escape(value: str) -> str:
    """Escape backslashes and double quotes."""
    return value.replace("\\", "\\\\").replace('"', '\\"')


def quote(value: str) -> str:
    return f'"{escape(value)}"'


def encode_range(selection: Range | range) -> str:
    match selection:
        case Range():
            return selection.encode()
        case range(step=1):
            return Range(selection.start, selection.stop).encode()
        case _:
            raise ValueError(f"Only step 1 ranges can be encoded, got {selection!r}")


def encode_option_value(value: Any) -> str:
    match value:
        case bool():
            return "1" if value else "0"
        case Range() | range():
            return encode_range(value)
        case int() | float() | str():
            return str(value)
        case _:
            raise TypeError(f"Unsupported option value type: {type(value).__name__}")


def encode_options(options: Mapping[str, Any]) -> str:
    """Flatten a mapping into ``key value`` tokens, in iteration order."""
    return " ".join(f"{key} {encode_option_value(value)}" for key, value in options.items())


def encode_arg(arg: Argument) -> str:
    """Encode a single argument."""
    match arg:
        case bool():
            return "1" if arg else "0"
        case int() | float():
            return str(arg)
        case str():
            return quote(arg)
        case Range() | range():
            return encode_range(arg)
        case Filter():
            parts = [quote(arg.compile())]
            if options := arg.options():
                parts.append(encode_options(options))
            return " ".join(parts)
        case Mapping():
            return encode_options(arg)
        case _:
            raise TypeError(f"Unsupported argument type: {type(arg).__name__}")


def encode_command(name: str, *args: Argument) -> str:
    """Build one command line (without the trailing newline).

    ``None`` arguments stand for omitted optional arguments and are skipped.
    """
    parts = [name]
    for arg in args:
        if arg is None:
            continue
        token = encode_arg(arg)
        if token:
            parts.append(token)

    line = " ".join(parts)
    if "\n" in line:
        raise ValueError("Command arguments must not contain newlines")
    return line
