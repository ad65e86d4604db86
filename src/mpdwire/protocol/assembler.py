"""Assemble key/value pairs into lists and records."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from .errors import FramingError
from .messages import Pair, Record, ResponseShape, ShapeKind
from .reader import ResponseReader


def collect_list(pairs: Iterable[Pair]) -> list[str]:
    """Values of a reply that repeats a single key."""
    result: list[str] = []
    seen: str | None = None
    for key, value in pairs:
        if seen is None:
            seen = key
        elif key != seen:
            raise FramingError(f"Expected key '{seen}', got '{key}'")
        result.append(value)
    return result


def collect_records(pairs: Iterable[Pair], boundaries: Iterable[str] = ()) -> list[Record]:
    """Split pairs into records, starting a new one at each boundary key.

    Pairs before the first boundary key form a leading record of their own.
    """
    delimiters = frozenset(boundaries)
    result: list[Record] = []
    record: Record = {}

    for key, value in pairs:
        if key in delimiters and record:
            result.append(record)
            record = {}
        record[key] = value

    if record:
        result.append(record)
    return result


def collect_groups(pairs: Iterable[Pair]) -> list[Record]:
    """Split pairs into records whenever a key repeats within the current one.

    Used for grouped replies such as ``count ... group artist`` where the
    grouping key is only known from the data.
    """
    result: list[Record] = []
    record: Record = {}

    for key, value in pairs:
        if key in record:
            result.append(record)
            record = {}
        record[key] = value

    if record:
        result.append(record)
    return result


def first_record(pairs: Iterable[Pair]) -> Record | None:
    records = collect_records(pairs)
    return records[0] if records else None


def read_nothing(reader: ResponseReader) -> None:
    line = reader.read_line()
    if line is not None:
        raise FramingError(f"Got unexpected return value: {line}")


def read_item(reader: ResponseReader) -> str | None:
    pairs = list(reader.read_pairs())
    if len(pairs) != 1:
        return None
    return pairs[0][1]


def read_shape(reader: ResponseReader, shape: ResponseShape) -> Any:
    """Consume one reply according to ``shape``."""
    match shape.kind:
        case ShapeKind.NOTHING:
            return read_nothing(reader)
        case ShapeKind.ITEM:
            return read_item(reader)
        case ShapeKind.LIST:
            return collect_list(reader.read_pairs())
        case ShapeKind.OBJECT:
            return first_record(reader.read_pairs())
        case ShapeKind.OBJECTS:
            return collect_records(reader.read_pairs(), shape.boundaries)
        case ShapeKind.GROUPS:
            return collect_groups(reader.read_pairs())
        case _:
            raise ValueError(f"Cannot read {shape.kind.value} replies as text")
