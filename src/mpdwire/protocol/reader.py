"""Line level reply reading and classification."""

from __future__ import annotations

from collections.abc import Iterator
from typing import TYPE_CHECKING, Protocol

from .errors import FramingError, ProtocolError
from .messages import ERROR_PREFIX, LIST_OK, SUCCESS, Pair

if TYPE_CHECKING:
    from ..batch import CommandList


class LineSource(Protocol):
    def read_line(self) -> str | None: ...

    def read_bytes(self, count: int) -> bytes: ...


class ResponseReader:
    """Reads one reply from a line source.

    ``read_line`` returns ``None`` once the reply is over: on the terminator
    that fits the current state (``OK`` normally, ``list_OK`` for an item of
    an active command list) and at end of stream.
    """

    def __init__(self, source: LineSource, command_list: CommandList | None = None):
        self.source = source
        self.command_list = command_list

    @property
    def in_command_list(self) -> bool:
        return self.command_list is not None and self.command_list.active

    def read_line(self) -> str | None:
        line = self.source.read_line()
        if line is None:
            return None

        if line.startswith(ERROR_PREFIX):
            raise ProtocolError(line[len(ERROR_PREFIX):].strip())

        if self.in_command_list:
            if line == LIST_OK:
                return None
            if line == SUCCESS:
                raise FramingError(f"Got unexpected '{SUCCESS}' in command list")
        else:
            if line == SUCCESS:
                return None
            if line == LIST_OK:
                raise FramingError(f"Got unexpected '{LIST_OK}' outside of a command list")

        return line

    def read_pair(self) -> Pair | None:
        line = self.read_line()
        if line is None:
            return None

        key, sep, value = line.partition(": ")
        if not sep:
            raise FramingError(f"Malformed response line: {line!r}")
        return key, value

    def read_pairs(self) -> Iterator[Pair]:
        while (pair := self.read_pair()) is not None:
            yield pair

    def read_bytes(self, count: int) -> bytes:
        return self.source.read_bytes(count)
