"""Protocol constants and data model for the MPD wire protocol."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum


DEFAULT_PORT = 6600

HELLO_PREFIX = "OK MPD "
ERROR_PREFIX = "ACK "
SUCCESS = "OK"
LIST_OK = "list_OK"

COMMAND_LIST_BEGIN = "command_list_ok_begin"
COMMAND_LIST_END = "command_list_end"

BINARY_KEY = "binary"

Pair = tuple[str, str]
Record = dict[str, str]


class ErrorCode(IntEnum):
    """ACK error codes sent by the server."""

    NOT_LIST = 1
    ARG = 2
    PASSWORD = 3
    PERMISSION = 4
    UNKNOWN = 5

    NO_EXIST = 50
    PLAYLIST_MAX = 51
    SYSTEM = 52
    PLAYLIST_LOAD = 53
    UPDATE_ALREADY = 54
    PLAYER_SYNC = 55
    EXIST = 56


class ShapeKind(str, Enum):
    """How a reply is consumed."""

    NOTHING = "nothing"
    ITEM = "item"
    LIST = "list"
    OBJECT = "object"
    OBJECTS = "objects"
    GROUPS = "groups"
    BINARY = "binary"


@dataclass(frozen=True)
class ResponseShape:
    """Expected reply layout for one command.

    ``boundaries`` only matters for ``OBJECTS``: a pair whose key is in the
    set starts a new record.
    """

    kind: ShapeKind
    boundaries: tuple[str, ...] = ()


def objects(*boundaries: str) -> ResponseShape:
    """Shape for a multi-record reply split at the given keys."""
    return ResponseShape(ShapeKind.OBJECTS, tuple(boundaries))


NOTHING = ResponseShape(ShapeKind.NOTHING)
ITEM = ResponseShape(ShapeKind.ITEM)
LIST = ResponseShape(ShapeKind.LIST)
OBJECT = ResponseShape(ShapeKind.OBJECT)
GROUPS = ResponseShape(ShapeKind.GROUPS)
BINARY = ResponseShape(ShapeKind.BINARY)

SONGS = objects("file")
DATABASE = objects("file", "directory", "playlist")
OUTPUTS = objects("outputid")
PLUGINS = objects("plugin")
PLAYLISTS = objects("playlist")
MESSAGES = objects("channel")
MOUNTS = objects("mount")
NEIGHBORS = objects("neighbor")
PARTITIONS = objects("partition")


@dataclass(frozen=True)
class Range:
    """A ``start:end`` selection of queue or playlist positions.

    The wire form is half-open. With ``inclusive=True`` the end position is
    part of the selection and is shifted by one when encoded. A missing end,
    or one that is not positive after the shift, selects the rest of the
    list.
    """

    start: int = 0
    end: int | None = None
    inclusive: bool = False

    @classmethod
    def between(cls, start: int, end: int) -> Range:
        """Inclusive range ``[start, end]``."""
        return cls(start, end, inclusive=True)

    @classmethod
    def from_(cls, start: int) -> Range:
        """Open-ended range ``[start, ...)``."""
        return cls(start)

    def encode(self) -> str:
        start = max(self.start, 0)
        end = self.end
        if end is not None and self.inclusive:
            end += 1
        if end is None or end <= 0:
            return f"{start}:"
        return f"{start}:{end}"

    def __str__(self) -> str:
        return self.encode()
