"""MPD wire protocol - encoding, reply reading and record assembly."""

from .codec import encode_arg, encode_command, escape, quote
from .errors import (
    FramingError,
    HandshakeError,
    MPDError,
    ProtocolError,
    TransportError,
)
from .filter import Filter, Tag
from .messages import (
    DATABASE,
    DEFAULT_PORT,
    GROUPS,
    ITEM,
    LIST,
    NOTHING,
    OBJECT,
    SONGS,
    ErrorCode,
    Pair,
    Range,
    Record,
    ResponseShape,
    ShapeKind,
    objects,
)
from .reader import ResponseReader

__all__ = [
    "DEFAULT_PORT",
    "DATABASE",
    "GROUPS",
    "ITEM",
    "LIST",
    "NOTHING",
    "OBJECT",
    "SONGS",
    "ErrorCode",
    "Filter",
    "FramingError",
    "HandshakeError",
    "MPDError",
    "Pair",
    "ProtocolError",
    "Range",
    "Record",
    "ResponseReader",
    "ResponseShape",
    "ShapeKind",
    "Tag",
    "TransportError",
    "encode_arg",
    "encode_command",
    "escape",
    "objects",
    "quote",
]
