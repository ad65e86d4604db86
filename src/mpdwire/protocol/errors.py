"""Exceptions raised by the MPD protocol engine."""

from __future__ import annotations

import re

from .messages import ErrorCode

_ACK_PATTERN = re.compile(r"^\[(\d+)@(\d+)\]\s+\{([^}]*)\}\s*(.*)$")


class MPDError(Exception):
    """Base class for all client errors."""


class ProtocolError(MPDError):
    """The server answered with an ``ACK`` line.

    ``str(error)`` is the server message verbatim. When the message has the
    usual ``[code@index] {command} text`` layout the parts are exposed as
    attributes, otherwise they are ``None``.
    """

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message
        self.code: ErrorCode | int | None = None
        self.index: int | None = None
        self.command: str | None = None
        self.text: str = message

        if match := _ACK_PATTERN.match(message):
            raw_code = int(match.group(1))
            try:
                self.code = ErrorCode(raw_code)
            except ValueError:
                self.code = raw_code
            self.index = int(match.group(2))
            self.command = match.group(3) or None
            self.text = match.group(4)


class HandshakeError(MPDError):
    """The server hello was missing or malformed."""


class TransportError(MPDError):
    """Socket level I/O failure."""


class FramingError(MPDError):
    """The reply did not match what the current state expects."""
