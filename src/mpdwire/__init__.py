"""mpdwire - client engine for the Music Player Daemon protocol."""

import logging

from .client import MPDClient
from .config import Config, load_config
from .poller import Event, EventType, StatusPoller
from .protocol import (
    Filter,
    FramingError,
    HandshakeError,
    MPDError,
    ProtocolError,
    Range,
    ResponseShape,
    Tag,
    TransportError,
)

__version__ = "0.1.0"

logging.getLogger("mpdwire").addHandler(logging.NullHandler())

__all__ = [
    "MPDClient",
    "Config",
    "load_config",
    "StatusPoller",
    "Event",
    "EventType",
    "Filter",
    "Tag",
    "Range",
    "ResponseShape",
    "MPDError",
    "ProtocolError",
    "HandshakeError",
    "TransportError",
    "FramingError",
]
