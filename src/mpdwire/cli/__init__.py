"""mpdwire command line interface."""

from .main import cli, get_client, main, parse_seek, setup_logging
from .output import (
    format_event,
    format_outputs,
    format_playlists,
    format_queue,
    format_song,
    format_status,
    format_time,
    print_event,
    print_result,
)

__all__ = [
    "cli",
    "main",
    "get_client",
    "parse_seek",
    "setup_logging",
    "format_event",
    "format_outputs",
    "format_playlists",
    "format_queue",
    "format_song",
    "format_status",
    "format_time",
    "print_event",
    "print_result",
]
