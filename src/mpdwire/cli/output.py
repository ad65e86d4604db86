"""Output formatting for CLI."""

from __future__ import annotations

import json
from typing import Any, Callable

import click

from ..poller import Event, EventType
from ..protocol.messages import Record

STATE_ICONS = {"play": "▶", "pause": "⏸", "stop": "⏹"}


def format_time(seconds: float) -> str:
    """Format seconds as MM:SS or HH:MM:SS."""
    if seconds < 0:
        return "0:00"

    hours = int(seconds // 3600)
    minutes = int((seconds % 3600) // 60)
    secs = int(seconds % 60)

    if hours > 0:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"


def _float(value: str | None, default: float = 0.0) -> float:
    try:
        return float(value) if value is not None else default
    except ValueError:
        return default


def format_song(song: Record | None, include_duration: bool = True) -> str:
    """Format a song record for display."""
    if not song:
        return "(no song)"

    parts = []

    if song.get("Artist"):
        parts.append(song["Artist"])

    if song.get("Title"):
        parts.append(song["Title"])
    elif song.get("file"):
        # Use filename from URI
        parts.append(song["file"].split("/")[-1])

    text = " - ".join(parts) if parts else song.get("file", "(unknown)")

    duration = song.get("duration") or song.get("Time")
    if include_duration and duration:
        text += f" [{format_time(_float(duration))}]"

    return text


def format_status(status: Record, song: Record | None = None) -> str:
    """Format status (and optionally the current song) for display."""
    lines = []

    state = status.get("state", "stop")
    lines.append(f"{STATE_ICONS.get(state, '?')} {format_song(song, include_duration=False)}")

    # Progress bar
    elapsed = _float(status.get("elapsed"))
    duration = _float(status.get("duration"))
    if song and duration > 0:
        progress = min(elapsed / duration, 1.0)
        bar_width = 40
        filled = int(bar_width * progress)
        bar = "▓" * filled + "░" * (bar_width - filled)
        lines.append(f"  {bar} {format_time(elapsed)} / {format_time(duration)}")

    flags = [
        name
        for name in ("repeat", "random", "single", "consume")
        if status.get(name, "0") not in ("0", "")
    ]
    volume = status.get("volume", "n/a")
    lines.append(f"  Volume: {volume}%  {' '.join(flags)}".rstrip())

    length = int(_float(status.get("playlistlength")))
    if length > 0 and "song" in status:
        lines.append(f"  Queue: {int(status['song']) + 1}/{length}")

    if error := status.get("error"):
        lines.append(f"  Error: {error}")

    return "\n".join(lines)


def format_queue(songs: list[Record], current: int | None = None) -> str:
    """Format queue contents for display."""
    if not songs:
        return "(empty queue)"

    lines = []
    for i, song in enumerate(songs):
        pos = int(song.get("Pos", i))
        prefix = "▶ " if pos == current else "  "
        lines.append(f"{prefix}{pos + 1}. {format_song(song)}")

    return "\n".join(lines)


def format_playlists(playlists: list[Record]) -> str:
    if not playlists:
        return "(no stored playlists)"
    return "\n".join(
        f"  {p.get('playlist', '?')} ({p.get('Last-Modified', 'unknown')})" for p in playlists
    )


def format_outputs(outputs: list[Record]) -> str:
    if not outputs:
        return "(no outputs)"
    lines = []
    for output in outputs:
        enabled = "on " if output.get("outputenabled") == "1" else "off"
        lines.append(f"  [{enabled}] {output.get('outputid', '?')}: {output.get('outputname', '')}")
    return "\n".join(lines)


def format_event(event: Event) -> str:
    """Format a poller event for display."""
    if event.type is EventType.STATE:
        return f"[state] {event.previous} -> {event.value}"
    if event.type is EventType.ELAPSED:
        return f"[elapsed] {format_time(_float(event.value))}"
    if event.type is EventType.ERROR:
        return f"[error] {event.value or '(cleared)'}"
    return f"[{event.type.value}] {event.value}"


def _plain(result: Any) -> str:
    if result is None:
        return "OK"
    if isinstance(result, dict):
        return "\n".join(f"{key}: {value}" for key, value in result.items())
    if isinstance(result, list):
        blocks = [_plain(item) for item in result]
        separator = "\n\n" if any(isinstance(item, dict) for item in result) else "\n"
        return separator.join(blocks)
    return str(result)


def print_result(
    result: Any,
    json_output: bool = False,
    formatter: Callable[[Any], str] | None = None,
) -> None:
    """Print a command result to stdout."""
    if json_output:
        click.echo(json.dumps(result, indent=2))
    elif formatter is not None:
        click.echo(formatter(result))
    else:
        click.echo(_plain(result))


def print_event(event: Event, json_output: bool = False) -> None:
    """Print event to stdout."""
    if json_output:
        payload = {"event": event.type.value, "value": event.value, "previous": event.previous}
        click.echo(json.dumps(payload))
    else:
        click.echo(format_event(event))
