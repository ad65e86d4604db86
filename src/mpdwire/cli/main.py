"""mpdwire CLI main entry point."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any, Callable

import click

from ..client import MPDClient
from ..config import Config, load_config
from ..poller import StatusPoller
from ..protocol.errors import MPDError
from ..protocol.filter import Filter
from ..protocol.messages import Range, ResponseShape, ShapeKind
from .output import (
    format_outputs,
    format_playlists,
    format_queue,
    format_song,
    format_status,
    print_event,
    print_result,
)

_console_handler: logging.Handler | None = None


def setup_logging(level_name: str) -> None:
    """Set up logging to stderr."""
    global _console_handler
    level = getattr(logging, level_name.upper(), logging.WARNING)

    formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)

    root_logger = logging.getLogger("mpdwire")
    root_logger.setLevel(level)
    if _console_handler is not None:
        root_logger.removeHandler(_console_handler)
    root_logger.addHandler(console_handler)
    _console_handler = console_handler


def parse_seek(position: str) -> float | str:
    """Parse seek position: 30, +5, -10, 1:30, 1:02:30."""
    if position.startswith("+") or position.startswith("-"):
        return position  # Relative, the server handles it
    if ":" in position:
        parts = position.split(":")
        if len(parts) == 2:
            return int(parts[0]) * 60 + float(parts[1])
        if len(parts) == 3:
            return int(parts[0]) * 3600 + int(parts[1]) * 60 + float(parts[2])
        raise click.BadParameter(f"Invalid time: {position}")
    return float(position)


def get_client(ctx: click.Context) -> MPDClient:
    """Connected client for this invocation, created on first use."""
    obj = ctx.find_root().obj
    if obj.get("client") is None:
        client = MPDClient.from_config(obj["config"])
        client.connect()
        ctx.find_root().call_on_close(client.disconnect)
        obj["client"] = client
    return obj["client"]


def run(
    ctx: click.Context,
    action: Callable[[MPDClient], Any],
    formatter: Callable[[Any], str] | None = None,
) -> None:
    """Run ``action`` against the client and print its result."""
    try:
        result = action(get_client(ctx))
    except MPDError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)
    print_result(result, ctx.find_root().obj["json"], formatter)


@click.group(invoke_without_command=True)
@click.option("--host", default=None, help="Server host, or socket path")
@click.option("--port", type=int, default=None, help="Server port")
@click.option("--password", default=None, help="Server password")
@click.option("--json", "json_output", is_flag=True, help="Output raw JSON")
@click.option("-v", "--verbose", is_flag=True, help="Log protocol traffic")
@click.pass_context
def cli(ctx, host: str | None, port: int | None, password: str | None, json_output: bool, verbose: bool):
    """mpdwire - Music Player Daemon client."""
    config: Config = load_config()
    if host is not None:
        config.connection.host = host
    if port is not None:
        config.connection.port = port
    if password is not None:
        config.connection.password = password

    setup_logging("debug" if verbose else config.logging.level)

    ctx.ensure_object(dict)
    ctx.obj["config"] = config
    ctx.obj["json"] = json_output

    if ctx.invoked_subcommand is None:
        # Default to status if no command
        ctx.invoke(status)


# State commands


def _status_with_song(client: MPDClient) -> tuple[dict, dict | None]:
    with client.command_list() as results:
        client.status()
        client.currentsong()
    status_record, song = results
    return status_record or {}, song


@cli.command("status")
@click.pass_context
def status(ctx):
    """Show current playback status."""
    if ctx.find_root().obj["json"]:
        run(ctx, lambda c: dict(zip(("status", "song"), _status_with_song(c))))
    else:
        run(ctx, _status_with_song, lambda r: format_status(*r))


@cli.command("current")
@click.pass_context
def current(ctx):
    """Show the current song."""
    run(ctx, lambda c: c.currentsong(), format_song)


@cli.command("stats")
@click.pass_context
def stats(ctx):
    """Show database statistics."""
    run(ctx, lambda c: c.stats())


# Playback commands


@cli.command("play")
@click.argument("position", type=int, required=False)
@click.pass_context
def play(ctx, position: int | None):
    """Start playback, optionally at a queue position (0-based)."""
    run(ctx, lambda c: c.play(position))


@cli.command("pause")
@click.pass_context
def pause(ctx):
    """Toggle pause."""
    run(ctx, lambda c: c.pause())


@cli.command("stop")
@click.pass_context
def stop(ctx):
    """Stop playback."""
    run(ctx, lambda c: c.stop())


@cli.command("next")
@click.pass_context
def next_song(ctx):
    """Skip to next song."""
    run(ctx, lambda c: c.next())


@cli.command("prev")
@click.pass_context
def prev_song(ctx):
    """Go to previous song."""
    run(ctx, lambda c: c.previous())


@cli.command("seek")
@click.argument("position")
@click.pass_context
def seek(ctx, position: str):
    """Seek within the current song (30, +5, -10, 1:30)."""
    target = parse_seek(position)
    run(ctx, lambda c: c.seekcur(target))


@cli.command("volume")
@click.argument("level", type=click.IntRange(0, 100))
@click.pass_context
def volume(ctx, level: int):
    """Set volume (0-100)."""
    run(ctx, lambda c: c.setvol(level))


# Queue commands


@cli.command("add")
@click.argument("uris", nargs=-1, required=True)
@click.pass_context
def add(ctx, uris: tuple[str, ...]):
    """Add songs or directories to the queue."""

    def add_all(client: MPDClient) -> None:
        with client.command_list():
            for uri in uris:
                client.add(uri)

    run(ctx, add_all)


@cli.command("clear")
@click.pass_context
def clear(ctx):
    """Clear the queue."""
    run(ctx, lambda c: c.clear())


@cli.command("queue")
@click.option("--start", type=int, default=0, help="First position (0-based)")
@click.option("--end", type=int, default=None, help="Last position, inclusive")
@click.pass_context
def queue(ctx, start: int, end: int | None):
    """Show queue contents."""
    selection = Range(start, end, inclusive=True)

    def fetch(client: MPDClient) -> tuple[list, int | None]:
        with client.command_list() as results:
            client.playlistinfo(selection)
            client.status()
        songs, status_record = results
        current = status_record.get("song") if status_record else None
        return songs, int(current) if current is not None else None

    if ctx.find_root().obj["json"]:
        run(ctx, lambda c: fetch(c)[0])
    else:
        run(ctx, fetch, lambda r: format_queue(*r))


def _query(ctx: click.Context, expression: Filter, sort_tag: str | None, add_to_queue: bool) -> None:
    if add_to_queue:
        run(ctx, lambda c: c.findadd(expression))
        return

    if sort_tag:
        expression.sort(sort_tag)
    if ctx.find_root().obj["json"]:
        run(ctx, lambda c: c.find(expression))
    else:
        run(ctx, lambda c: c.find(expression), lambda songs: format_queue(songs))


@cli.command("search")
@click.argument("tag")
@click.argument("value")
@click.option("--sort", "sort_tag", default=None, help="Sort by tag")
@click.option("--add", "add_to_queue", is_flag=True, help="Add the matches to the queue")
@click.pass_context
def search(ctx, tag: str, value: str, sort_tag: str | None, add_to_queue: bool):
    """Search the database for TAG containing VALUE (case insensitive)."""
    _query(ctx, Filter.contains_ci(tag, value), sort_tag, add_to_queue)


@cli.command("find")
@click.argument("tag")
@click.argument("value")
@click.option("--sort", "sort_tag", default=None, help="Sort by tag")
@click.option("--add", "add_to_queue", is_flag=True, help="Add the matches to the queue")
@click.pass_context
def find(ctx, tag: str, value: str, sort_tag: str | None, add_to_queue: bool):
    """Find songs whose TAG is exactly VALUE."""
    _query(ctx, Filter.eq(tag, value), sort_tag, add_to_queue)


@cli.command("playlists")
@click.pass_context
def playlists(ctx):
    """List stored playlists."""
    run(ctx, lambda c: c.listplaylists(), None if ctx.find_root().obj["json"] else format_playlists)


@cli.command("outputs")
@click.pass_context
def outputs(ctx):
    """List audio outputs."""
    run(ctx, lambda c: c.outputs(), None if ctx.find_root().obj["json"] else format_outputs)


@cli.command("cover")
@click.argument("uri")
@click.option("-o", "--output", "output", type=click.Path(path_type=Path), default=None)
@click.option("--folder", is_flag=True, help="Use the directory cover instead of embedded art")
@click.pass_context
def cover(ctx, uri: str, output: Path | None, folder: bool):
    """Save the artwork of URI to a file."""

    def fetch(client: MPDClient) -> dict:
        result = client.albumart(uri) if folder else client.readpicture(uri)
        if result is None:
            return {"saved": False}
        metadata, data = result
        extension = metadata.get("type", "image/jpeg").split("/")[-1]
        target = output or Path(f"cover.{extension}")
        target.write_bytes(data)
        return {"saved": True, "path": str(target), "bytes": len(data), "type": metadata.get("type")}

    run(ctx, fetch)


# Event streaming


@cli.command("watch")
@click.option("--interval", type=float, default=None, help="Seconds between polls")
@click.pass_context
def watch(ctx, interval: float | None):
    """Stream status changes."""
    config: Config = ctx.find_root().obj["config"]
    json_output = ctx.find_root().obj["json"]
    try:
        client = get_client(ctx)
    except MPDError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)
    poller = StatusPoller(client, interval or config.poller.interval)

    async def stream() -> None:
        await poller.start()
        try:
            async for event in poller.events():
                print_event(event, json_output)
        finally:
            await poller.stop()

    try:
        asyncio.run(stream())
    except KeyboardInterrupt:
        pass


# Raw commands


@cli.command("send")
@click.argument("name")
@click.argument("args", nargs=-1)
@click.option(
    "--shape",
    type=click.Choice([kind.value for kind in ShapeKind if kind is not ShapeKind.BINARY]),
    default="objects",
    help="How to read the reply",
)
@click.option("--boundary", "boundaries", multiple=True, help="Record boundary key (objects)")
@click.pass_context
def send(ctx, name: str, args: tuple[str, ...], shape: str, boundaries: tuple[str, ...]):
    """Send a raw command and print the reply."""
    reply_shape = ResponseShape(ShapeKind(shape), tuple(boundaries))
    run(ctx, lambda c: c.command(name, *args, shape=reply_shape))


def main():
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
