"""Background status polling with change events."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from .protocol.errors import MPDError
from .protocol.messages import Record

if TYPE_CHECKING:
    from .client import MPDClient

_logger = logging.getLogger("mpdwire.poller")


class EventType(str, Enum):
    """Status changes reported by the poller."""

    STATE = "state"
    SONG = "song"
    VOLUME = "volume"
    REPEAT = "repeat"
    RANDOM = "random"
    SINGLE = "single"
    CONSUME = "consume"
    PLAYLIST = "playlist"
    PLAYLIST_LENGTH = "playlistlength"
    ELAPSED = "elapsed"
    UPDATING_DB = "updating_db"
    ERROR = "error"


# Status field watched for each event type.
WATCHED_FIELDS: dict[EventType, str] = {
    EventType.STATE: "state",
    EventType.SONG: "songid",
    EventType.VOLUME: "volume",
    EventType.REPEAT: "repeat",
    EventType.RANDOM: "random",
    EventType.SINGLE: "single",
    EventType.CONSUME: "consume",
    EventType.PLAYLIST: "playlist",
    EventType.PLAYLIST_LENGTH: "playlistlength",
    EventType.ELAPSED: "elapsed",
    EventType.UPDATING_DB: "updating_db",
    EventType.ERROR: "error",
}


@dataclass
class Event:
    """One changed status field. ``None`` means the field is absent."""

    type: EventType
    value: str | None
    previous: str | None = None


def diff_status(previous: Record | None, current: Record) -> list[Event]:
    """Events for the watched fields that differ between two snapshots."""
    if previous is None:
        return []

    events = []
    for event_type, key in WATCHED_FIELDS.items():
        before = previous.get(key)
        after = current.get(key)
        if before != after:
            events.append(Event(type=event_type, value=after, previous=before))
    return events


class StatusPoller:
    """Polls ``status`` periodically and publishes changes to subscriber queues.

    The poller shares the client (and so its connection and lock) with
    foreground callers. Each poll runs the blocking call in a worker thread.
    """

    def __init__(self, client: MPDClient, interval: float = 1.0):
        self.client = client
        self.interval = interval
        self._previous: Record | None = None
        self._subscribers: list[asyncio.Queue[Event]] = []
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def subscribe(self) -> asyncio.Queue[Event]:
        """Add a subscriber and return its queue."""
        queue: asyncio.Queue[Event] = asyncio.Queue()
        self._subscribers.append(queue)
        return queue

    def unsubscribe(self, queue: asyncio.Queue[Event]) -> None:
        if queue in self._subscribers:
            self._subscribers.remove(queue)

    async def poll_once(self) -> list[Event]:
        """Take one snapshot and publish whatever changed since the last one."""
        status = await asyncio.to_thread(self.client.execute, "status")
        if status is None:
            status = {}

        events = diff_status(self._previous, status)
        self._previous = status

        for event in events:
            for queue in self._subscribers:
                queue.put_nowait(event)
        return events

    async def _loop(self) -> None:
        while True:
            try:
                await self.poll_once()
            except MPDError as e:
                _logger.warning(f"Status poll failed: {e}")
            except Exception as e:
                _logger.error(f"Unexpected status poll error: {e}", exc_info=e)
            await asyncio.sleep(self.interval)

    def _handle_task_exception(self, task: asyncio.Task) -> None:
        """Log exceptions from the polling task."""
        if task.cancelled():
            return
        exc = task.exception()
        if exc:
            _logger.error(f"Poller task error: {exc}", exc_info=exc)

    async def start(self) -> None:
        """Start polling in the background."""
        if self.running:
            return
        self._task = asyncio.create_task(self._loop())
        self._task.add_done_callback(self._handle_task_exception)

    async def stop(self) -> None:
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None

    async def events(self) -> AsyncIterator[Event]:
        """Subscribe and yield events until the consumer stops iterating."""
        queue = self.subscribe()
        try:
            while True:
                yield await queue.get()
        finally:
            self.unsubscribe(queue)
