"""MPD client facade: command dispatch, locking, retries and command lists."""

from __future__ import annotations

import functools
import logging
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, Callable, TypeVar

from . import binary
from .batch import CommandList
from .commands import COMMANDS, lookup
from .connection import Connection
from .protocol.assembler import read_nothing, read_shape
from .protocol.codec import Argument, encode_command
from .protocol.errors import FramingError, TransportError
from .protocol.messages import (
    COMMAND_LIST_BEGIN,
    COMMAND_LIST_END,
    DEFAULT_PORT,
    NOTHING,
    Record,
    ResponseShape,
    ShapeKind,
)
from .protocol.reader import ResponseReader

if TYPE_CHECKING:
    from .config import Config

_logger = logging.getLogger("mpdwire.client")

T = TypeVar("T")


class MPDClient:
    """Client for one MPD session.

    Every command and its reply form one unit of work under a single lock,
    so the client can be shared between threads (for instance with a
    ``StatusPoller``). Commands from the table in ``mpdwire.commands`` are
    available as methods::

        with MPDClient("localhost") as client:
            client.setvol(80)
            print(client.status()["volume"])

    While a command list is open the lock stays held by the opening thread
    and commands return ``None``; their results come back from
    ``end_batch()`` in order.
    """

    def __init__(
        self,
        host: str = "localhost",
        port: int = DEFAULT_PORT,
        password: str | None = None,
        timeout: float | None = None,
        logger: logging.Logger | None = None,
    ):
        self._logger = logger or _logger
        self._connection = Connection(host, port, password, timeout, logger=logger)
        self._command_list = CommandList()
        self._reader = ResponseReader(self._connection, self._command_list)
        self._lock = threading.RLock()

    @classmethod
    def from_config(cls, config: Config, logger: logging.Logger | None = None) -> MPDClient:
        """Create a client from the ``[connection]`` section of a config."""
        conn = config.connection
        return cls(
            host=conn.host,
            port=conn.port,
            password=conn.password or None,
            timeout=conn.timeout or None,
            logger=logger,
        )

    @property
    def host(self) -> str:
        return self._connection.host

    @property
    def port(self) -> int:
        return self._connection.port

    @property
    def version(self) -> str | None:
        return self._connection.version

    @property
    def connected(self) -> bool:
        return self._connection.connected

    @property
    def in_command_list(self) -> bool:
        return self._command_list.active

    def __enter__(self) -> MPDClient:
        self.connect()
        return self

    def __exit__(self, *_: object) -> None:
        self.disconnect()

    def __getattr__(self, name: str) -> Callable[..., Any]:
        if name.startswith("_") or name not in COMMANDS:
            raise AttributeError(f"{type(self).__name__!r} object has no attribute {name!r}")
        return functools.partial(self.execute, name)

    # Session

    def connect(self) -> None:
        with self._lock:
            self._connection.connect()

    def disconnect(self) -> None:
        with self._lock:
            if self._command_list.active:
                self._abort_command_list()
            else:
                self._connection.disconnect()

    def reconnect(self) -> None:
        with self._lock:
            self._connection.reconnect()

    def close(self) -> None:
        """Ask the server to close the connection, then drop it locally."""
        with self._lock:
            try:
                if self._connection.connected:
                    self._connection.write_line("close")
            finally:
                self.disconnect()

    # Low level surface

    @staticmethod
    def encode(command: str, *args: Argument) -> str:
        return encode_command(command, *args)

    def write(self, line: str) -> None:
        with self._lock:
            self._connection.write_line(line)

    def read_shape(self, shape: ResponseShape) -> Any:
        with self._lock:
            return read_shape(self._reader, shape)

    # Commands

    def execute(self, name: str, *args: Argument) -> Any:
        """Run a command from the command table by its Python name."""
        command = lookup(name)
        if command.shape.kind is ShapeKind.BINARY:
            return self.fetch_binary(command.wire, *args)
        return self.command(command.wire, *args, shape=command.shape)

    def command(self, wire: str, *args: Argument, shape: ResponseShape = NOTHING) -> Any:
        """Run any command, reading its reply as ``shape``."""
        line = encode_command(wire, *args)

        with self._lock:
            if self._command_list.active:
                self._send_in_command_list(line)
                self._command_list.add(shape)
                return None
            return self._exchange(line, lambda: read_shape(self._reader, shape))

    def _exchange(self, line: str, read: Callable[[], T]) -> T:
        """Send ``line`` and read its reply, retrying once after a reconnect."""
        with self._lock:
            self._connection.connect()
            try:
                return self._round_trip(line, read)
            except TransportError as e:
                self._logger.warning(f"Transport error, reconnecting: {e}")

            self._connection.reconnect()
            try:
                return self._round_trip(line, read)
            except TransportError:
                self._connection.disconnect()
                raise

    def _round_trip(self, line: str, read: Callable[[], T]) -> T:
        try:
            self._connection.write_line(line)
            return read()
        except FramingError:
            # The stream position is unknown now.
            self._connection.disconnect()
            raise

    # Command lists

    def begin_batch(self) -> None:
        """Open a command list. The lock is held until ``end_batch``."""
        self._lock.acquire()
        try:
            if self._command_list.active:
                raise FramingError("Command list already active")
            self._connection.connect()
            try:
                self._connection.write_line(COMMAND_LIST_BEGIN)
            except TransportError as e:
                self._logger.warning(f"Transport error, reconnecting: {e}")
                self._connection.reconnect()
                self._connection.write_line(COMMAND_LIST_BEGIN)
            self._command_list.begin()
        except BaseException:
            self._lock.release()
            raise
        self._logger.debug("Command list opened")

    def end_batch(self) -> list[Any]:
        """Close the command list and return the result of every queued command."""
        with self._lock:
            if not self._command_list.active:
                raise FramingError("No command list is active")

            count = len(self._command_list)
            try:
                self._connection.write_line(COMMAND_LIST_END)
                results = self._command_list.resolve(self._reader)
                read_nothing(self._reader)
            except (FramingError, TransportError):
                self._connection.disconnect()
                raise
            finally:
                self._command_list.reset()
                self._lock.release()

            self._logger.debug(f"Command list resolved {count} replies")
            return results

    @contextmanager
    def command_list(self) -> Iterator[list[Any]]:
        """Run the block inside a command list.

        The yielded list is filled with the results when the block exits.
        """
        self.begin_batch()
        results: list[Any] = []
        try:
            yield results
        except BaseException:
            if self._command_list.active:
                self._abort_command_list()
            raise
        results.extend(self.end_batch())

    def _send_in_command_list(self, line: str) -> None:
        try:
            self._connection.write_line(line)
        except TransportError:
            self._abort_command_list()
            raise

    def _abort_command_list(self) -> None:
        self._logger.warning("Aborting command list")
        self._command_list.reset()
        self._connection.disconnect()
        self._lock.release()

    # Binary transfers

    def fetch_binary(self, command: str, *args: Argument) -> tuple[Record, bytes] | None:
        """Fetch a complete binary object, chunk by chunk.

        ``args`` come before the offset, which is appended for each chunk.
        Returns ``(metadata, data)``, or ``None`` when the server has no
        binary data for the request.
        """
        with self._lock:
            if self._command_list.active:
                raise FramingError("Binary transfers cannot be queued in a command list")

            def exchange(line: str) -> binary.Chunk | None:
                return self._exchange(line, lambda: binary.read_binary_chunk(self._reader))

            return binary.fetch_binary(exchange, command, *args)

    def readpicture(self, uri: str) -> tuple[Record, bytes] | None:
        """Picture embedded in the tags of ``uri``."""
        return self.fetch_binary("readpicture", uri)

    def albumart(self, uri: str) -> tuple[Record, bytes] | None:
        """Cover file from the directory of ``uri``."""
        return self.fetch_binary("albumart", uri)
