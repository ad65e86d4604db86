"""Socket ownership, handshake and reconnection for one MPD session."""

from __future__ import annotations

import logging
import socket
from typing import BinaryIO

from .protocol.assembler import read_shape
from .protocol.codec import encode_command
from .protocol.errors import FramingError, HandshakeError, TransportError
from .protocol.messages import DEFAULT_PORT, HELLO_PREFIX, NOTHING
from .protocol.reader import ResponseReader

_logger = logging.getLogger("mpdwire.connection")


def is_unix_socket(host: str) -> bool:
    """Hosts starting with ``/`` or ``@`` name a local socket."""
    return host.startswith("/") or host.startswith("@")


class Connection:
    """A single session with the server.

    The session is either fully connected (socket open, version known) or
    fully disconnected. Socket errors surface as ``TransportError``.
    """

    def __init__(
        self,
        host: str = "localhost",
        port: int = DEFAULT_PORT,
        password: str | None = None,
        timeout: float | None = None,
        logger: logging.Logger | None = None,
    ):
        self.host = host
        self.port = port
        self.password = password
        self.timeout = timeout
        self._logger = logger or _logger
        self._sock: socket.socket | None = None
        self._rfile: BinaryIO | None = None
        self._version: str | None = None

    @property
    def connected(self) -> bool:
        return self._sock is not None

    @property
    def version(self) -> str | None:
        """Protocol version announced in the server hello."""
        return self._version

    @property
    def address(self) -> str:
        if is_unix_socket(self.host):
            return self.host
        return f"{self.host}:{self.port}"

    def _open_socket(self) -> socket.socket:
        """Open the transport to ``host``."""
        if is_unix_socket(self.host):
            path = self.host
            if path.startswith("@"):
                path = "\0" + path[1:]
            sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
            try:
                sock.settimeout(self.timeout)
                sock.connect(path)
            except OSError:
                sock.close()
                raise
            return sock

        return socket.create_connection((self.host, self.port), timeout=self.timeout)

    def connect(self) -> None:
        """Connect and perform the handshake, unless already connected."""
        if self.connected:
            return

        self._logger.debug(f"Connecting to {self.address}")
        try:
            sock = self._open_socket()
        except OSError as e:
            raise TransportError(f"Failed to connect to {self.address}: {e}") from e

        self._sock = sock
        self._rfile = sock.makefile("rb")

        try:
            self._hello()
            if self.password:
                self._authenticate(self.password)
        except BaseException:
            self.disconnect()
            raise

        self._logger.info(f"Connected to MPD {self._version} at {self.address}")

    def _hello(self) -> None:
        assert self._rfile is not None
        try:
            raw = self._rfile.readline()
        except OSError as e:
            raise TransportError(f"Failed to read MPD hello: {e}") from e

        if not raw.endswith(b"\n"):
            raise HandshakeError("Connection lost while reading MPD hello")

        try:
            line = raw.decode("utf-8").rstrip("\n")
        except UnicodeDecodeError as e:
            raise HandshakeError(f"Got undecodable MPD hello: {raw!r}") from e
        if not line.startswith(HELLO_PREFIX):
            raise HandshakeError(f"Got invalid MPD hello: {line}")

        self._version = line[len(HELLO_PREFIX):]

    def _authenticate(self, password: str) -> None:
        self.write_line(encode_command("password", password))
        read_shape(ResponseReader(self), NOTHING)

    def disconnect(self) -> None:
        """Close the socket and forget the session. Safe to call twice."""
        rfile, sock = self._rfile, self._sock
        self._rfile = None
        self._sock = None
        self._version = None

        if rfile is not None:
            try:
                rfile.close()
            except OSError:
                pass
        if sock is not None:
            try:
                sock.close()
            except OSError as e:
                self._logger.debug(f"Error while closing socket: {e}")
            self._logger.info(f"Disconnected from {self.address}")

    def reconnect(self) -> None:
        self.disconnect()
        self.connect()

    def write_line(self, line: str) -> None:
        if self._sock is None:
            raise TransportError("Not connected")

        self._logger.debug(f"MPD request: `{line}`")
        try:
            self._sock.sendall(line.encode("utf-8") + b"\n")
        except OSError as e:
            raise TransportError(f"Failed to write to {self.address}: {e}") from e

    def read_line(self) -> str | None:
        """Read one line without its newline; ``None`` at end of stream."""
        if self._rfile is None:
            raise TransportError("Not connected")

        try:
            raw = self._rfile.readline()
        except OSError as e:
            raise TransportError(f"Failed to read from {self.address}: {e}") from e

        if not raw:
            self._logger.warning(f"End of stream from {self.address}")
            return None

        try:
            line = raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise FramingError(f"Response line is not valid UTF-8: {raw!r}") from e
        if line.endswith("\n"):
            line = line[:-1]
        self._logger.debug(f"MPD response: `{line}`")
        return line

    def read_bytes(self, count: int) -> bytes:
        """Read exactly ``count`` raw bytes."""
        if self._rfile is None:
            raise TransportError("Not connected")

        try:
            data = self._rfile.read(count)
        except OSError as e:
            raise TransportError(f"Failed to read from {self.address}: {e}") from e

        if len(data) != count:
            raise TransportError(
                f"Connection lost while reading binary data ({len(data)} of {count} bytes)"
            )
        return data
