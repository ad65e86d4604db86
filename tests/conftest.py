"""Pytest configuration and fixtures for mpdwire tests."""

from __future__ import annotations

import io
import socketserver
import threading
from pathlib import Path
from typing import Generator

import pytest

from mpdwire.connection import Connection

HELLO = b"OK MPD 0.23.5\n"


class FakeReader(io.BytesIO):
    """Read side of a fake socket. Raises once ``fail_after`` lines were read."""

    def __init__(self, data: bytes, fail_after: int | None = None):
        super().__init__(data)
        self.fail_after = fail_after
        self.lines_read = 0

    def readline(self, size=-1):
        if self.fail_after is not None and self.lines_read >= self.fail_after:
            raise ConnectionResetError("Connection reset by peer")
        self.lines_read += 1
        return super().readline(size)


class FakeSocket:
    """Socket stand-in with scripted inbound bytes that records what is sent."""

    def __init__(self, inbound: bytes = b"", fail_after: int | None = None):
        self.reader = FakeReader(inbound, fail_after)
        self.sent = bytearray()
        self.closed = False

    def makefile(self, mode="rb"):
        return self.reader

    def sendall(self, data: bytes) -> None:
        if self.closed:
            raise BrokenPipeError("Broken pipe")
        self.sent.extend(data)

    def close(self) -> None:
        self.closed = True

    @property
    def lines(self) -> list[str]:
        return self.sent.decode("utf-8").splitlines()


class FakeNetwork:
    """Hands out scripted sockets in order, one per connection attempt."""

    def __init__(self):
        self.pending: list[FakeSocket] = []
        self.opened: list[FakeSocket] = []

    def serve(self, inbound: bytes = b"", *, hello: bytes = HELLO, fail_after: int | None = None) -> FakeSocket:
        sock = FakeSocket(hello + inbound, fail_after)
        self.pending.append(sock)
        return sock

    def open(self) -> FakeSocket:
        if not self.pending:
            raise ConnectionRefusedError("Connection refused")
        sock = self.pending.pop(0)
        self.opened.append(sock)
        return sock


class LineSource:
    """In-memory line source for reader tests."""

    def __init__(self, data: bytes):
        self._stream = io.BytesIO(data)

    def read_line(self) -> str | None:
        raw = self._stream.readline()
        if not raw:
            return None
        return raw.decode("utf-8").removesuffix("\n")

    def read_bytes(self, count: int) -> bytes:
        return self._stream.read(count)


@pytest.fixture
def network(monkeypatch) -> FakeNetwork:
    """Route every connection attempt to scripted fake sockets."""
    net = FakeNetwork()
    monkeypatch.setattr(Connection, "_open_socket", lambda self: net.open())
    return net


@pytest.fixture
def line_source():
    """Factory for in-memory line sources."""
    return LineSource


class MockMPDHandler(socketserver.StreamRequestHandler):
    """Answers commands from ``server.replies``; unknown commands get a bare OK."""

    def handle(self):
        server: MockMPDServer = self.server  # type: ignore[assignment]
        self.wfile.write(HELLO)
        batch: list[str] | None = None

        for raw in self.rfile:
            line = raw.decode("utf-8").rstrip("\n")
            server.received.append(line)

            if line == "command_list_ok_begin":
                batch = []
                continue
            if line == "command_list_end":
                out = b""
                for item in batch or []:
                    body = server.replies.get(item, b"")
                    if body.startswith(b"ACK"):
                        out += body
                        break
                    out += body + b"list_OK\n"
                else:
                    out += b"OK\n"
                self.wfile.write(out)
                batch = None
                continue
            if batch is not None:
                batch.append(line)
                continue
            if line == "close":
                return

            body = server.replies.get(line, b"")
            self.wfile.write(body if body.startswith(b"ACK") else body + b"OK\n")


class MockMPDServer(socketserver.ThreadingTCPServer):
    allow_reuse_address = True
    daemon_threads = True

    def __init__(self):
        super().__init__(("127.0.0.1", 0), MockMPDHandler)
        self.replies: dict[str, bytes] = {}
        self.received: list[str] = []

    @property
    def port(self) -> int:
        return self.server_address[1]


@pytest.fixture
def mpd_server() -> Generator[MockMPDServer, None, None]:
    """A scripted MPD server on a free local port."""
    server = MockMPDServer()
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()

    yield server

    server.shutdown()
    server.server_close()


@pytest.fixture
def temp_config_dir(tmp_path: Path, monkeypatch) -> Generator[Path, None, None]:
    """Point XDG_CONFIG_HOME at a temp dir and clear MPD_* overrides."""
    config_dir = tmp_path / "mpdwire"
    config_dir.mkdir(parents=True)

    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
    for name in ("MPD_HOST", "MPD_PORT", "MPD_TIMEOUT"):
        monkeypatch.delenv(name, raising=False)

    yield config_dir
