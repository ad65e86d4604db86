"""Chunked binary transfers (``albumart``, ``readpicture``)."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable

from .protocol.assembler import read_nothing
from .protocol.codec import Argument, encode_command
from .protocol.errors import FramingError
from .protocol.messages import BINARY_KEY, Record
from .protocol.reader import ResponseReader

Chunk = tuple[Record, bytes]


def read_binary_chunk(reader: ResponseReader) -> Chunk | None:
    """Read one reply carrying a ``binary: <n>`` payload.

    Returns the metadata pairs seen before the payload and the payload
    itself, or ``None`` for an empty reply.
    """
    metadata: Record = {}

    while (pair := reader.read_pair()) is not None:
        key, value = pair
        if key != BINARY_KEY:
            metadata[key] = value
            continue

        try:
            length = int(value)
        except ValueError:
            raise FramingError(f"Invalid binary length: {value!r}") from None

        data = reader.read_bytes(length)
        if reader.read_bytes(1) != b"\n":
            raise FramingError("Binary payload not followed by a newline")
        read_nothing(reader)
        return metadata, data

    if not metadata:
        return None
    return metadata, b""


@dataclass
class BinaryAssembly:
    """Accumulates the chunks of one transfer."""

    metadata: Record = field(default_factory=dict)
    buffer: bytearray = field(default_factory=bytearray)
    size: int | None = None

    @property
    def offset(self) -> int:
        return len(self.buffer)

    @property
    def started(self) -> bool:
        return bool(self.metadata) or bool(self.buffer)

    def add(self, metadata: Record, data: bytes) -> bool:
        """Append a chunk. Returns True once the transfer is complete."""
        offset = self.offset
        self.metadata.update(metadata)

        if "size" in metadata:
            try:
                self.size = int(metadata["size"])
            except ValueError:
                raise FramingError(f"Invalid binary size: {metadata['size']!r}") from None

        self.buffer.extend(data)

        if self.size is None:
            return True
        if offset + len(data) >= self.size:
            return True
        if not data:
            raise FramingError(f"Empty binary chunk at offset {offset} of {self.size}")
        return False

    def result(self) -> Chunk | None:
        if not self.started:
            return None
        return self.metadata, bytes(self.buffer)


def fetch_binary(
    exchange: Callable[[str], Chunk | None],
    command: str,
    *args: Argument,
) -> Chunk | None:
    """Fetch a whole binary object, re-issuing ``command`` with growing offsets.

    ``exchange`` sends one command line and returns the parsed chunk. Chunk
    sizes are chosen by the server and may change between calls.
    """
    assembly = BinaryAssembly()

    while True:
        chunk = exchange(encode_command(command, *args, assembly.offset))
        if chunk is None:
            if assembly.started:
                raise FramingError(
                    f"Binary transfer ended early at offset {assembly.offset} of {assembly.size}"
                )
            break

        metadata, data = chunk
        if assembly.add(metadata, data):
            break

    return assembly.result()
