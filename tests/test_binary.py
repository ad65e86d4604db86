"""Tests for chunked binary transfers."""

from __future__ import annotations

import pytest

from mpdwire.binary import BinaryAssembly, read_binary_chunk
from mpdwire.client import MPDClient
from mpdwire.protocol.errors import FramingError, ProtocolError
from mpdwire.protocol.reader import ResponseReader


def chunk(payload: bytes, size: int, **metadata: str) -> bytes:
    lines = [f"size: {size}"] + [f"{key}: {value}" for key, value in metadata.items()]
    head = "".join(f"{line}\n" for line in lines).encode()
    return head + f"binary: {len(payload)}\n".encode() + payload + b"\nOK\n"


class TestReadChunk:
    def test_payload_with_newlines(self, line_source):
        reader = ResponseReader(line_source(chunk(b"ab\ncd", 5, type="image/png")))
        metadata, data = read_binary_chunk(reader)

        assert data == b"ab\ncd"
        assert metadata == {"size": "5", "type": "image/png"}

    def test_empty_reply(self, line_source):
        assert read_binary_chunk(ResponseReader(line_source(b"OK\n"))) is None

    def test_metadata_without_payload(self, line_source):
        reader = ResponseReader(line_source(b"size: 0\nOK\n"))
        assert read_binary_chunk(reader) == ({"size": "0"}, b"")

    def test_invalid_length(self, line_source):
        with pytest.raises(FramingError):
            read_binary_chunk(ResponseReader(line_source(b"binary: lots\nOK\n")))

    def test_missing_newline_after_payload(self, line_source):
        with pytest.raises(FramingError):
            read_binary_chunk(ResponseReader(line_source(b"binary: 2\nabXOK\n")))


class TestAssembly:
    def test_unknown_size_completes(self):
        assembly = BinaryAssembly()
        assert assembly.add({}, b"abc")
        assert assembly.result() == ({}, b"abc")

    def test_empty_chunk_before_end(self):
        assembly = BinaryAssembly()
        assert not assembly.add({"size": "4"}, b"ab")
        with pytest.raises(FramingError):
            assembly.add({"size": "4"}, b"")

    def test_nothing_received(self):
        assert BinaryAssembly().result() is None


class TestFetch:
    def test_shrinking_chunks(self, network):
        sock = network.serve(
            chunk(b"012345", 10, type="image/png")
            + chunk(b"678", 10)
            + chunk(b"9", 10)
        )
        client = MPDClient()

        metadata, data = client.readpicture("a.flac")

        assert data == b"0123456789"
        assert metadata == {"size": "10", "type": "image/png"}
        assert sock.lines == [
            'readpicture "a.flac" 0',
            'readpicture "a.flac" 6',
            'readpicture "a.flac" 9',
        ]

    def test_albumart(self, network):
        sock = network.serve(chunk(b"img", 3))
        client = MPDClient()

        assert client.albumart("dir/a.mp3") == ({"size": "3"}, b"img")
        assert sock.lines == ['albumart "dir/a.mp3" 0']

    def test_no_picture(self, network):
        network.serve(b"OK\n")
        assert MPDClient().readpicture("a.flac") is None

    def test_missing_file(self, network):
        network.serve(b"ACK [50@0] {albumart} No file exists\n")
        with pytest.raises(ProtocolError):
            MPDClient().albumart("missing.mp3")

    def test_ends_early(self, network):
        network.serve(chunk(b"0123", 10) + b"OK\n")
        with pytest.raises(FramingError, match="ended early"):
            MPDClient().readpicture("a.flac")
