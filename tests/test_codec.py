"""Tests for command line encoding."""

from __future__ import annotations

import pytest

from mpdwire.protocol.codec import (
    encode_arg,
    encode_command,
    encode_options,
    encode_range,
    escape,
    quote,
)
from mpdwire.protocol.filter import Filter
from mpdwire.protocol.messages import Range


def unquote(token: str) -> str:
    """Undo quoting the way the server reads a quoted argument."""
    assert token.startswith('"') and token.endswith('"')
    result = []
    chars = iter(token[1:-1])
    for char in chars:
        if char == "\\":
            char = next(chars)
        else:
            assert char != '"'
        result.append(char)
    return "".join(result)


class TestEscaping:
    def test_escape_quotes_and_backslashes(self):
        assert escape('say "hi"') == 'say \\"hi\\"'
        assert escape("C:\\music") == "C:\\\\music"

    def test_quote(self):
        assert quote("song.mp3") == '"song.mp3"'

    def test_single_quote_untouched(self):
        assert escape("O'Brien") == "O'Brien"

    @pytest.mark.parametrize(
        "value",
        [
            "plain.mp3",
            "",
            'say \\"hi\\"',
            "trailing\\",
            "double\\\\backslash",
            '"quoted"',
            "\\\"mixed\\\\\"",
            "Ünïcödé/Sigur Rós",
        ],
    )
    def test_server_unescaping_round_trips(self, value):
        assert unquote(quote(value)) == value


class TestEncodeArg:
    def test_bool(self):
        assert encode_arg(True) == "1"
        assert encode_arg(False) == "0"

    def test_numbers(self):
        assert encode_arg(80) == "80"
        assert encode_arg(-5) == "-5"
        assert encode_arg(1.5) == "1.5"

    def test_string_is_quoted(self):
        assert encode_arg("Artist") == '"Artist"'

    def test_range(self):
        assert encode_arg(Range(2, 5)) == "2:5"
        assert encode_arg(range(0, 10)) == "0:10"

    def test_stepped_range_rejected(self):
        with pytest.raises(ValueError):
            encode_range(range(0, 10, 2))

    def test_filter_with_options(self):
        expression = Filter.eq("Artist", "Nirvana").sort("Title").window(Range(0, 10))
        assert encode_arg(expression) == '"(Artist == \\"Nirvana\\")" sort Title window 0:10'

    def test_mapping(self):
        assert encode_arg({"sort": "-Title", "window": Range(1, 3)}) == "sort -Title window 1:3"

    def test_unsupported_type(self):
        with pytest.raises(TypeError):
            encode_arg(["a", "b"])  # type: ignore[arg-type]
        with pytest.raises(TypeError):
            encode_arg(object())  # type: ignore[arg-type]


class TestEncodeOptions:
    def test_values(self):
        assert encode_options({"window": range(5, 8), "flag": True}) == "window 5:8 flag 1"

    def test_empty(self):
        assert encode_options({}) == ""

    def test_unsupported_value(self):
        with pytest.raises(TypeError):
            encode_options({"window": [1, 2]})


class TestEncodeCommand:
    def test_bare(self):
        assert encode_command("status") == "status"

    def test_quoting_with_special_characters(self):
        assert encode_command("add", 'O\'Brien "Song".mp3') == 'add "O\'Brien \\"Song\\".mp3"'

    def test_mixed_arguments(self):
        assert encode_command("move", Range(0, 3), 7) == "move 0:3 7"

    def test_none_arguments_skipped(self):
        assert encode_command("play", None) == "play"
        assert encode_command("playlistinfo", None, Range.from_(4)) == "playlistinfo 4:"

    def test_empty_mapping_skipped(self):
        assert encode_command("find", Filter.eq("file", "a"), {}) == 'find "(file == \\"a\\")"'

    def test_subcommand(self):
        assert encode_command("sticker get", "song", "a.mp3", "rating") == (
            'sticker get "song" "a.mp3" "rating"'
        )

    def test_newline_rejected(self):
        with pytest.raises(ValueError):
            encode_command("add", "a\nstatus")
