"""Filter expression builder for ``find``, ``search`` and friends.

A ``Filter`` is a list of predicate nodes joined with ``AND``. Nodes are
either a ``(tag op "value")`` comparison or a negation wrapping another
node or a whole filter::

    >>> str(Filter.eq("Artist", "Nirvana").not_contains("title", "live"))
    '((Artist == "Nirvana") AND (!(title contains "live")))'

The compiled text is what the codec quotes onto the command line.
"""

from __future__ import annotations

import functools
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Union

from .messages import Range


class Tag(str, Enum):
    """Common tag names understood by the server."""

    ARTIST = "artist"
    ARTIST_SORT = "artistsort"
    ALBUM = "album"
    ALBUM_SORT = "albumsort"
    ALBUM_ARTIST = "albumartist"
    ALBUM_ARTIST_SORT = "albumartistsort"
    TITLE = "title"
    TITLE_SORT = "titlesort"
    TRACK = "track"
    NAME = "name"
    GENRE = "genre"
    MOOD = "mood"
    DATE = "date"
    ORIGINAL_DATE = "originaldate"
    COMPOSER = "composer"
    COMPOSER_SORT = "composersort"
    PERFORMER = "performer"
    CONDUCTOR = "conductor"
    WORK = "work"
    MOVEMENT = "movement"
    ENSEMBLE = "ensemble"
    LOCATION = "location"
    GROUPING = "grouping"
    COMMENT = "comment"
    DISC = "disc"
    LABEL = "label"
    MUSICBRAINZ_ARTISTID = "musicbrainz_artistid"
    MUSICBRAINZ_ALBUMID = "musicbrainz_albumid"
    MUSICBRAINZ_TRACKID = "musicbrainz_trackid"
    # Special filter keys
    FILE = "file"
    BASE = "base"
    ANY = "any"
    MODIFIED_SINCE = "modified-since"
    ADDED_SINCE = "added-since"
    AUDIO_FORMAT = "AudioFormat"


TagLike = Union[str, Tag]


def tag_name(tag: TagLike) -> str:
    if isinstance(tag, Tag):
        return tag.value
    return tag


def escape_value(value: str) -> str:
    """Escape a value for use inside a filter expression."""
    return value.replace("\\", "\\\\").replace("'", "\\'").replace('"', '\\"')


@dataclass(frozen=True)
class Predicate:
    tag: str
    op: str
    value: str

    def compile(self) -> str:
        return f'({self.tag} {self.op} "{escape_value(self.value)}")'


@dataclass(frozen=True)
class Negation:
    node: Node

    def compile(self) -> str:
        return f"(!{self.node.compile()})"


Node = Union[Predicate, Negation, "Filter"]


class _operator:
    """Operator usable on an instance (chains) or on the class (starts a filter)."""

    def __init__(self, func: Callable[..., Filter]):
        self.func = func
        functools.update_wrapper(self, func)

    def __get__(self, instance: Filter | None, owner: type[Filter]) -> Callable[..., Filter]:
        target = instance if instance is not None else owner()
        return functools.partial(self.func, target)


class Filter:
    """Chainable filter expression."""

    def __init__(self) -> None:
        self._nodes: list[Node] = []
        self._sort: str | None = None
        self._window: Range | None = None

    def _add(self, tag: TagLike, op: str, value: str) -> Filter:
        self._nodes.append(Predicate(tag_name(tag), op, value))
        return self

    def _add_negated(self, tag: TagLike, op: str, value: str) -> Filter:
        self._nodes.append(Negation(Predicate(tag_name(tag), op, value)))
        return self

    # Comparison operators

    @_operator
    def eq(self, tag: TagLike, value: str) -> Filter:
        return self._add(tag, "==", value)

    @_operator
    def not_eq(self, tag: TagLike, value: str) -> Filter:
        return self._add(tag, "!=", value)

    @_operator
    def match(self, tag: TagLike, value: str) -> Filter:
        """Regular expression match."""
        return self._add(tag, "=~", value)

    @_operator
    def not_match(self, tag: TagLike, value: str) -> Filter:
        return self._add(tag, "!~", value)

    # String match operators

    @_operator
    def eq_cs(self, tag: TagLike, value: str) -> Filter:
        return self._add(tag, "eq_cs", value)

    @_operator
    def not_eq_cs(self, tag: TagLike, value: str) -> Filter:
        return self._add_negated(tag, "eq_cs", value)

    @_operator
    def eq_ci(self, tag: TagLike, value: str) -> Filter:
        return self._add(tag, "eq_ci", value)

    @_operator
    def not_eq_ci(self, tag: TagLike, value: str) -> Filter:
        return self._add_negated(tag, "eq_ci", value)

    @_operator
    def contains(self, tag: TagLike, value: str) -> Filter:
        return self._add(tag, "contains", value)

    @_operator
    def not_contains(self, tag: TagLike, value: str) -> Filter:
        return self._add_negated(tag, "contains", value)

    @_operator
    def contains_cs(self, tag: TagLike, value: str) -> Filter:
        return self._add(tag, "contains_cs", value)

    @_operator
    def not_contains_cs(self, tag: TagLike, value: str) -> Filter:
        return self._add_negated(tag, "contains_cs", value)

    @_operator
    def contains_ci(self, tag: TagLike, value: str) -> Filter:
        return self._add(tag, "contains_ci", value)

    @_operator
    def not_contains_ci(self, tag: TagLike, value: str) -> Filter:
        return self._add_negated(tag, "contains_ci", value)

    @_operator
    def starts_with(self, tag: TagLike, value: str) -> Filter:
        return self._add(tag, "starts_with", value)

    @_operator
    def not_starts_with(self, tag: TagLike, value: str) -> Filter:
        return self._add_negated(tag, "starts_with", value)

    @_operator
    def starts_with_cs(self, tag: TagLike, value: str) -> Filter:
        return self._add(tag, "starts_with_cs", value)

    @_operator
    def not_starts_with_cs(self, tag: TagLike, value: str) -> Filter:
        return self._add_negated(tag, "starts_with_cs", value)

    @_operator
    def starts_with_ci(self, tag: TagLike, value: str) -> Filter:
        return self._add(tag, "starts_with_ci", value)

    @_operator
    def not_starts_with_ci(self, tag: TagLike, value: str) -> Filter:
        return self._add_negated(tag, "starts_with_ci", value)

    # Logical NOT of a nested filter

    @_operator
    def negate(self, other: Filter) -> Filter:
        self._nodes.append(Negation(other))
        return self

    # Result options

    @_operator
    def sort(self, tag: TagLike, descending: bool = False) -> Filter:
        """Sort the result by ``tag``."""
        name = tag_name(tag)
        self._sort = f"-{name}" if descending else name
        return self

    @_operator
    def window(self, selection: Range) -> Filter:
        """Return only a portion of the result."""
        self._window = selection
        return self

    def options(self) -> dict[str, Any]:
        opts: dict[str, Any] = {}
        if self._sort is not None:
            opts["sort"] = self._sort
        if self._window is not None:
            opts["window"] = self._window
        return opts

    def __bool__(self) -> bool:
        return bool(self._nodes)

    def compile(self) -> str:
        if not self._nodes:
            return ""
        if len(self._nodes) == 1:
            return self._nodes[0].compile()
        return "(" + " AND ".join(node.compile() for node in self._nodes) + ")"

    def __str__(self) -> str:
        return self.compile()

    def __repr__(self) -> str:
        return f"Filter({self.compile()!r})"
