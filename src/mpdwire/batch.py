"""Command list (batch) state."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .protocol.assembler import read_shape
from .protocol.errors import FramingError
from .protocol.messages import ResponseShape
from .protocol.reader import ResponseReader


@dataclass
class CommandList:
    """Shapes of the replies owed for commands sent inside a command list.

    Idle while ``active`` is false. Each command sent while active appends
    its expected shape; ``resolve`` consumes the replies in the same order.
    """

    active: bool = False
    shapes: list[ResponseShape] = field(default_factory=list)

    def begin(self) -> None:
        if self.active:
            raise FramingError("Command list already active")
        self.shapes.clear()
        self.active = True

    def add(self, shape: ResponseShape) -> None:
        if not self.active:
            raise FramingError("No command list is active")
        self.shapes.append(shape)

    def __len__(self) -> int:
        return len(self.shapes)

    def resolve(self, reader: ResponseReader) -> list[Any]:
        """Read one reply per queued shape, then go back to idle.

        The first error aborts the remaining items; the state is reset
        either way.
        """
        results: list[Any] = []
        try:
            for shape in self.shapes:
                results.append(read_shape(reader, shape))
        finally:
            self.reset()
        return results

    def reset(self) -> None:
        self.shapes.clear()
        self.active = False
