"""Position value types.

All offsets are counts of Unicode scalar values (Python ``str`` indices), never
bytes or display cells. ``LineColumn`` is always derived from a ``CharOffset``
and never stored as the source of truth.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import NamedTuple

from .errors import InvalidRange, OutOfBounds

CharOffset = int


class LineColumn(NamedTuple):
    """Zero-based (line, column) pair; column counts characters."""

    line: int
    column: int


@dataclass(frozen=True, slots=True, order=True)
class Range:
    """Half-open interval ``[start, end)``; empty when ``start == end``."""

    start: CharOffset
    end: CharOffset

    def __post_init__(self) -> None:
        if self.start > self.end:
            raise InvalidRange(
                f"Range start {self.start} is after end {self.end}",
                offset=self.start,
            )
        if self.start < 0:
            raise OutOfBounds(
                f"Range start {self.start} is negative", offset=self.start
            )

    @classmethod
    def between(cls, a: CharOffset, b: CharOffset) -> "Range":
        return cls(a, b) if a <= b else cls(b, a)

    @classmethod
    def empty(cls, at: CharOffset) -> "Range":
        return cls(at, at)

    @property
    def is_empty(self) -> bool:
        return self.start == self.end

    def __len__(self) -> int:
        return self.end - self.start

    def contains(self, offset: CharOffset) -> bool:
        return self.start <= offset < self.end


__all__ = ["CharOffset", "LineColumn", "Range"]
