"""Validation helpers shared across buffer services."""

from __future__ import annotations

from .errors import OutOfBounds
from .positions import CharOffset, Range


def ensure_offset(offset: CharOffset, length: int) -> CharOffset:
    """Accept insertion points ``0 <= offset <= length``."""

    if offset < 0 or offset > length:
        raise OutOfBounds(
            f"Offset {offset} outside [0, {length}]", offset=offset, length=length
        )
    return offset


def ensure_index(offset: CharOffset, length: int) -> CharOffset:
    """Accept character positions ``0 <= offset < length``."""

    if offset < 0 or offset >= length:
        raise OutOfBounds(
            f"Offset {offset} outside [0, {length})", offset=offset, length=length
        )
    return offset


def ensure_range(range: Range, length: int) -> Range:
    if range.end > length:
        raise OutOfBounds(
            f"Range [{range.start}, {range.end}) exceeds length {length}",
            range=range,
            length=length,
        )
    return range


def ensure_line(line: int, line_count: int) -> int:
    if line < 0 or line >= line_count:
        raise OutOfBounds(
            f"Line {line} outside [0, {line_count})", offset=line, length=line_count
        )
    return line


__all__ = ["ensure_offset", "ensure_index", "ensure_range", "ensure_line"]
