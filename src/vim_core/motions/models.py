"""Motion descriptors consumed by the motion engine."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class MotionKind(str, Enum):
    CHAR_FORWARD = "char_forward"
    CHAR_BACKWARD = "char_backward"
    GRAPHEME_FORWARD = "grapheme_forward"
    GRAPHEME_BACKWARD = "grapheme_backward"
    WORD_FORWARD = "word_forward"
    WORD_BACKWARD = "word_backward"
    WORD_END = "word_end"
    LINE_DOWN = "line_down"
    LINE_UP = "line_up"
    LINE_START = "line_start"
    FIRST_NON_BLANK = "first_non_blank"
    LINE_END = "line_end"
    FIND_CHAR_FORWARD = "find_char_forward"
    FIND_CHAR_BACKWARD = "find_char_backward"
    PARAGRAPH_FORWARD = "paragraph_forward"
    PARAGRAPH_BACKWARD = "paragraph_backward"
    DOCUMENT_START = "document_start"
    DOCUMENT_END = "document_end"

    @property
    def needs_char(self) -> bool:
        return self in (MotionKind.FIND_CHAR_FORWARD, MotionKind.FIND_CHAR_BACKWARD)

    @property
    def is_vertical(self) -> bool:
        return self in (MotionKind.LINE_DOWN, MotionKind.LINE_UP)

    @property
    def inclusive(self) -> bool:
        """Operators applied to this motion also cover the target character."""

        return self in (MotionKind.WORD_END, MotionKind.FIND_CHAR_FORWARD)


@dataclass(frozen=True, slots=True)
class Motion:
    """Movement intent: a kind, a repeat count, and the target for find-char."""

    kind: MotionKind
    count: int = 1
    char: Optional[str] = None

    def __post_init__(self) -> None:
        if self.count < 1:
            raise ValueError(f"count must be >= 1, got {self.count}")
        if self.kind.needs_char:
            if self.char is None or len(self.char) != 1:
                raise ValueError(f"{self.kind.value} needs exactly one character")
        elif self.char is not None:
            raise ValueError(f"{self.kind.value} does not take a character")

    @classmethod
    def find(cls, char: str, *, forward: bool = True, count: int = 1) -> "Motion":
        kind = (
            MotionKind.FIND_CHAR_FORWARD if forward else MotionKind.FIND_CHAR_BACKWARD
        )
        return cls(kind, count=count, char=char)

    def times(self, count: int) -> "Motion":
        return Motion(self.kind, count=count, char=self.char)


__all__ = ["Motion", "MotionKind"]
