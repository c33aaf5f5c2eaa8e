"""Cursor and selection state tied to a buffer's char offsets."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Iterable, Iterator, List, Optional, Sequence, Union

from .edits import EditSpan
from .errors import OutOfBounds
from .positions import CharOffset, Range
from .validation import ensure_offset


@dataclass(frozen=True, slots=True)
class SelectionRange:
    """An anchor plus the active ``head`` that motions move.

    ``anchor == head`` is a plain cursor. ``goal_column`` is the column
    vertical motions aim for; ``None`` means the head's own column. It does
    not take part in equality.
    """

    anchor: CharOffset
    head: CharOffset
    goal_column: Optional[int] = field(default=None, compare=False)

    def __post_init__(self) -> None:
        for offset in (self.anchor, self.head):
            if offset < 0:
                raise OutOfBounds(
                    f"Selection offset {offset} is negative", offset=offset
                )

    @classmethod
    def cursor(
        cls, at: CharOffset, *, goal_column: Optional[int] = None
    ) -> "SelectionRange":
        return cls(at, at, goal_column)

    @classmethod
    def from_range(cls, range: Range) -> "SelectionRange":
        return cls(range.start, range.end)

    @property
    def start(self) -> CharOffset:
        return min(self.anchor, self.head)

    @property
    def end(self) -> CharOffset:
        return max(self.anchor, self.head)

    @property
    def is_empty(self) -> bool:
        return self.anchor == self.head

    @property
    def is_forward(self) -> bool:
        return self.anchor <= self.head

    def as_range(self) -> Range:
        return Range(self.start, self.end)

    def reversed(self) -> "SelectionRange":
        return SelectionRange(self.head, self.anchor, self.goal_column)

    def map(self, change: EditSpan) -> "SelectionRange":
        # an edit resets the goal column
        return SelectionRange(
            remap_offset(self.anchor, change), remap_offset(self.head, change)
        )

    def clamp(self, length: int) -> "SelectionRange":
        return SelectionRange(
            _clamp(self.anchor, length), _clamp(self.head, length), self.goal_column
        )


SelectionLike = Union[SelectionRange, Range]


def remap_offset(offset: CharOffset, change: EditSpan) -> CharOffset:
    """Track ``offset`` across ``change``.

    Pure insertions push offsets at or after the insertion point. For removals,
    offsets inside the removed span collapse to its start and offsets at or past
    its end shift by the size difference.
    """

    if change.removed == 0:
        return offset + change.inserted if offset >= change.start else offset
    if offset <= change.start:
        return offset
    if offset < change.removed_end:
        return change.start
    return offset + change.delta


def _clamp(offset: CharOffset, length: int) -> CharOffset:
    return max(0, min(offset, length))


def _coerce(value: SelectionLike) -> SelectionRange:
    if isinstance(value, Range):
        return SelectionRange.from_range(value)
    return value


class SelectionSet:
    """Ordered, non-overlapping selections with one designated primary.

    Once bound to a length source (``bind_length``), every selection handed
    in through ``set_primary``, ``add`` or ``replace_all`` must lie within
    ``[0, length]``; anything else raises ``OutOfBounds`` and leaves the set
    unchanged.
    """

    def __init__(self, ranges: Optional[Iterable[SelectionLike]] = None) -> None:
        items = [_coerce(item) for item in ranges or ()]
        self._ranges: List[SelectionRange] = items or [SelectionRange.cursor(0)]
        self._primary = 0
        self._length: Optional[Callable[[], int]] = None
        self._normalize()

    def bind_length(self, length: Callable[[], int]) -> None:
        """Check current and future selections against ``length()``."""

        for item in self._ranges:
            self._check(item, length())
        self._length = length

    def _accept(self, value: SelectionLike) -> SelectionRange:
        item = _coerce(value)
        if self._length is not None:
            self._check(item, self._length())
        return item

    @staticmethod
    def _check(item: SelectionRange, length: int) -> None:
        ensure_offset(item.anchor, length)
        ensure_offset(item.head, length)

    def __len__(self) -> int:
        return len(self._ranges)

    def __iter__(self) -> Iterator[SelectionRange]:
        return iter(tuple(self._ranges))

    def primary(self) -> Range:
        return self._ranges[self._primary].as_range()

    def primary_selection(self) -> SelectionRange:
        return self._ranges[self._primary]

    def cursor(self) -> CharOffset:
        return self._ranges[self._primary].head

    def all(self) -> Sequence[Range]:
        return tuple(item.as_range() for item in self._ranges)

    def selections(self) -> tuple[SelectionRange, ...]:
        return tuple(self._ranges)

    def set_primary(self, value: SelectionLike) -> None:
        self._ranges[self._primary] = self._accept(value)
        self._normalize()

    def add(self, value: SelectionLike, *, primary: bool = False) -> None:
        self._ranges.append(self._accept(value))
        if primary:
            self._primary = len(self._ranges) - 1
        self._normalize()

    def clear(self) -> None:
        """Drop secondary selections and collapse the primary to its head."""

        self._ranges = [SelectionRange.cursor(self.cursor())]
        self._primary = 0

    def replace_all(
        self, values: Iterable[SelectionLike], *, primary_index: int = 0
    ) -> None:
        items = [self._accept(item) for item in values]
        if not items:
            raise ValueError("at least one selection is required")
        self._ranges = items
        self._primary = max(0, min(primary_index, len(items) - 1))
        self._normalize()

    def remap_after_edit(
        self, change: EditSpan, *, length: Optional[int] = None
    ) -> None:
        mapped = [item.map(change) for item in self._ranges]
        if length is not None:
            mapped = [item.clamp(length) for item in mapped]
        self._ranges = mapped
        self._normalize()

    def clamp(self, length: int) -> None:
        self._ranges = [item.clamp(length) for item in self._ranges]
        self._normalize()

    def _normalize(self) -> None:
        ordered = sorted(
            enumerate(self._ranges), key=lambda pair: (pair[1].start, pair[1].end)
        )
        merged: List[SelectionRange] = []
        primary_at = 0
        for index, item in ordered:
            if merged and _overlaps(merged[-1], item):
                merged[-1] = _merge(merged[-1], item)
            else:
                merged.append(item)
            if index == self._primary:
                primary_at = len(merged) - 1
        self._ranges = merged
        self._primary = primary_at

    def __repr__(self) -> str:  # pragma: no cover - debugging aid
        return f"SelectionSet({self._ranges!r}, primary={self._primary})"


def _overlaps(left: SelectionRange, right: SelectionRange) -> bool:
    return right.start < left.end or right.start == left.start


def _merge(left: SelectionRange, right: SelectionRange) -> SelectionRange:
    start = min(left.start, right.start)
    end = max(left.end, right.end)
    if left.is_forward:
        return SelectionRange(start, end)
    return SelectionRange(end, start)


__all__ = ["SelectionRange", "SelectionSet", "SelectionLike", "remap_offset"]
