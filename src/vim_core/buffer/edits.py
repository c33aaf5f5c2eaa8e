"""Value types describing buffer mutations.

``EditSpan`` is the minimal shape used to notify the index translator and to
remap selections. ``Edit`` is a request expressed in char offsets, and
``EditRecord`` is what every edit operation hands back so callers can build
undo history without the core keeping one.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Tuple

from .positions import CharOffset, Range

if TYPE_CHECKING:
    from .state import SelectionRange


@dataclass(frozen=True, slots=True)
class EditSpan:
    start: CharOffset
    removed: int
    inserted: int

    @property
    def delta(self) -> int:
        return self.inserted - self.removed

    @property
    def removed_end(self) -> CharOffset:
        return self.start + self.removed


@dataclass(frozen=True, slots=True)
class Edit:
    """A replacement of ``range`` by ``text``.

    An empty range is an insertion; empty text is a deletion.
    """

    range: Range
    text: str = ""

    @classmethod
    def insert(cls, at: CharOffset, text: str) -> "Edit":
        return cls(Range.empty(at), text)

    @classmethod
    def delete(cls, range: Range) -> "Edit":
        return cls(range, "")

    @classmethod
    def replace(cls, range: Range, text: str) -> "Edit":
        return cls(range, text)


@dataclass(frozen=True, slots=True)
class EditRecord:
    pos: CharOffset
    inserted: str
    removed: str
    label: str = "edit"
    selections_before: Tuple["SelectionRange", ...] = ()
    selections_after: Tuple["SelectionRange", ...] = ()

    @property
    def applied(self) -> Range:
        """Range now occupied by the inserted text."""

        return Range(self.pos, self.pos + len(self.inserted))

    @property
    def span(self) -> EditSpan:
        return EditSpan(self.pos, len(self.removed), len(self.inserted))

    def inverse(self) -> Edit:
        return Edit(self.applied, self.removed)


__all__ = ["Edit", "EditRecord", "EditSpan"]
