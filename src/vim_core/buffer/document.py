"""Text storage for vim_core buffers.

``TextBuffer`` owns the document content exclusively. It is backed by a
persistent rope so insert, delete, and slice never copy the whole document.
Every mutation bumps ``version`` and notifies subscribers with an
``EditSpan`` describing what changed; the index translator relies on this to
drop stale line tables.
"""

from __future__ import annotations

from typing import Callable, Iterator, List, Optional

from vim_core.runtime.settings import CoreSettings, get_settings

from .edits import EditSpan
from .positions import CharOffset, Range
from .rope import Rope
from .validation import ensure_index, ensure_offset, ensure_range

ChangeListener = Callable[[EditSpan], None]


class TextBuffer:
    """Mutable document content with sub-linear random-access editing."""

    def __init__(
        self, text: str = "", *, settings: Optional[CoreSettings] = None
    ) -> None:
        self.settings = settings or get_settings()
        self._rope = Rope(text, leaf_size=self.settings.leaf_size)
        self._listeners: List[ChangeListener] = []
        self.version = 0

    @classmethod
    def from_text(
        cls, text: str, *, settings: Optional[CoreSettings] = None
    ) -> "TextBuffer":
        return cls(text, settings=settings)

    def length(self) -> CharOffset:
        return len(self._rope)

    def __len__(self) -> int:
        return len(self._rope)

    def is_empty(self) -> bool:
        return len(self._rope) == 0

    def line_count(self) -> int:
        """Number of lines; an empty document still has one line."""

        return self._rope.newlines + 1

    def char_at(self, offset: CharOffset) -> str:
        ensure_index(offset, self.length())
        return self._rope.char(offset)

    def slice(self, range: Range) -> str:
        ensure_range(range, self.length())
        return self._rope.slice(range.start, range.end)

    def chunks(
        self, start: CharOffset = 0, end: Optional[CharOffset] = None
    ) -> Iterator[str]:
        """Lazily yield the text in ``[start, end)`` as leaf-sized fragments."""

        stop = self.length() if end is None else end
        ensure_range(Range(start, stop), self.length())
        return self._rope.chunks(start, stop)

    def text(self) -> str:
        return str(self._rope)

    def __str__(self) -> str:
        return str(self._rope)

    def insert(self, at: CharOffset, text: str) -> None:
        ensure_offset(at, self.length())
        if not text:
            return
        self._rope.insert(at, text)
        self._notify(EditSpan(start=at, removed=0, inserted=len(text)))

    def delete(self, range: Range) -> None:
        ensure_range(range, self.length())
        if range.is_empty:
            return
        self._rope.remove(range.start, range.end)
        self._notify(EditSpan(start=range.start, removed=len(range), inserted=0))

    def subscribe(self, listener: ChangeListener) -> None:
        self._listeners.append(listener)

    def unsubscribe(self, listener: ChangeListener) -> None:
        self._listeners.remove(listener)

    def _notify(self, change: EditSpan) -> None:
        self.version += 1
        for listener in self._listeners:
            listener(change)

    # Persistent-tree snapshots let ``Transaction`` roll back a failed edit.
    def checkpoint(self) -> tuple[object, int]:
        return self._rope.root, self.version

    def restore(self, checkpoint: tuple[object, int], *, start: CharOffset) -> None:
        root, version = checkpoint
        self._rope.root = root  # type: ignore[assignment]
        self.version = version
        for listener in self._listeners:
            listener(EditSpan(start=start, removed=0, inserted=0))


__all__ = ["TextBuffer", "ChangeListener"]
