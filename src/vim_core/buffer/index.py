"""Line/column translation and boundary classification over a ``TextBuffer``.

The translator keeps a table of line-start offsets that is only valid up to
the last mutation point. On every buffer change it drops entries past the
edit; the missing suffix is rebuilt on demand by scanning forward from the
last known-good offset, and only as far as the current query needs.
"""

from __future__ import annotations

import unicodedata
from bisect import bisect_right
from enum import IntEnum
from typing import List, Optional

from vim_core.runtime.settings import CoreSettings

from .document import TextBuffer
from .edits import EditSpan
from .positions import CharOffset, LineColumn
from .validation import ensure_line, ensure_offset

ZERO_WIDTH_JOINER = "\u200d"
_BLANKS = frozenset(" \t")


class WordClass(IntEnum):
    WHITESPACE = 0
    PUNCTUATION = 1
    WORD = 2


def classify(ch: str, *, underscore_is_word: bool = True) -> WordClass:
    """Three-way split used by word motions.

    Anything ``str.isalnum`` accepts is a word character, so accented letters
    and CJK ideographs join words the same way ASCII letters do.
    """

    if ch.isspace():
        return WordClass.WHITESPACE
    if ch.isalnum() or (ch == "_" and underscore_is_word):
        return WordClass.WORD
    return WordClass.PUNCTUATION


def _is_extend(ch: str) -> bool:
    if ch == ZERO_WIDTH_JOINER:
        return True
    code = ord(ch)
    if 0xFE00 <= code <= 0xFE0F or 0xE0100 <= code <= 0xE01EF:
        return True  # variation selectors
    if 0x1F3FB <= code <= 0x1F3FF:
        return True  # emoji skin tone modifiers
    return unicodedata.category(ch) in ("Mn", "Me", "Mc")


def _is_regional_indicator(ch: str) -> bool:
    return 0x1F1E6 <= ord(ch) <= 0x1F1FF


class IndexTranslator:
    """Maps char offsets to (line, column) and classifies boundaries."""

    def __init__(
        self, buffer: TextBuffer, *, settings: Optional[CoreSettings] = None
    ) -> None:
        self.buffer = buffer
        self.settings = settings or buffer.settings
        self._line_starts: List[CharOffset] = [0]
        self._scanned_to: CharOffset = 0
        buffer.subscribe(self.invalidate)

    def detach(self) -> None:
        self.buffer.unsubscribe(self.invalidate)

    def invalidate(self, change: EditSpan) -> None:
        """Forget everything learned at or after ``change.start``."""

        at = change.start
        keep = bisect_right(self._line_starts, at)
        del self._line_starts[keep:]
        self._scanned_to = min(self._scanned_to, at)

    @property
    def cached_lines(self) -> int:
        return len(self._line_starts)

    def _scan(
        self, *, to_offset: Optional[int] = None, to_line: Optional[int] = None
    ) -> None:
        length = self.buffer.length()
        if self._scanned_to >= length:
            return
        if to_offset is not None and self._scanned_to >= to_offset:
            return
        if to_line is not None and len(self._line_starts) > to_line:
            return
        base = self._scanned_to
        for chunk in self.buffer.chunks(base, length):
            found = chunk.find("\n")
            while found != -1:
                self._line_starts.append(base + found + 1)
                found = chunk.find("\n", found + 1)
            base += len(chunk)
            self._scanned_to = base
            if to_offset is not None and base >= to_offset:
                return
            if to_line is not None and len(self._line_starts) > to_line:
                return

    def line_count(self) -> int:
        return self.buffer.line_count()

    def clamp_line(self, line: int) -> int:
        return max(0, min(line, self.line_count() - 1))

    def line_start(self, line: int) -> CharOffset:
        ensure_line(line, self.line_count())
        self._scan(to_line=line)
        return self._line_starts[line]

    def line_end(self, line: int) -> CharOffset:
        """Offset of the line's terminator, or the document end."""

        ensure_line(line, self.line_count())
        if line + 1 < self.line_count():
            return self.line_start(line + 1) - 1
        return self.buffer.length()

    def line_length(self, line: int) -> int:
        return self.line_end(line) - self.line_start(line)

    def line_text(self, line: int) -> str:
        start = self.line_start(line)
        end = self.line_end(line)
        return "".join(self.buffer.chunks(start, end))

    def offset_to_line_column(self, offset: CharOffset) -> LineColumn:
        ensure_offset(offset, self.buffer.length())
        self._scan(to_offset=offset)
        line = bisect_right(self._line_starts, offset) - 1
        return LineColumn(line, offset - self._line_starts[line])

    def line_column_to_offset(self, lc: LineColumn) -> CharOffset:
        """Convert back to an offset, clamping the column to the line length."""

        line, column = lc
        start = self.line_start(line)
        if column < 0:
            return start
        return start + min(column, self.line_end(line) - start)

    def word_class(self, offset: CharOffset) -> WordClass:
        return classify(
            self.buffer.char_at(offset),
            underscore_is_word=self.settings.underscore_is_word,
        )

    def is_word_boundary(self, offset: CharOffset) -> bool:
        length = self.buffer.length()
        ensure_offset(offset, length)
        if offset == 0 or offset == length:
            return True
        return self.word_class(offset - 1) != self.word_class(offset)

    def is_grapheme_boundary(self, offset: CharOffset) -> bool:
        """Approximate extended grapheme cluster boundaries.

        Covers CR LF, combining marks, variation selectors, skin tone
        modifiers, ZWJ sequences, and regional indicator pairs. Hangul syllable
        composition from conjoining jamo is not modelled.
        """

        length = self.buffer.length()
        ensure_offset(offset, length)
        if offset == 0 or offset == length:
            return True
        before = self.buffer.char_at(offset - 1)
        after = self.buffer.char_at(offset)
        if before == "\r" and after == "\n":
            return False
        if before in "\r\n" or after in "\r\n":
            return True
        if _is_extend(after):
            return False
        if before == ZERO_WIDTH_JOINER:
            return False
        if _is_regional_indicator(before) and _is_regional_indicator(after):
            run = 0
            cursor = offset - 1
            while cursor >= 0 and _is_regional_indicator(self.buffer.char_at(cursor)):
                run += 1
                cursor -= 1
            return run % 2 == 0
        return True

    def next_grapheme_boundary(self, offset: CharOffset) -> CharOffset:
        length = self.buffer.length()
        ensure_offset(offset, length)
        cursor = offset
        while cursor < length:
            cursor += 1
            if self.is_grapheme_boundary(cursor):
                break
        return cursor

    def prev_grapheme_boundary(self, offset: CharOffset) -> CharOffset:
        ensure_offset(offset, self.buffer.length())
        cursor = offset
        while cursor > 0:
            cursor -= 1
            if self.is_grapheme_boundary(cursor):
                break
        return cursor

    def is_blank_line(self, line: int) -> bool:
        return self.line_start(line) == self.line_end(line)

    def first_non_blank(self, line: int) -> CharOffset:
        start = self.line_start(line)
        end = self.line_end(line)
        cursor = start
        for chunk in self.buffer.chunks(start, end):
            for ch in chunk:
                if ch not in _BLANKS:
                    return cursor
                cursor += 1
        return end


__all__ = ["IndexTranslator", "WordClass", "classify"]
