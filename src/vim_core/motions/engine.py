"""Resolve motions to target offsets.

Every step function maps ``(buffer, translator, offset, motion)`` to a new
offset without touching the buffer. ``resolve`` repeats a single step
``motion.count`` times, so intermediate clamps at document or line edges are
simply absorbed by later steps. Vertical motions are the exception: they jump
``count`` lines at once so the goal column survives short lines in between.
"""

from __future__ import annotations

from typing import Callable, Dict, Optional

from vim_core.buffer.document import TextBuffer
from vim_core.buffer.index import IndexTranslator, WordClass
from vim_core.buffer.positions import CharOffset, LineColumn, Range
from vim_core.buffer.validation import ensure_offset
from vim_core.runtime import telemetry

from .models import Motion, MotionKind

StepFunc = Callable[[TextBuffer, IndexTranslator, CharOffset, Motion], CharOffset]


def _char_forward(
    buffer: TextBuffer, translator: IndexTranslator, offset: CharOffset, motion: Motion
) -> CharOffset:
    return min(offset + 1, buffer.length())


def _char_backward(
    buffer: TextBuffer, translator: IndexTranslator, offset: CharOffset, motion: Motion
) -> CharOffset:
    return max(offset - 1, 0)


def _grapheme_forward(
    buffer: TextBuffer, translator: IndexTranslator, offset: CharOffset, motion: Motion
) -> CharOffset:
    return translator.next_grapheme_boundary(offset)


def _grapheme_backward(
    buffer: TextBuffer, translator: IndexTranslator, offset: CharOffset, motion: Motion
) -> CharOffset:
    return translator.prev_grapheme_boundary(offset)


def _word_forward(
    buffer: TextBuffer, translator: IndexTranslator, offset: CharOffset, motion: Motion
) -> CharOffset:
    length = buffer.length()
    if offset >= length:
        return length
    cursor = offset
    start_class = translator.word_class(cursor)
    if start_class is not WordClass.WHITESPACE:
        while cursor < length and translator.word_class(cursor) is start_class:
            cursor += 1
    while cursor < length and translator.word_class(cursor) is WordClass.WHITESPACE:
        cursor += 1
    return cursor


def _word_backward(
    buffer: TextBuffer, translator: IndexTranslator, offset: CharOffset, motion: Motion
) -> CharOffset:
    if offset <= 0:
        return 0
    cursor = offset - 1
    while cursor > 0 and translator.word_class(cursor) is WordClass.WHITESPACE:
        cursor -= 1
    word_class = translator.word_class(cursor)
    if word_class is WordClass.WHITESPACE:
        return 0
    while cursor > 0 and translator.word_class(cursor - 1) is word_class:
        cursor -= 1
    return cursor


def _word_end(
    buffer: TextBuffer, translator: IndexTranslator, offset: CharOffset, motion: Motion
) -> CharOffset:
    length = buffer.length()
    cursor = offset + 1
    while cursor < length and translator.word_class(cursor) is WordClass.WHITESPACE:
        cursor += 1
    if cursor >= length:
        # nothing but whitespace ahead: settle on the last character
        return offset if offset >= length else length - 1
    word_class = translator.word_class(cursor)
    while cursor + 1 < length and translator.word_class(cursor + 1) is word_class:
        cursor += 1
    return cursor


def _vertical(
    translator: IndexTranslator,
    offset: CharOffset,
    delta: int,
    goal_column: Optional[int] = None,
) -> CharOffset:
    """Move ``delta`` lines, stopping at the first or last line.

    The column aims for ``goal_column`` (the current column when ``None``) and
    clamps to the target line's length.
    """

    line, column = translator.offset_to_line_column(offset)
    target = translator.clamp_line(line + delta)
    if target == line:
        return offset
    goal = column if goal_column is None else goal_column
    return translator.line_column_to_offset(LineColumn(target, goal))


def _line_down(
    buffer: TextBuffer, translator: IndexTranslator, offset: CharOffset, motion: Motion
) -> CharOffset:
    return _vertical(translator, offset, 1)


def _line_up(
    buffer: TextBuffer, translator: IndexTranslator, offset: CharOffset, motion: Motion
) -> CharOffset:
    return _vertical(translator, offset, -1)


def _line_start(
    buffer: TextBuffer, translator: IndexTranslator, offset: CharOffset, motion: Motion
) -> CharOffset:
    return translator.line_start(translator.offset_to_line_column(offset).line)


def _first_non_blank(
    buffer: TextBuffer, translator: IndexTranslator, offset: CharOffset, motion: Motion
) -> CharOffset:
    return translator.first_non_blank(translator.offset_to_line_column(offset).line)


def _line_end(
    buffer: TextBuffer, translator: IndexTranslator, offset: CharOffset, motion: Motion
) -> CharOffset:
    return translator.line_end(translator.offset_to_line_column(offset).line)


def _find_char_forward(
    buffer: TextBuffer, translator: IndexTranslator, offset: CharOffset, motion: Motion
) -> CharOffset:
    assert motion.char is not None
    end = translator.line_end(translator.offset_to_line_column(offset).line)
    if offset + 1 >= end:
        return offset
    found = buffer.slice(Range(offset + 1, end)).find(motion.char)
    return offset if found == -1 else offset + 1 + found


def _find_char_backward(
    buffer: TextBuffer, translator: IndexTranslator, offset: CharOffset, motion: Motion
) -> CharOffset:
    assert motion.char is not None
    start = translator.line_start(translator.offset_to_line_column(offset).line)
    if offset <= start:
        return offset
    found = buffer.slice(Range(start, offset)).rfind(motion.char)
    return offset if found == -1 else start + found


def _paragraph_forward(
    buffer: TextBuffer, translator: IndexTranslator, offset: CharOffset, motion: Motion
) -> CharOffset:
    line = translator.offset_to_line_column(offset).line
    last = translator.line_count()
    while line < last and translator.is_blank_line(line):
        line += 1
    while line < last and not translator.is_blank_line(line):
        line += 1
    if line >= last:
        return buffer.length()
    return translator.line_start(line)


def _paragraph_backward(
    buffer: TextBuffer, translator: IndexTranslator, offset: CharOffset, motion: Motion
) -> CharOffset:
    line = translator.offset_to_line_column(offset).line
    while line >= 0 and translator.is_blank_line(line):
        line -= 1
    while line >= 0 and not translator.is_blank_line(line):
        line -= 1
    if line < 0:
        return 0
    return translator.line_start(line)


def _document_start(
    buffer: TextBuffer, translator: IndexTranslator, offset: CharOffset, motion: Motion
) -> CharOffset:
    return 0


def _document_end(
    buffer: TextBuffer, translator: IndexTranslator, offset: CharOffset, motion: Motion
) -> CharOffset:
    return buffer.length()


_STEPS: Dict[MotionKind, StepFunc] = {
    MotionKind.CHAR_FORWARD: _char_forward,
    MotionKind.CHAR_BACKWARD: _char_backward,
    MotionKind.GRAPHEME_FORWARD: _grapheme_forward,
    MotionKind.GRAPHEME_BACKWARD: _grapheme_backward,
    MotionKind.WORD_FORWARD: _word_forward,
    MotionKind.WORD_BACKWARD: _word_backward,
    MotionKind.WORD_END: _word_end,
    MotionKind.LINE_DOWN: _line_down,
    MotionKind.LINE_UP: _line_up,
    MotionKind.LINE_START: _line_start,
    MotionKind.FIRST_NON_BLANK: _first_non_blank,
    MotionKind.LINE_END: _line_end,
    MotionKind.FIND_CHAR_FORWARD: _find_char_forward,
    MotionKind.FIND_CHAR_BACKWARD: _find_char_backward,
    MotionKind.PARAGRAPH_FORWARD: _paragraph_forward,
    MotionKind.PARAGRAPH_BACKWARD: _paragraph_backward,
    MotionKind.DOCUMENT_START: _document_start,
    MotionKind.DOCUMENT_END: _document_end,
}


def step(
    buffer: TextBuffer, translator: IndexTranslator, offset: CharOffset, motion: Motion
) -> CharOffset:
    """Apply one repetition of ``motion`` from ``offset``."""

    return _STEPS[motion.kind](buffer, translator, offset, motion)


def resolve(
    buffer: TextBuffer,
    translator: IndexTranslator,
    from_offset: CharOffset,
    motion: Motion,
    *,
    goal_column: Optional[int] = None,
) -> CharOffset:
    """Return the offset ``motion`` lands on when started at ``from_offset``.

    Vertical motions keep one goal column for the whole count, so passing
    over a short line does not pull the cursor left. ``goal_column`` carries a
    column remembered from earlier vertical moves; other motions ignore it.
    """

    ensure_offset(from_offset, buffer.length())
    with telemetry.span(
        f"motion::{motion.kind.value}",
        component=True,
        metadata={"count": motion.count},
    ):
        if motion.kind.is_vertical:
            delta = motion.count
            if motion.kind is MotionKind.LINE_UP:
                delta = -delta
            return _vertical(translator, from_offset, delta, goal_column)
        position = from_offset
        for _ in range(motion.count):
            target = step(buffer, translator, position, motion)
            if target == position:
                break
            position = target
    return position


__all__ = ["resolve", "step"]
