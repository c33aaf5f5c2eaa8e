from __future__ import annotations

import random

import pytest

from vim_core.buffer import (
    IndexTranslator,
    LineColumn,
    OutOfBounds,
    Range,
    TextBuffer,
    WordClass,
    classify,
)
from vim_core.runtime.settings import CoreSettings

SMALL_LEAVES = CoreSettings(leaf_size=16)


def make_translator(
    text: str, *, settings: CoreSettings = SMALL_LEAVES
) -> IndexTranslator:
    return IndexTranslator(TextBuffer(text, settings=settings))


def reference_line_column(text: str, offset: int) -> LineColumn:
    before = text[:offset]
    line = before.count("\n")
    return LineColumn(line, offset - (before.rfind("\n") + 1))


def test_newline_belongs_to_preceding_line() -> None:
    translator = make_translator("ab\ncd")

    assert translator.offset_to_line_column(2) == LineColumn(0, 2)
    assert translator.offset_to_line_column(3) == LineColumn(1, 0)
    assert translator.offset_to_line_column(5) == LineColumn(1, 2)


def test_line_bounds() -> None:
    translator = make_translator("one\n\nthree")

    assert [translator.line_start(i) for i in range(3)] == [0, 4, 5]
    assert [translator.line_end(i) for i in range(3)] == [3, 4, 10]
    assert translator.line_text(2) == "three"
    assert translator.line_text(1) == ""
    assert translator.is_blank_line(1)


def test_trailing_newline_adds_empty_line() -> None:
    translator = make_translator("a\n")

    assert translator.line_count() == 2
    assert translator.line_start(1) == 2
    assert translator.line_end(1) == 2
    assert translator.offset_to_line_column(2) == LineColumn(1, 0)


def test_column_is_clamped_to_line_length() -> None:
    translator = make_translator("hi\nthere")

    assert translator.line_column_to_offset(LineColumn(0, 99)) == 2
    assert translator.line_column_to_offset(LineColumn(1, 99)) == 8


def test_out_of_range_lines_and_offsets_raise() -> None:
    translator = make_translator("hi\nthere")

    with pytest.raises(OutOfBounds):
        translator.line_column_to_offset(LineColumn(2, 0))
    with pytest.raises(OutOfBounds):
        translator.offset_to_line_column(9)
    with pytest.raises(OutOfBounds):
        translator.line_start(-1)


def test_roundtrip_for_every_offset() -> None:
    text = "alpha\n\n beta gamma\n\u00e9\u00e8\n\nlast line without newline"
    translator = make_translator(text)

    for offset in range(len(text) + 1):
        lc = translator.offset_to_line_column(offset)
        assert lc == reference_line_column(text, offset)
        assert translator.line_column_to_offset(lc) == offset


def test_queries_see_edits_immediately() -> None:
    buffer = TextBuffer("aaa\nbbb\nccc", settings=SMALL_LEAVES)
    translator = IndexTranslator(buffer)
    assert translator.offset_to_line_column(10) == LineColumn(2, 2)

    buffer.insert(1, "\n\n")
    assert translator.offset_to_line_column(12) == LineColumn(4, 2)
    assert translator.line_start(1) == 2

    buffer.delete(Range(0, 6))
    assert buffer.text() == "bbb\nccc"
    assert translator.line_count() == 2
    assert translator.offset_to_line_column(4) == LineColumn(1, 0)


def test_invalidation_keeps_prefix_before_edit() -> None:
    text = "\n".join(f"line {i}" for i in range(50))
    buffer = TextBuffer(text, settings=SMALL_LEAVES)
    translator = IndexTranslator(buffer)
    translator.offset_to_line_column(buffer.length())
    assert translator.cached_lines == 50

    edit_at = translator.line_start(30) + 2
    buffer.insert(edit_at, "X")

    assert translator.cached_lines == 31
    assert translator.line_start(40) == text.index("line 40") + 1


def test_random_edits_never_serve_stale_lines() -> None:
    rng = random.Random(99)
    model = "ab\ncd\n\nef"
    buffer = TextBuffer(model, settings=SMALL_LEAVES)
    translator = IndexTranslator(buffer)

    for _ in range(300):
        if model and rng.random() < 0.4:
            start = rng.randrange(len(model))
            end = min(len(model), start + rng.randrange(1, 10))
            buffer.delete(Range(start, end))
            model = model[:start] + model[end:]
        else:
            at = rng.randrange(len(model) + 1)
            text = rng.choice(["x", "\n", "yz\n", "\n\n", "word "])
            buffer.insert(at, text)
            model = model[:at] + text + model[at:]

        probe = rng.randrange(len(model) + 1)
        expected = reference_line_column(model, probe)
        assert translator.offset_to_line_column(probe) == expected


def test_word_classes() -> None:
    assert classify("a") is WordClass.WORD
    assert classify("7") is WordClass.WORD
    assert classify("_") is WordClass.WORD
    assert classify("_", underscore_is_word=False) is WordClass.PUNCTUATION
    assert classify("\u4e2d") is WordClass.WORD
    assert classify(".") is WordClass.PUNCTUATION
    assert classify("\t") is WordClass.WHITESPACE
    assert classify("\n") is WordClass.WHITESPACE


def test_word_boundaries() -> None:
    translator = make_translator("foo.bar baz")

    assert translator.is_word_boundary(0)
    assert not translator.is_word_boundary(1)
    assert translator.is_word_boundary(3)
    assert translator.is_word_boundary(4)
    assert translator.is_word_boundary(7)
    assert translator.is_word_boundary(11)


def test_grapheme_boundaries() -> None:
    # e + combining acute, CR LF, a flag made of two regional indicators
    text = "e\u0301x\r\n\U0001f1eb\U0001f1f7!"
    translator = make_translator(text)

    assert not translator.is_grapheme_boundary(1)
    assert translator.is_grapheme_boundary(2)
    assert not translator.is_grapheme_boundary(4)
    assert not translator.is_grapheme_boundary(6)
    assert translator.is_grapheme_boundary(7)
    assert translator.next_grapheme_boundary(0) == 2
    assert translator.prev_grapheme_boundary(7) == 5


def test_zwj_sequence_is_one_cluster() -> None:
    family = "\U0001f468\u200d\U0001f469\u200d\U0001f467"
    translator = make_translator(f"a{family}b")

    assert translator.next_grapheme_boundary(1) == 1 + len(family)
    assert translator.prev_grapheme_boundary(1 + len(family)) == 1


def test_first_non_blank() -> None:
    translator = make_translator("  \tindented\n   \n")

    assert translator.first_non_blank(0) == 3
    assert translator.first_non_blank(1) == translator.line_end(1)
    assert translator.first_non_blank(2) == translator.line_start(2)
