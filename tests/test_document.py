from __future__ import annotations

import random

import pytest

from vim_core.buffer import InvalidRange, OutOfBounds, Range, TextBuffer
from vim_core.runtime.settings import CoreSettings

SMALL_LEAVES = CoreSettings(leaf_size=16)


def make_buffer(text: str = "", *, settings: CoreSettings = SMALL_LEAVES) -> TextBuffer:
    return TextBuffer(text, settings=settings)


def test_empty_buffer_has_one_line() -> None:
    buffer = make_buffer()

    assert buffer.length() == 0
    assert buffer.line_count() == 1
    assert buffer.is_empty()
    assert buffer.text() == ""


def test_insert_at_end_appends() -> None:
    buffer = make_buffer("abc")

    buffer.insert(3, "def")

    assert buffer.text() == "abcdef"
    assert buffer.length() == 6


def test_deleting_newline_joins_lines() -> None:
    buffer = make_buffer("hello\nworld")

    buffer.delete(Range(5, 6))

    assert buffer.text() == "helloworld"
    assert buffer.line_count() == 1


def test_slice_and_char_at_across_leaves() -> None:
    text = "".join(chr(ord("a") + i % 26) for i in range(200))
    buffer = make_buffer(text)

    assert buffer.slice(Range(10, 150)) == text[10:150]
    assert buffer.char_at(199) == text[199]
    assert buffer.char_at(16) == text[16]


def test_unicode_counts_scalar_values() -> None:
    buffer = make_buffer("h\u00e9llo w\u00f6rld \U0001f600")

    assert buffer.length() == 13
    assert buffer.char_at(12) == "\U0001f600"
    assert buffer.slice(Range(1, 5)) == "\u00e9llo"


def test_empty_delete_is_noop() -> None:
    buffer = make_buffer("abc")
    version = buffer.version

    buffer.delete(Range(1, 1))

    assert buffer.text() == "abc"
    assert buffer.version == version


def test_out_of_bounds_operations_raise() -> None:
    buffer = make_buffer("abc")

    with pytest.raises(OutOfBounds):
        buffer.insert(4, "x")
    with pytest.raises(OutOfBounds):
        buffer.delete(Range(2, 4))
    with pytest.raises(OutOfBounds):
        buffer.slice(Range(0, 5))
    with pytest.raises(OutOfBounds):
        buffer.char_at(3)
    with pytest.raises(OutOfBounds):
        buffer.insert(-1, "x")

    assert buffer.text() == "abc"


def test_range_rejects_reversed_bounds() -> None:
    with pytest.raises(InvalidRange):
        Range(3, 1)
    assert Range.between(3, 1) == Range(1, 3)


def test_insert_then_delete_restores_content() -> None:
    buffer = make_buffer("the quick brown fox\njumps over\nthe lazy dog")
    before = buffer.text()

    buffer.insert(10, "very\nvery ")
    buffer.delete(Range(10, 20))

    assert buffer.length() == len(before)
    assert buffer.slice(Range(0, buffer.length())) == before


def test_subscribers_receive_edit_spans() -> None:
    buffer = make_buffer("abc")
    seen = []
    buffer.subscribe(seen.append)

    buffer.insert(1, "xy")
    buffer.delete(Range(0, 2))

    assert [(s.start, s.removed, s.inserted) for s in seen] == [(1, 0, 2), (0, 2, 0)]
    assert buffer.version == 2


def test_random_edits_match_string_model() -> None:
    rng = random.Random(1234)
    alphabet = "ab \n_\u00e9"
    model = "".join(rng.choice(alphabet) for _ in range(300))
    buffer = make_buffer(model)

    for _ in range(500):
        if model and rng.random() < 0.45:
            start = rng.randrange(len(model))
            end = min(len(model), start + rng.randrange(1, 40))
            buffer.delete(Range(start, end))
            model = model[:start] + model[end:]
        else:
            at = rng.randrange(len(model) + 1)
            text = "".join(rng.choice(alphabet) for _ in range(rng.randrange(1, 50)))
            buffer.insert(at, text)
            model = model[:at] + text + model[at:]

        assert buffer.length() == len(model)
        assert buffer.line_count() == model.count("\n") + 1

    assert buffer.text() == model
    assert "".join(buffer.chunks()) == model


def test_large_document_stays_shallow() -> None:
    text = "line of text\n" * 100_000
    buffer = TextBuffer(text, settings=CoreSettings(leaf_size=1024))

    for i in range(200):
        buffer.insert((i * 7919) % buffer.length(), "x")

    assert buffer.length() == len(text) + 200
    assert buffer.line_count() == 100_001
    assert buffer._rope.height < 40


def test_leaf_size_below_minimum_is_rejected() -> None:
    with pytest.raises(ValueError):
        CoreSettings(leaf_size=4)
