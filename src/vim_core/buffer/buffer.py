"""High-level buffer facade combining document, index, and selections.

All edit operations go through ``Transaction``: it opens a telemetry span,
checkpoints the rope root and the selection set, and puts both back if the
edit raises. Successful edits return an ``EditRecord`` the caller can turn
into undo history.
"""

from __future__ import annotations

from contextlib import AbstractContextManager
from dataclasses import dataclass
from typing import ContextManager, NoReturn, Optional, Tuple

from vim_core.motions import engine as motion_engine
from vim_core.motions.models import Motion
from vim_core.runtime import telemetry
from vim_core.runtime.settings import CoreSettings

from .document import TextBuffer
from .edits import Edit, EditRecord, EditSpan
from .errors import BufferValidationError
from .index import IndexTranslator
from .positions import CharOffset, Range
from .state import SelectionRange, SelectionSet
from .validation import ensure_range


@dataclass(slots=True)
class BufferView:
    version: int
    text: str
    selections: Tuple[SelectionRange, ...]
    primary: Range


class Buffer:
    def __init__(
        self,
        *,
        name: str = "default",
        document: Optional[TextBuffer] = None,
        selections: Optional[SelectionSet] = None,
        settings: Optional[CoreSettings] = None,
    ) -> None:
        self.name = name
        if document is None:
            document = TextBuffer(settings=settings)
        elif settings is not None and settings != document.settings:
            raise ValueError("settings differ from the settings of `document`")
        self.document = document
        self.index = IndexTranslator(self.document)
        self.selections = selections if selections is not None else SelectionSet()
        self.selections.bind_length(self.document.length)

    @classmethod
    def from_text(
        cls,
        text: str,
        *,
        name: str = "default",
        settings: Optional[CoreSettings] = None,
    ) -> "Buffer":
        return cls(name=name, document=TextBuffer(text, settings=settings))

    def snapshot(self) -> BufferView:
        return BufferView(
            version=self.document.version,
            text=self.document.text(),
            selections=self.selections.selections(),
            primary=self.selections.primary(),
        )

    def text(self) -> str:
        return self.document.text()

    def line_text(self, line: int) -> str:
        return self.index.line_text(line)

    def get_text_range(self, range: Range) -> str:
        return self.document.slice(range)

    def insert_at(self, pos: CharOffset, text: str) -> EditRecord:
        try:
            target = Range.empty(pos)
        except BufferValidationError as exc:
            self._reject("insert_at", exc)
        return self._apply(target, text, label="insert_at")

    def delete_range(self, range: Range) -> EditRecord:
        return self._apply(range, "", label="delete_range")

    def replace_range(self, range: Range, text: str) -> EditRecord:
        return self._apply(range, text, label="replace_range")

    def apply_edit(self, edit: Edit) -> EditRecord:
        return self._apply(edit.range, edit.text, label="apply_edit")

    def replace_selection(self, text: str) -> EditRecord:
        """Replace the primary selection and leave the cursor after ``text``."""

        target = self.selections.primary()
        return self._apply(
            target,
            text,
            label="replace_selection",
            collapse_to=target.start + len(text),
        )

    def backspace(self) -> Optional[EditRecord]:
        selection = self.selections.primary_selection()
        if not selection.is_empty:
            return self._apply(selection.as_range(), "", label="backspace")
        cursor = selection.head
        if cursor == 0:
            return None
        start = self.index.prev_grapheme_boundary(cursor)
        return self._apply(Range(start, cursor), "", label="backspace")

    def delete_forward(self) -> Optional[EditRecord]:
        selection = self.selections.primary_selection()
        if not selection.is_empty:
            return self._apply(selection.as_range(), "", label="delete_forward")
        cursor = selection.head
        if cursor >= self.document.length():
            return None
        end = self.index.next_grapheme_boundary(cursor)
        return self._apply(Range(cursor, end), "", label="delete_forward")

    def resolve(
        self, motion: Motion, *, from_offset: Optional[CharOffset] = None
    ) -> CharOffset:
        goal = None
        if from_offset is None:
            from_offset = self.selections.cursor()
            goal = self.selections.primary_selection().goal_column
        return motion_engine.resolve(
            self.document, self.index, from_offset, motion, goal_column=goal
        )

    def move_primary(self, motion: Motion, *, extend: bool = False) -> CharOffset:
        """Move the primary head to the motion target; keep the anchor if extending.

        Vertical moves remember the column they started from as the goal
        column, so a run of ``j``/``k`` presses returns to it after crossing
        short lines. Any other motion clears it.
        """

        current = self.selections.primary_selection()
        target = self.resolve(motion)
        goal = None
        if motion.kind.is_vertical:
            goal = current.goal_column
            if goal is None:
                goal = self.index.offset_to_line_column(current.head).column
        anchor = current.anchor if extend else target
        self.selections.set_primary(SelectionRange(anchor, target, goal))
        return target

    def delete_to(self, motion: Motion) -> Optional[EditRecord]:
        """Delete between the cursor and the motion target (an operator + motion).

        Inclusive motions (``e``, ``f``) also delete the character under a
        target that lies ahead of the cursor.
        """

        cursor = self.selections.cursor()
        target = self.resolve(motion)
        if target == cursor:
            return None
        span = Range.between(cursor, target)
        if motion.kind.inclusive and target > cursor:
            span = Range(cursor, min(target + 1, self.document.length()))
        return self._apply(span, "", label="delete_to")

    def _apply(
        self,
        range: Range,
        text: str,
        *,
        label: str,
        collapse_to: Optional[CharOffset] = None,
    ) -> EditRecord:
        try:
            ensure_range(range, self.document.length())
        except BufferValidationError as exc:
            self._reject(label, exc)

        with Transaction(self, label, start=range.start) as tx:
            removed = "" if range.is_empty else self.document.slice(range)
            self.document.delete(range)
            self.document.insert(range.start, text)
            change = EditSpan(range.start, len(removed), len(text))
            self.selections.remap_after_edit(change, length=self.document.length())
            if collapse_to is not None:
                self.selections.set_primary(SelectionRange.cursor(collapse_to))
            return tx.commit(range.start, text, removed)

    def _reject(self, label: str, exc: BufferValidationError) -> NoReturn:
        telemetry.record_event(
            "edit.rejected",
            level="warning",
            data={"buffer": self.name, "label": label, "reason": str(exc)},
        )
        raise exc


class Transaction(AbstractContextManager["Transaction"]):
    def __init__(self, buffer: Buffer, label: str, *, start: CharOffset = 0) -> None:
        self.buffer = buffer
        self.label = label
        self.start = start
        self._span_cm: Optional[ContextManager[object]] = None
        self._checkpoint: Optional[tuple[object, int]] = None
        self._selections_before: Tuple[SelectionRange, ...] = ()
        self._primary_before = 0

    def __enter__(self) -> "Transaction":
        self._checkpoint = self.buffer.document.checkpoint()
        self._selections_before = self.buffer.selections.selections()
        self._primary_before = self._selections_before.index(
            self.buffer.selections.primary_selection()
        )
        self._span_cm = telemetry.span(
            name=f"buffer::{self.label}",
            component=True,
            metadata={"buffer": self.buffer.name},
        )
        self._span_cm.__enter__()
        return self

    def commit(self, pos: CharOffset, inserted: str, removed: str) -> EditRecord:
        return EditRecord(
            pos=pos,
            inserted=inserted,
            removed=removed,
            label=self.label,
            selections_before=self._selections_before,
            selections_after=self.buffer.selections.selections(),
        )

    def rollback(self) -> None:
        if self._checkpoint is not None:
            self.buffer.document.restore(self._checkpoint, start=self.start)
        self.buffer.selections.replace_all(
            self._selections_before, primary_index=self._primary_before
        )

    def __exit__(self, exc_type, exc, tb) -> bool:
        if exc_type is not None:
            self.rollback()
        if self._span_cm is not None:
            self._span_cm.__exit__(exc_type, exc, tb)
        return False


__all__ = ["Buffer", "BufferView", "Transaction"]
