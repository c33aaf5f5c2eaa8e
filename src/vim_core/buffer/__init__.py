"""Text storage, coordinate translation, selections, and edit operations."""

from .buffer import Buffer, BufferView, Transaction
from .document import TextBuffer
from .edits import Edit, EditRecord, EditSpan
from .errors import BufferValidationError, InvalidRange, OutOfBounds
from .index import IndexTranslator, WordClass, classify
from .positions import CharOffset, LineColumn, Range
from .state import SelectionRange, SelectionSet, remap_offset
from .validation import ensure_index, ensure_offset, ensure_range

__all__ = [
    "Buffer",
    "BufferView",
    "Transaction",
    "TextBuffer",
    "IndexTranslator",
    "WordClass",
    "classify",
    "CharOffset",
    "LineColumn",
    "Range",
    "SelectionRange",
    "SelectionSet",
    "remap_offset",
    "Edit",
    "EditRecord",
    "EditSpan",
    "BufferValidationError",
    "OutOfBounds",
    "InvalidRange",
    "ensure_offset",
    "ensure_index",
    "ensure_range",
]
