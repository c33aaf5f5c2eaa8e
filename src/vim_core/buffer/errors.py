"""Errors raised when callers hand the core offsets it cannot honour."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .positions import Range


class BufferValidationError(RuntimeError):
    """Base class for rejected offsets and ranges."""

    def __init__(
        self,
        message: str,
        *,
        offset: Optional[int] = None,
        range: Optional["Range"] = None,
        length: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self.offset = offset
        self.range = range
        self.length = length


class OutOfBounds(BufferValidationError):
    """An offset, line, or range lies outside ``[0, length]``."""


class InvalidRange(BufferValidationError):
    """A range was built with ``start > end``."""


__all__ = ["BufferValidationError", "OutOfBounds", "InvalidRange"]
