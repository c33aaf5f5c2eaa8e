"""Vim-style motions resolved purely against buffer positions."""

from .models import Motion, MotionKind
from .engine import resolve, step

__all__ = ["Motion", "MotionKind", "resolve", "step"]
