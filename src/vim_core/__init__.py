"""UI-agnostic core of a Vim-like text editor."""

__all__ = [
    "buffer",
    "motions",
    "runtime",
]

__version__ = "0.1.0"
