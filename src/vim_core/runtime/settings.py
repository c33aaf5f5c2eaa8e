"""Environment-driven settings for buffer storage and word classification."""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache

from .telemetry import env, env_flag

MIN_LEAF_SIZE = 16
DEFAULT_LEAF_SIZE = 1024


@dataclass(frozen=True, slots=True)
class CoreSettings:
    """Tunables shared by the rope, the index translator, and motions."""

    leaf_size: int = DEFAULT_LEAF_SIZE
    underscore_is_word: bool = True

    def __post_init__(self) -> None:
        if self.leaf_size < MIN_LEAF_SIZE:
            raise ValueError(
                f"leaf_size must be at least {MIN_LEAF_SIZE}, got {self.leaf_size}"
            )


def load_settings() -> CoreSettings:
    """Build settings from ``VIM_CORE_*`` environment variables."""

    raw_leaf = env("LEAF_SIZE")
    return CoreSettings(
        leaf_size=int(raw_leaf) if raw_leaf else DEFAULT_LEAF_SIZE,
        underscore_is_word=env_flag("UNDERSCORE_IS_WORD", True),
    )


@lru_cache(maxsize=1)
def get_settings() -> CoreSettings:
    return load_settings()


__all__ = ["CoreSettings", "get_settings", "load_settings"]
