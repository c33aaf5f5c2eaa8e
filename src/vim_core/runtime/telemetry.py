"""Logging and profiling for the core, backed by telelog.

Buffers and motions only use three entry points:

``get_logger(name)`` -- a cached logger built from the active configuration
``record_event(name, ...)`` -- one structured ``event::<name>`` record
``span(name, ...)`` -- profile a block, optionally as a tracked component

``configure`` swaps the active configuration, either for an explicit
``telelog.Config`` or for one of the named presets.
"""

from __future__ import annotations

import os
from contextlib import ExitStack, contextmanager
from typing import (
    Any,
    Callable,
    Dict,
    Iterator,
    List,
    MutableMapping,
    Optional,
    Tuple,
    cast,
)

import telelog  # type: ignore[import]

tl = cast(Any, telelog)

ENV_PREFIX = "VIM_CORE_"
DEFAULT_LOGGER_NAME = "vim_core"

_LOGGER_CACHE: MutableMapping[str, Any] = {}
_ACTIVE_CONFIG: Optional[Any] = None

_TRUTHY = {"1", "true", "yes", "on"}


def env(name: str, default: Optional[str] = None) -> Optional[str]:
    """Read ``VIM_CORE_<name>`` from the environment."""

    return os.getenv(f"{ENV_PREFIX}{name}", default)


def env_flag(name: str, default: bool) -> bool:
    raw = env(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in _TRUTHY


def _text(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, (dict, list, tuple, set)):
        return repr(value)
    return str(value)


def _log_path(fallback: str) -> str:
    return env("LOG_FILE") or fallback


def _development(config: Any) -> None:
    config.with_min_level("DEBUG")
    config.with_console_output(True)
    config.with_colored_output(True)


def _production(config: Any) -> None:
    config.with_min_level("INFO")
    config.with_console_output(False)
    config.with_file_output(_log_path("vim_core.log"))
    config.with_buffering(True)


def _performance(config: Any) -> None:
    # edit and motion spans are short; keep them out of the terminal
    config.with_min_level("DEBUG")
    config.with_console_output(False)
    config.with_json_format(True)
    config.with_buffering(True)
    config.with_file_output(_log_path("vim_core-performance.log"))


PRESETS: Dict[str, Callable[[Any], None]] = {
    "development": _development,
    "production": _production,
    "performance": _performance,
}


def _from_environment(config: Any) -> None:
    config.with_min_level((env("LOG_LEVEL") or "INFO").upper())
    console = not env_flag("DISABLE_CONSOLE", False)
    config.with_console_output(console)
    if console:
        config.with_colored_output(not env_flag("NO_COLOR", False))
    if env_flag("LOG_JSON", False):
        config.with_json_format(True)
    log_file = env("LOG_FILE")
    if log_file:
        config.with_file_output(log_file)
    if env_flag("LOG_BUFFERED", False):
        config.with_buffering(True)
        config.with_buffer_size(int(env("LOG_BUFFER_SIZE") or "2048"))


def build_config(preset: Optional[str] = None) -> Any:
    """Create a ``telelog.Config`` from a preset name or the environment."""

    config = tl.Config()
    if preset is None:
        _from_environment(config)
    else:
        try:
            PRESETS[preset.lower()](config)
        except KeyError:
            raise ValueError(f"Unknown preset '{preset}'.") from None
    config.with_profiling(True)
    return config


def configure(*, config: Optional[Any] = None, preset: Optional[str] = None) -> None:
    """Replace the active configuration and drop cached loggers.

    ``config`` and ``preset`` are mutually exclusive; with neither, the
    configuration is rebuilt from ``VIM_CORE_*`` variables.
    """

    global _ACTIVE_CONFIG
    if config is not None and preset is not None:
        raise ValueError("Provide either `config` or `preset`, not both.")
    if config is None:
        config = build_config(preset)
    else:
        config.with_profiling(True)
    _ACTIVE_CONFIG = config
    _LOGGER_CACHE.clear()


def get_logger(name: Optional[str] = None) -> Any:
    global _ACTIVE_CONFIG
    logger_name = name or env("LOGGER") or DEFAULT_LOGGER_NAME
    if logger_name not in _LOGGER_CACHE:
        if _ACTIVE_CONFIG is None:
            _ACTIVE_CONFIG = build_config()
        _LOGGER_CACHE[logger_name] = tl.Logger.with_config(
            logger_name, _ACTIVE_CONFIG
        )
    return _LOGGER_CACHE[logger_name]


def _emit(log: Any, level: str, message: str, payload: Dict[str, Any]) -> None:
    """Log ``message`` with ``payload`` as key/value pairs when supported."""

    name = level.lower()
    structured = getattr(log, f"{name}_with", None)
    if structured is not None:
        pairs: List[Tuple[str, str]] = [
            (str(key), _text(value)) for key, value in payload.items()
        ]
        structured(message, pairs)
        return
    plain = getattr(log, name, None)
    if plain is None:
        raise ValueError(f"Unsupported log level '{level}'.")
    plain(f"{message} {payload}")


def record_event(
    name: str,
    *,
    level: str = "info",
    data: Optional[Dict[str, Any]] = None,
) -> None:
    _emit(get_logger(), level, f"event::{name}", {"event": name, **(data or {})})


@contextmanager
def span(
    name: str,
    *,
    component: Optional[str | bool] = None,
    metadata: Optional[Dict[str, Any]] = None,
) -> Iterator[None]:
    """Profile the block under ``name``.

    ``component=True`` also tracks the block as a component of the same name;
    a string picks a different component name. ``metadata`` is attached as
    logger context for the duration of the block. If the block raises, a
    ``span::fail`` record is written at error level and the exception
    propagates unchanged.
    """

    log = get_logger()
    component_name = name if component is True else component or None
    context = {key: _text(value) for key, value in (metadata or {}).items()}

    with ExitStack() as stack:
        for key, value in context.items():
            log.add_context(key, value)
            stack.callback(log.remove_context, key)
        if component_name:
            stack.enter_context(log.track_component(component_name))
        stack.enter_context(log.profile(name))
        try:
            yield
        except Exception as exc:
            payload = {"span": name, **context, "reason": str(exc)}
            if component_name:
                payload["component"] = component_name
            _emit(log, "error", "span::fail", payload)
            raise


__all__ = [
    "PRESETS",
    "build_config",
    "configure",
    "env",
    "env_flag",
    "get_logger",
    "record_event",
    "span",
]
