"""Shared logging helpers for the Precision Lens project."""

from __future__ import annotations

import logging
from typing import Optional, Union

MODULE_LOGGER_NAMESPACE = "precision_lens"
DEFAULT_COMPONENT = "Core"


def _normalize_logger_name(name: Optional[str]) -> str:
    if not name:
        return MODULE_LOGGER_NAMESPACE
    if name.startswith(MODULE_LOGGER_NAMESPACE):
        return name
    return f"{MODULE_LOGGER_NAMESPACE}.{name}"


def _derive_component(name: str) -> str:
    if not name:
        return DEFAULT_COMPONENT
    if name.startswith(MODULE_LOGGER_NAMESPACE):
        suffix = name[len(MODULE_LOGGER_NAMESPACE):].lstrip(".")
        return suffix.rsplit(".", 1)[-1] or DEFAULT_COMPONENT
    return name


class StructuredLogger:
    """Thin wrapper that prefixes every record with its component name."""

    __slots__ = ("_logger", "_component")

    def __init__(self, logger: logging.Logger, component: Optional[str] = None) -> None:
        object.__setattr__(self, "_logger", logger)
        resolved_component = component or _derive_component(logger.name)
        object.__setattr__(self, "_component", resolved_component or DEFAULT_COMPONENT)

    def __getattr__(self, item):
        return getattr(self._logger, item)

    def __setattr__(self, key, value):
        if key in self.__slots__:
            object.__setattr__(self, key, value)
        else:
            setattr(self._logger, key, value)

    @property
    def component(self) -> str:
        return self._component

    @property
    def logger(self) -> logging.Logger:
        return self._logger

    # ------------------------------------------------------------------
    # Formatting helpers

    def _compose(self, message: object, args: tuple) -> str:
        text = str(message)
        if args:
            try:
                text = text % args
            except (TypeError, ValueError):
                safe_args = " ".join(str(arg) for arg in args)
                text = f"{text} | args={safe_args}"
        prefix = self._component or DEFAULT_COMPONENT
        if prefix and not text.startswith(f"[{prefix}]"):
            text = f"[{prefix}] {text}"
        return text

    def _emit(self, method: str, message: object, *args, **kwargs) -> None:
        formatted = self._compose(message, args)
        getattr(self._logger, method)(formatted, **kwargs)

    # ------------------------------------------------------------------
    # Logging API surface

    def log(self, level: int, message: object, *args, **kwargs) -> None:
        formatted = self._compose(message, args)
        self._logger.log(level, formatted, **kwargs)

    def debug(self, message: object, *args, **kwargs) -> None:
        self._emit("debug", message, *args, **kwargs)

    def info(self, message: object, *args, **kwargs) -> None:
        self._emit("info", message, *args, **kwargs)

    def warning(self, message: object, *args, **kwargs) -> None:
        self._emit("warning", message, *args, **kwargs)

    def error(self, message: object, *args, **kwargs) -> None:
        self._emit("error", message, *args, **kwargs)

    def exception(self, message: object, *args, **kwargs) -> None:
        kwargs.setdefault("exc_info", True)
        self._emit("error", message, *args, **kwargs)

    def critical(self, message: object, *args, **kwargs) -> None:
        self._emit("critical", message, *args, **kwargs)


LoggerLike = Union[StructuredLogger, logging.Logger, logging.LoggerAdapter, None]


def ensure_structured_logger(
    logger: LoggerLike,
    *,
    component: Optional[str] = None,
    fallback_name: Optional[str] = None,
) -> StructuredLogger:
    """Return a StructuredLogger wrapping ``logger`` (or a new module logger)."""

    if isinstance(logger, StructuredLogger):
        return logger
    if isinstance(logger, logging.LoggerAdapter):
        return StructuredLogger(logger.logger, component=component or _derive_component(logger.logger.name))
    if isinstance(logger, logging.Logger):
        return StructuredLogger(logger, component=component)
    return get_module_logger(fallback_name)


def get_module_logger(name: Optional[str] = None) -> StructuredLogger:
    """Return a structured logger scoped to the precision_lens namespace."""
    normalized = _normalize_logger_name(name)
    base = logging.getLogger(normalized)
    return StructuredLogger(base)


__all__ = [
    "LoggerLike",
    "StructuredLogger",
    "ensure_structured_logger",
    "get_module_logger",
]
