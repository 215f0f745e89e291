"""Root logging setup for the Precision Lens process."""

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Iterable, Optional, Union

from .paths import MASTER_LOG_FILE

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"

LOG_MAX_BYTES = 1024 * 1024
LOG_BACKUP_COUNT = 3

# aiohttp logs one access line per request; the API middleware already does.
QUIET_LOGGERS = ("aiohttp.access",)


class _LensHandlerMixin:
    """Marks handlers installed here so reconfiguration only replaces those."""

    lens_owned = True


class _ConsoleHandler(_LensHandlerMixin, logging.StreamHandler):
    pass


class _FileHandler(_LensHandlerMixin, RotatingFileHandler):
    pass


def _coerce_level(level: Union[int, str]) -> int:
    if isinstance(level, int):
        return level
    numeric = logging.getLevelName(str(level).upper())
    if not isinstance(numeric, int):
        raise ValueError(f"Unknown log level '{level}'")
    return numeric


def configure_logging(
    level: Union[int, str] = logging.INFO,
    *,
    console: bool = True,
    log_file: Optional[Union[str, Path]] = MASTER_LOG_FILE,
    quiet_loggers: Iterable[str] = QUIET_LOGGERS,
) -> list[logging.Handler]:
    """Install the console and rotating file handlers on the root logger.

    Calling it again swaps the handlers installed by a previous call and
    leaves foreign handlers (test capture, embedding hosts) alone.
    ``log_file=None`` disables file output.

    Returns the handlers that were installed.
    """
    numeric_level = _coerce_level(level)
    root = logging.getLogger()

    for handler in list(root.handlers):
        if getattr(handler, "lens_owned", False):
            root.removeHandler(handler)
            handler.close()

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATEFMT)
    installed: list[logging.Handler] = []

    if console:
        installed.append(_ConsoleHandler(sys.stdout))

    if log_file is not None:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        installed.append(
            _FileHandler(log_path, maxBytes=LOG_MAX_BYTES, backupCount=LOG_BACKUP_COUNT, encoding="utf-8")
        )

    for handler in installed:
        handler.setLevel(numeric_level)
        handler.setFormatter(formatter)
        root.addHandler(handler)

    root.setLevel(numeric_level)
    for name in quiet_loggers:
        logging.getLogger(name).setLevel(logging.WARNING)

    return installed


__all__ = ["LOG_DATEFMT", "LOG_FORMAT", "QUIET_LOGGERS", "configure_logging"]
