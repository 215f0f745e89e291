"""Reading of ``key = value`` configuration files."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Dict, Iterable, Optional

import aiofiles

from .logging_utils import get_module_logger


logger = get_module_logger("ConfigManager")


class ConfigManager:
    """Parses ``config.txt`` style files into plain string dictionaries.

    Lines are ``key = value``; blank lines and ``#`` comments are ignored,
    trailing ``# ...`` comments are stripped and matching quotes removed.
    Typed access goes through :meth:`get_str`, :meth:`get_int`,
    :meth:`get_float` and :meth:`get_bool`, which fall back to the default
    on missing or malformed values.
    """

    def __init__(self) -> None:
        self.lock = asyncio.Lock()

    # ------------------------------------------------------------------
    # Internal helpers

    @staticmethod
    def _parse_config_lines(lines: Iterable[str]) -> Dict[str, str]:
        config: Dict[str, str] = {}

        for raw_line in lines:
            line = raw_line.strip()
            if not line or line.startswith('#'):
                continue
            if '=' not in line:
                continue

            key, value = line.split('=', 1)
            key = key.strip()
            value = value.strip()

            if '#' in value:
                value = value.split('#')[0].strip()

            if (value.startswith('"') and value.endswith('"')) or (value.startswith("'") and value.endswith("'")):
                value = value[1:-1]

            config[key] = value

        return config

    # ------------------------------------------------------------------
    # Reading

    async def read_config_async(self, config_path: Path) -> Dict[str, str]:
        """Read ``config_path``; a missing or unreadable file gives an empty dict."""
        if not await asyncio.to_thread(config_path.exists):
            logger.debug("Config file not found at %s, using defaults", config_path)
            return {}

        async with self.lock:
            try:
                lines: list[str] = []
                async with aiofiles.open(config_path, 'r', encoding='utf-8') as f:
                    async for line in f:
                        lines.append(line)
            except OSError as e:
                logger.error("Failed to read config %s: %s", config_path, e)
                return {}

        config = self._parse_config_lines(lines)
        logger.debug("Loaded config from %s (%d values)", config_path, len(config))
        return config

    # ------------------------------------------------------------------
    # Typed accessors

    def get_str(self, config: Dict[str, str], key: str, default: str = "") -> str:
        value = config.get(key)
        if value is None:
            return default
        return value

    def get_bool(self, config: Dict[str, str], key: str, default: bool = False) -> bool:
        if key not in config:
            return default

        value = config[key].lower()
        return value in ('true', '1', 'yes', 'on')

    def get_int(self, config: Dict[str, str], key: str, default: int = 0) -> int:
        if key not in config:
            return default

        try:
            return int(config[key])
        except ValueError:
            logger.warning("Invalid int value for %s: %s, using default %d", key, config[key], default)
            return default

    def get_float(self, config: Dict[str, str], key: str, default: float = 0.0) -> float:
        if key not in config:
            return default

        try:
            return float(config[key])
        except ValueError:
            logger.warning("Invalid float value for %s: %s, using default %.3f", key, config[key], default)
            return default


_config_manager: Optional[ConfigManager] = None


def get_config_manager() -> ConfigManager:
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager()
    return _config_manager
