"""Core infrastructure: configuration, logging, paths and the application context."""

from .config_manager import ConfigManager, get_config_manager
from .logging_config import configure_logging
from .logging_utils import get_module_logger
from .status import AppContext

__all__ = [
    "AppContext",
    "ConfigManager",
    "configure_logging",
    "get_config_manager",
    "get_module_logger",
]
