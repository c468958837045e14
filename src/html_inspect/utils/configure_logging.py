import logging
import sys
from typing import Dict, Optional, Union

from html_inspect.managers.config_manager import config_manager

Level = Union[str, int]


def _resolve_level(level: Level, fallback: int) -> int:
    if isinstance(level, str):
        return getattr(logging, level.upper(), fallback)
    return level


def configure_logger(
        general_level: Optional[Level] = None,
        module_specific_levels: Optional[Dict[str, Level]] = None,
        silenced_loggers: Optional[Dict[str, Level]] = None,
        stream=None,
) -> logging.Handler:
    """
    Configures the root logger and specific module loggers for applications
    embedding html_inspect. The library itself never calls this on import.

    When `general_level` is omitted, 'debug.level' from settings.json is used.
    Returns the installed handler.
    """
    # 1. Create a stream handler with the standard formatter.
    handler = logging.StreamHandler(stream or sys.stderr)
    formatter = logging.Formatter(
        "%(asctime)s - %(levelname)s - [%(name)s:%(lineno)d] - %(message)s"
    )
    handler.setFormatter(formatter)

    # 2. Configure the root logger.
    if general_level is None:
        general_level = config_manager.get_nested("debug.level", "WARNING")
    root_logger = logging.getLogger()
    root_logger.setLevel(_resolve_level(general_level, logging.INFO))

    # 3. Clear any existing handlers and add the new one.
    root_logger.handlers.clear()
    root_logger.addHandler(handler)

    # 4. Configure levels for specific modules.
    if module_specific_levels:
        for name, level in module_specific_levels.items():
            logging.getLogger(name).setLevel(_resolve_level(level, logging.INFO))

    # 5. Muzzle noisy loggers by setting their level high.
    if silenced_loggers:
        for name, level in silenced_loggers.items():
            logging.getLogger(name).setLevel(_resolve_level(level, logging.CRITICAL))

    return handler
