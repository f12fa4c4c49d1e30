"""
loguru sinks for applications embedding diarist.

Library modules only ever do ``from loguru import logger``; choosing where
records go is left to the application, which calls one of the setup
functions below once at startup.
"""

import os
import sys

from loguru import logger

from ..config import Config

CONSOLE_FORMAT = "<level>[{level.name}]</level> {message}"
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level} | {name}:{line} | {message}"


def setup_logging(
    level: str = "WARNING",
    log_file: str | None = None,
    fmt: str = CONSOLE_FORMAT,
    rotation: str = "10 MB",
    retention: str = "7 days",
) -> None:
    """
    Replace loguru's handlers with a stderr sink and, optionally, a file sink.

    Args:
        level: Minimum level for both sinks.
        log_file: Rotating log file. None logs to stderr only.
        fmt: Console format string.
        rotation: Size at which the log file rolls over.
        retention: Age after which rolled files are removed.
    """
    logger.remove()
    logger.add(sys.stderr, level=level, format=fmt)
    if not log_file:
        return

    logger.add(log_file, level=level, format=FILE_FORMAT, rotation=rotation, retention=retention)


def setup_logging_from_config(config: Config) -> None:
    """Apply the ``logging`` section of a Config.

    A relative ``logging.file`` is placed under ``paths.log_dir``.
    """
    log_file = config.get("logging.file") or None
    if log_file and not os.path.isabs(log_file):
        log_dir = os.path.expanduser(config.get("paths.log_dir", "."))
        os.makedirs(log_dir, exist_ok=True)
        log_file = os.path.join(log_dir, log_file)

    setup_logging(level=str(config.get("logging.level", "WARNING")).upper(), log_file=log_file)
