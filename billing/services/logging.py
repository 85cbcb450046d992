"""Logging setup shared by the billing API server and the CLI.

Records go to stdout and to a log file, both at the level named by the
LOG_LEVEL env var (default INFO) unless the caller passes one explicitly.
SQL statements are routed through the same handlers when requested, instead
of SQLAlchemy's own echo handler.
"""

import logging
import os
import sys
from pathlib import Path

LOG_LEVEL_MAP = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}

LOG_FORMAT = "[%(asctime)s] %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

SQL_LOGGER = "sqlalchemy.engine"


def get_log_level(level_name: str | None = None) -> int:
    """Resolve a level name, falling back to LOG_LEVEL, then INFO."""
    level_str = (level_name or os.getenv("LOG_LEVEL", "INFO")).upper()
    return LOG_LEVEL_MAP.get(level_str, logging.INFO)


def _handler(handler: logging.Handler, level: int) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
    return handler


def setup_server_logging(
    log_file: str = "logs/server.log",
    level_name: str | None = None,
    sql_echo: bool = False,
) -> None:
    """
    Configure the root logger for a billing process.

    Args:
        log_file: Path to log file, parent directories are created
        level_name: Level name overriding LOG_LEVEL (optional)
        sql_echo: Log every SQL statement at INFO through the same handlers

    Calling it again replaces the handlers of the previous call.
    """
    log_path = Path(log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    log_level = get_log_level(level_name)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    for handler in root_logger.handlers[:]:
        handler.close()
        root_logger.removeHandler(handler)

    root_logger.addHandler(_handler(logging.StreamHandler(sys.stdout), log_level))
    root_logger.addHandler(_handler(logging.FileHandler(log_path), log_level))

    logging.getLogger(SQL_LOGGER).setLevel(logging.INFO if sql_echo else logging.WARNING)


__all__ = ["get_log_level", "setup_server_logging"]
