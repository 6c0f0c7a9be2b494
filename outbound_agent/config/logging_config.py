"""
Configure logging for the outbound voice agent.

Everything the agent logs goes through the ``outbound_agent`` logger, which writes to
stdout and to a rotating file under ``logs/``. The Twilio REST client and
websockets client loggers are held at WARNING.
"""

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from outbound_agent.config.constants import LOGGER_NAME

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

LOG_FILE = Path("logs") / "outbound_agent.log"
MAX_LOG_SIZE = 10 * 1024 * 1024  # 10 MB
BACKUP_COUNT = 5

# Third-party loggers that are too chatty for a live call
QUIET_LOGGERS = ("twilio.http_client", "websockets.client")


def _resolve_level(level: Optional[str]) -> int:
    value = logging.getLevelName((level or os.getenv("LOG_LEVEL") or "INFO").upper())
    return value if isinstance(value, int) else logging.INFO


def _file_handler(log_file: Path, formatter: logging.Formatter) -> Optional[logging.Handler]:
    try:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handler = RotatingFileHandler(log_file, maxBytes=MAX_LOG_SIZE, backupCount=BACKUP_COUNT)
    except OSError:
        return None
    handler.setFormatter(formatter)
    return handler


def configure_logging(level: Optional[str] = None, log_file: Path = LOG_FILE) -> logging.Logger:
    """
    Configure the agent logger. Safe to call again, e.g. once the CLI has parsed --log-level.

    Args:
        level: Level name; falls back to the LOG_LEVEL environment variable, then INFO
        log_file: Rotating log file; file logging is skipped if it cannot be opened

    Returns:
        logging.Logger: The configured ``outbound_agent`` logger
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(_resolve_level(level))

    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    file_handler = _file_handler(log_file, formatter)
    if file_handler is not None:
        logger.addHandler(file_handler)
    else:
        logger.warning(f"Could not set up file logging at {log_file}")

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    # Prevent log propagation to root logger
    logger.propagate = False

    logger.debug("Logging configured")
    return logger
