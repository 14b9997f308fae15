"""Logging for the CLI and the API server."""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional, Union

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

LOG_FILE_NAME = "applytrack.log"
LOG_FILE_MAX_BYTES = 5 * 1024 * 1024
LOG_FILE_BACKUPS = 3

# Loggers that share our handlers when the server runs under uvicorn
SERVER_LOGGERS = ("uvicorn", "uvicorn.error")


def _parse_level(level: Union[int, str]) -> int:
    if isinstance(level, int):
        return level
    parsed = logging.getLevelName(str(level).upper())
    return parsed if isinstance(parsed, int) else logging.INFO


def _reset(logger: logging.Logger) -> None:
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


def setup_logging(log_dir: Optional[str] = "logs", level: Union[int, str] = logging.INFO) -> logging.Logger:
    """Send `applytrack.*` records to stderr and, when `log_dir` is set, a rotating file.

    Safe to call more than once: earlier handlers are closed and replaced.
    """
    level = _parse_level(level)
    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    handlers: list[logging.Handler] = []

    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(formatter)
    handlers.append(console)

    if log_dir:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)
        rotating = RotatingFileHandler(
            log_path / LOG_FILE_NAME,
            maxBytes=LOG_FILE_MAX_BYTES,
            backupCount=LOG_FILE_BACKUPS,
            encoding="utf-8",
        )
        rotating.setFormatter(formatter)
        handlers.append(rotating)

    logger = logging.getLogger("applytrack")
    logger.setLevel(level)
    _reset(logger)
    for handler in handlers:
        logger.addHandler(handler)

    for name in SERVER_LOGGERS:
        server_logger = logging.getLogger(name)
        server_logger.setLevel(level)
        server_logger.propagate = False
        _reset(server_logger)
        for handler in handlers:
            server_logger.addHandler(handler)

    # SQL echo stays off unless asked for explicitly
    logging.getLogger("sqlalchemy.engine").setLevel(max(level, logging.WARNING))

    return logger
