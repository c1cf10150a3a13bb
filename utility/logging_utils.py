# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-02
# Description: logging_utils.py
# -----------------------------------------------------------------------------
"""
Logger factory for the HSK RAG service.

Every logger lives under the `hsk_rag` namespace, writes coloured output to
the console and, unless HSK_LOG_TO_FILE is off, appends to one rotating log
file. The file handler is shared by all loggers: the API workers and the
background reindex thread rotate the same file.

    HSK_LOG_LEVEL         DEBUG | INFO | WARNING | ERROR   (default INFO)
    HSK_LOG_TO_FILE       1 / 0                            (default 1)
    HSK_LOG_FILE          path                             (default ./logs/hsk_rag.log)
    HSK_LOG_MAX_BYTES     rotation size                    (default 5MB)
    HSK_LOG_BACKUP_COUNT  rotated files kept               (default 5)
"""
import logging
import os
import threading
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Dict

import colorlog

BASE_LOGGER_NAME = "hsk_rag"

CONSOLE_FORMAT = (
    "%(log_color)s%(asctime)s [%(levelname)s] "
    "%(name)s:%(lineno)d:%(reset)s %(message_log_color)s%(message)s"
)
FILE_FORMAT = "%(asctime)s [%(levelname)s] %(name)s:%(lineno)d: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_file_handlers: Dict[str, RotatingFileHandler] = {}
_file_handlers_lock = threading.Lock()


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "y")


def _level() -> int:
    level_name = os.getenv("HSK_LOG_LEVEL", "INFO").strip().upper()
    return getattr(logging, level_name, logging.INFO)


def _console_handler() -> logging.Handler:
    handler = logging.StreamHandler()
    handler.setFormatter(colorlog.ColoredFormatter(
        fmt=CONSOLE_FORMAT,
        datefmt=DATE_FORMAT,
        log_colors={
            "DEBUG": "cyan",
            "INFO": "green",
            "WARNING": "yellow",
            "ERROR": "red",
            "CRITICAL": "bold_red",
        },
        secondary_log_colors={
            "message": {
                "INFO": "white",
                "WARNING": "yellow",
                "ERROR": "light_red",
                "CRITICAL": "red",
            }
        },
        style="%",
    ))
    return handler


def _shared_file_handler(log_file: str) -> RotatingFileHandler:
    """One handler per resolved path; several handlers on one file break rotation."""
    path = Path(log_file).resolve()
    key = str(path)
    with _file_handlers_lock:
        handler = _file_handlers.get(key)
        if handler is None:
            path.parent.mkdir(parents=True, exist_ok=True)
            handler = RotatingFileHandler(
                filename=key,
                maxBytes=int(os.getenv("HSK_LOG_MAX_BYTES", str(5 * 1024 * 1024))),
                backupCount=int(os.getenv("HSK_LOG_BACKUP_COUNT", "5")),
                encoding="utf-8",
            )
            handler.setFormatter(logging.Formatter(fmt=FILE_FORMAT, datefmt=DATE_FORMAT))
            _file_handlers[key] = handler
        return handler


def _create_logger(full_name: str) -> logging.Logger:
    logger = logging.getLogger(full_name)
    if logger.handlers:
        return logger

    logger.addHandler(_console_handler())
    if _env_flag("HSK_LOG_TO_FILE", "1"):
        logger.addHandler(_shared_file_handler(os.getenv("HSK_LOG_FILE", "./logs/hsk_rag.log")))

    logger.setLevel(_level())
    logger.propagate = False
    return logger


def get_logger(name: str | None = None) -> logging.Logger:
    """
    Generic logger that does not include a class name.
    """
    full_name = f"{BASE_LOGGER_NAME}.{name}" if name else BASE_LOGGER_NAME
    return _create_logger(full_name)


def get_class_logger(cls: type) -> logging.Logger:
    """
    Returns a logger whose name includes module + class, e.g.:

      hsk_rag.services.HSKQueryService.HSKQueryService
      hsk_rag.vectorstore.SqlVectorIndex.SqlVectorIndex
    """
    module = getattr(cls, "__module__", "unknown_module")
    classname = getattr(cls, "__name__", "UnknownClass")
    return _create_logger(f"{BASE_LOGGER_NAME}.{module}.{classname}")
