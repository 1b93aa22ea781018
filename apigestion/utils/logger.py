# apigestion/utils/logger.py
"""
Logging setup shared by every module.
Console always; a size-rotated file under LOG_DIR unless LOG_TO_FILE is off.
"""

import logging
import os
from logging.handlers import RotatingFileHandler

from apigestion.config import settings

LOG_LEVEL = settings.LOG_LEVEL.upper()
LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"

_configured = False


def _file_handler(formatter: logging.Formatter) -> RotatingFileHandler:
    log_dir = settings.LOG_DIR or os.path.join(
        os.path.dirname(os.path.dirname(os.path.dirname(__file__))), "logs"
    )
    os.makedirs(log_dir, exist_ok=True)
    handler = RotatingFileHandler(
        filename=os.path.join(log_dir, settings.LOG_FILE),
        maxBytes=settings.LOG_MAX_BYTES,
        backupCount=settings.LOG_BACKUP_COUNT,
        encoding="utf-8",
    )
    handler.setFormatter(formatter)
    return handler


def _configure_root_logger():
    global _configured
    if _configured:
        return
    _configured = True

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    console = logging.StreamHandler()
    console.setFormatter(formatter)

    root = logging.getLogger()
    root.setLevel(LOG_LEVEL)
    root.addHandler(console)
    if settings.LOG_TO_FILE:
        root.addHandler(_file_handler(formatter))

    # one line per outgoing email request is enough
    logging.getLogger("httpx").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Named logger; configures the root logger on first use."""
    _configure_root_logger()
    return logging.getLogger(name)
