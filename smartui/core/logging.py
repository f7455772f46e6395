"""
Logging setup shared by the CLI and the API application.

Modules log through ``logging.getLogger(__name__)``; this module only
wires handlers onto the ``smartui`` logger once per process.
"""

import logging
import os
from logging import WARNING, FileHandler
from logging.handlers import TimedRotatingFileHandler
from typing import Optional

from smartui.core.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] [%(filename)s (%(funcName)s:%(lineno)d)] - %(message)s"

_configured = False


def configure_logging(level: Optional[str] = None, log_dir: Optional[str] = None) -> logging.Logger:
    """
    Attach console (and optionally file) handlers to the ``smartui`` logger.

    :param level: Log level name, defaults to ``settings.LOG_LEVEL``
    :param log_dir: Directory for ``log.log`` and ``error.log``; defaults to
        ``settings.LOG_DIR``. When empty only the console handler is installed.
    :return: The configured package logger
    """
    global _configured
    logger = logging.getLogger("smartui")
    if _configured:
        return logger

    level_name = (level or settings.LOG_LEVEL).upper()
    logger.setLevel(getattr(logging, level_name, logging.INFO))
    fm = logging.Formatter(LOG_FORMAT)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(fm)
    logger.addHandler(console_handler)

    log_dir = settings.LOG_DIR if log_dir is None else log_dir
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        th = TimedRotatingFileHandler(
            filename=os.path.join(log_dir, "log.log"),
            when="midnight",
            interval=1,
            backupCount=3,
            encoding="utf-8",
        )
        th.setFormatter(fm)
        logger.addHandler(th)

        # warnings and errors also go to a separate file
        error_handler = FileHandler(filename=os.path.join(log_dir, "error.log"), encoding="utf-8")
        error_handler.setLevel(WARNING)
        error_handler.setFormatter(fm)
        logger.addHandler(error_handler)

    _configured = True
    return logger
