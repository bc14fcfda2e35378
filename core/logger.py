"""Logging helpers for the health calculation service.

Provides a `get_logger` factory that attaches a stream handler and a
rotating file handler, so calculators, the weather client and the HTTP
layer all log in the same format.
"""

import logging
import os
from logging.handlers import RotatingFileHandler

from core.config import settings

LOG_DIR = settings.HEALTH_ENGINE_LOG_DIR or os.path.join(os.path.dirname(__file__), "..", "logs")
os.makedirs(LOG_DIR, exist_ok=True)

LOG_FILE = os.path.join(LOG_DIR, "health_engine.log")

_formatter = logging.Formatter("%(asctime)s %(levelname)s [%(name)s] %(message)s")

_stream_handler = logging.StreamHandler()
_stream_handler.setFormatter(_formatter)

_file_handler = RotatingFileHandler(LOG_FILE, maxBytes=5 * 1024 * 1024, backupCount=3)
_file_handler.setFormatter(_formatter)


def get_logger(name: str = __name__, level: int = logging.INFO) -> logging.Logger:
    """Return a logger with the shared stream and rotating file handlers.

    Handlers are attached once per logger name; repeated calls return the
    same configured logger.
    """
    logger = logging.getLogger(name)
    if not logger.handlers:
        logger.setLevel(level)
        logger.addHandler(_stream_handler)
        logger.addHandler(_file_handler)
        logger.propagate = False
    return logger
