import logging
import sys

from app.config import LOG_LEVEL

ROOT_LOGGER_NAME = "photo_submissions"
LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def _configure_root() -> logging.Logger:
    root = logging.getLogger(ROOT_LOGGER_NAME)
    if not root.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        root.addHandler(handler)
        root.setLevel((LOG_LEVEL or "INFO").upper())
        # uvicorn configures the root logger too, keep lines from printing twice
        root.propagate = False
    return root


def get_logger(name: str) -> logging.Logger:
    """Child of the service logger, e.g. get_logger("delivery") -> photo_submissions.delivery"""
    _configure_root()
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")
