"""Logging setup for the pagetree package."""

import logging

from pagetree.core.config import settings

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def setup_logging() -> logging.Logger:
    level = getattr(logging, settings.LOG_LEVEL, logging.INFO)

    logger = logging.getLogger("pagetree")
    logger.setLevel(level)

    # un seul handler console, même si le module est rechargé
    if not any(isinstance(h, logging.StreamHandler) for h in logger.handlers):
        ch = logging.StreamHandler()
        ch.setFormatter(logging.Formatter(LOG_FORMAT))
        ch.setLevel(level)
        logger.addHandler(ch)

    logger.propagate = False
    return logger


def get_logger(name: str = None) -> logging.Logger:
    base = logging.getLogger("pagetree")
    if not name:
        return base
    if name.startswith("pagetree."):
        name = name[len("pagetree."):]
    return base.getChild(name)


logger = setup_logging()
