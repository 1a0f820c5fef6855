import logging
import sys
import json
from typing import Optional


def get_logger(name: str = __name__, level: Optional[str] = None) -> logging.Logger:
    """Return a JSON-configured logger.

    Reuses existing handlers to avoid duplicates when called multiple times.
    The level defaults to ``Settings.log_level``.
    """
    logger = logging.getLogger(name)
    if logger.handlers:
        if level is not None:
            logger.setLevel(level.upper())
        return logger
    handler = logging.StreamHandler(sys.stdout)
    fmt = json.dumps(
        {
            "ts": "%(asctime)s",
            "lvl": "%(levelname)s",
            "mod": "%(name)s",
            "thread": "%(threadName)s",
            "msg": "%(message)s",
        }
    )
    handler.setFormatter(logging.Formatter(fmt))
    logger.addHandler(handler)
    if level is None:
        from .core.config import settings

        level = settings.log_level
    logger.setLevel(level.upper())
    return logger
