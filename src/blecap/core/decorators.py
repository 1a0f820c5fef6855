"""Common decorators for error handling and performance logging."""

from __future__ import annotations

import time
from functools import wraps

from ..logging import get_logger
from ..exceptions import AnalysisError


logger = get_logger(__name__)


def handle_analysis_errors(func):
    """Wrap analysis methods to raise :class:`AnalysisError` on failure."""

    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except AnalysisError:
            raise
        except MemoryError:
            raise
        except Exception as exc:
            logger.error("Analysis error in %s: %s", func.__name__, exc, exc_info=True)
            raise AnalysisError(str(exc), context=func.__name__) from exc

    return wrapper


def log_performance(func):
    """Log execution duration for ``func`` at debug level."""

    @wraps(func)
    def wrapper(*args, **kwargs):
        start_time = time.perf_counter()
        try:
            result = func(*args, **kwargs)
        except Exception:
            duration = time.perf_counter() - start_time
            logger.info("%s call failed after %.3f seconds", func.__name__, duration)
            raise

        duration = time.perf_counter() - start_time
        logger.debug("%s executed in %.3f seconds", func.__name__, duration)
        return result

    return wrapper
