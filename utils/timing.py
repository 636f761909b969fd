import time
from functools import wraps
from typing import Optional, Dict

from config.logging_config import logger


class Timer:
    """Context manager logging how long a block took, e.g. one Solr round trip."""

    def __init__(self, label: str = "", store: Optional[Dict[str, float]] = None):
        self.label = label
        self.store = store
        self.elapsed: Optional[float] = None
        self._start: Optional[float] = None

    def __enter__(self):
        self._start = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.elapsed = time.perf_counter() - self._start
        if self.store is not None:
            self.store[self.label] = self.elapsed
        status = "failed" if exc_type else "ok"
        logger.info(f"[TIME] {self.label} ({status}): {self.elapsed:.6f} seconds")
        return False


def timed(label: str = None, store: Optional[Dict[str, float]] = None):
    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            with Timer(label or func.__name__, store):
                return func(*args, **kwargs)
        return wrapper
    return decorator
