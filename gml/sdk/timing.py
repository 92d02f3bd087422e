import time
import logging
from functools import wraps
from typing import Optional

from .exceptions import OperationCancelledError

logger = logging.getLogger(__name__)

def time_api_call(func):
    """A decorator to time API calls and log the duration."""
    @wraps(func)
    def wrapper(*args, **kwargs):
        start_time = time.perf_counter()
        result = func(*args, **kwargs)
        end_time = time.perf_counter()
        duration = end_time - start_time
        logger.debug(f"API call '{func.__name__}' took {duration:.4f} seconds.")
        return result
    return wrapper


class Deadline:
    """Point in time after which an operation must stop issuing API calls.

    A Deadline created without a timeout never expires.
    """

    def __init__(self, seconds: Optional[float] = None):
        self.seconds = seconds
        self.expires_at = None if seconds is None else time.monotonic() + seconds

    def remaining(self) -> Optional[float]:
        if self.expires_at is None:
            return None
        return max(0.0, self.expires_at - time.monotonic())

    def expired(self) -> bool:
        return self.expires_at is not None and time.monotonic() >= self.expires_at

    def check(self, operation: str):
        """Raise OperationCancelledError if the deadline has passed."""
        if self.expired():
            raise OperationCancelledError(
                f"{operation}: deadline of {self.seconds:g}s exceeded"
            )


def check_deadline(deadline: Optional[Deadline], operation: str):
    """Check an optional deadline before starting `operation`."""
    if deadline is not None:
        deadline.check(operation)
