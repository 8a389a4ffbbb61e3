# backend/core/db_retry.py

import logging
import random
import time
from functools import wraps
from typing import Callable, Set, TypeVar

from sqlalchemy.exc import DBAPIError, OperationalError

from .exceptions import ConcurrentUpdateConflict

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Database error codes that indicate retry-able conditions
RETRY_ERROR_CODES: Set[str] = {
    # PostgreSQL
    "40001",  # serialization_failure
    "40P01",  # deadlock_detected
    "55P03",  # lock_not_available
    # MySQL
    "1205",  # Lock wait timeout exceeded
    "1213",  # Deadlock found when trying to get lock
    # SQLite
    "database is locked",
    "database table is locked",
}


def is_retryable_error(error: Exception) -> bool:
    """
    Check if an error signals a transient write conflict

    Args:
        error: The exception to check

    Returns:
        True if the operation may succeed when re-run from scratch
    """
    if isinstance(error, ConcurrentUpdateConflict):
        return True

    if isinstance(error, (OperationalError, DBAPIError)):
        error_str = str(error).lower()
        if any(code in error_str for code in ["deadlock", "serializ", "locked"]):
            return True

        orig = getattr(error, "orig", None)
        pgcode = getattr(orig, "pgcode", None)
        if pgcode:
            return pgcode in RETRY_ERROR_CODES
        args = getattr(orig, "args", None)
        if args:
            error_code = str(args[0])
            return any(code in error_code for code in RETRY_ERROR_CODES)

    return False


def retry_on_conflict(
    func: Callable[..., T],
    *args,
    max_retries: int = 3,
    initial_delay: float = 0.05,
    max_delay: float = 1.0,
    backoff_factor: float = 2.0,
    jitter: bool = True,
    **kwargs,
) -> T:
    """
    Re-run ``func`` on conflict or lock errors with exponential backoff

    Args:
        func: Callable performing one complete transaction
        *args: Positional arguments for the function
        max_retries: Maximum number of retry attempts after the first call
        initial_delay: Delay before the first retry in seconds
        max_delay: Upper bound for a single delay in seconds
        backoff_factor: Multiplier applied to the delay after each retry
        jitter: Add up to 25% random jitter to each delay
        **kwargs: Keyword arguments for the function

    Returns:
        The result of the function call

    Raises:
        The last exception once retries are exhausted, or any
        non-retryable exception immediately
    """
    delay = initial_delay

    for attempt in range(max_retries + 1):
        try:
            return func(*args, **kwargs)
        except Exception as e:
            if not is_retryable_error(e) or attempt == max_retries:
                raise

            actual_delay = min(delay, max_delay)
            if jitter:
                actual_delay *= 1 + random.random() * 0.25

            logger.warning(
                f"Write conflict on attempt {attempt + 1}/{max_retries + 1}. "
                f"Retrying in {actual_delay:.3f}s. Error: {str(e)}"
            )

            time.sleep(actual_delay)
            delay *= backoff_factor


def with_conflict_retry(
    max_retries: int = 3,
    initial_delay: float = 0.05,
    max_delay: float = 1.0,
    backoff_factor: float = 2.0,
    jitter: bool = True,
):
    """
    Decorator form of :func:`retry_on_conflict`

    Example:
        @with_conflict_retry(max_retries=5)
        def bump_counter(...):
            ...
    """

    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            return retry_on_conflict(
                func,
                *args,
                max_retries=max_retries,
                initial_delay=initial_delay,
                max_delay=max_delay,
                backoff_factor=backoff_factor,
                jitter=jitter,
                **kwargs,
            )

        return wrapper

    return decorator
