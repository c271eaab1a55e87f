"""Retry utility with exponential backoff for upstream API calls."""

import random
import time
from typing import Any, Callable, Optional, Tuple, Type, TypeVar

from ..utils.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

# Default retry settings
DEFAULT_MAX_RETRIES = 2
DEFAULT_BASE_DELAY = 0.5  # seconds
DEFAULT_MAX_DELAY = 8.0  # seconds
DEFAULT_BACKOFF_FACTOR = 2.0


def retry_request(
    func: Callable[..., T],
    *args: Any,
    max_retries: int = DEFAULT_MAX_RETRIES,
    base_delay: float = DEFAULT_BASE_DELAY,
    max_delay: float = DEFAULT_MAX_DELAY,
    exceptions: Tuple[Type[Exception], ...] = (Exception,),
    sleep: Optional[Callable[[float], None]] = None,
    **kwargs: Any,
) -> T:
    """
    Execute a function with retry logic.

    Args:
        func: Function to execute
        *args: Positional arguments for the function
        max_retries: Maximum number of retry attempts
        base_delay: Initial delay between retries
        max_delay: Cap on the delay between retries
        exceptions: Exception types that trigger a retry
        sleep: Sleep function, defaults to time.sleep
        **kwargs: Keyword arguments for the function

    Returns:
        Result of the function call

    Raises:
        The last exception if all retries fail
    """
    last_exception: Optional[Exception] = None
    sleep = sleep or time.sleep
    delay = base_delay

    for attempt in range(max_retries + 1):
        try:
            return func(*args, **kwargs)
        except exceptions as e:
            last_exception = e

            if attempt < max_retries:
                logger.debug(
                    f"Retry {attempt + 1}/{max_retries} for {getattr(func, '__name__', func)}: {e}"
                )
                sleep(delay + random.uniform(0, delay / 2))
                delay = min(delay * DEFAULT_BACKOFF_FACTOR, max_delay)

    if last_exception:
        raise last_exception

    raise RuntimeError("Unexpected state in retry logic")
