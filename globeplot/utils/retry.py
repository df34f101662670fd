"""
Retry utilities with exponential backoff for geocoding and store calls.
"""

import time
from functools import wraps
from typing import Callable, Optional, Type, Tuple
import structlog

from globeplot.utils.exceptions import TransientError

logger = structlog.get_logger()


class RetryConfig:
    """Configuration for retry behavior with exponential backoff."""

    def __init__(
        self,
        max_attempts: int = 3,
        base_delay: float = 0.5,
        max_delay: float = 8.0,
        exponential_base: float = 2.0,
        retryable_exceptions: Tuple[Type[Exception], ...] = (TransientError,),
        sleep: Optional[Callable[[float], None]] = None,
    ):
        """
        Initialize retry configuration.

        Args:
            max_attempts: Total number of attempts, including the first call
            base_delay: Delay in seconds before the first retry
            max_delay: Upper bound on any single delay
            exponential_base: Growth factor between consecutive delays
            retryable_exceptions: Exception types that trigger another attempt
            sleep: Function used to wait between attempts (time.sleep if None)
        """
        self.max_attempts = max_attempts
        self.base_delay = base_delay
        self.max_delay = max_delay
        self.exponential_base = exponential_base
        self.retryable_exceptions = retryable_exceptions
        self.sleep = sleep

    def delay_for(self, attempt: int, error: Exception) -> float:
        """Delay before the retry following ``attempt`` (zero-based)."""
        # Honour an explicit provider hint (e.g. HTTP Retry-After)
        retry_after: Optional[float] = getattr(error, "retry_after", None)
        if retry_after is not None and retry_after >= 0:
            return min(float(retry_after), self.max_delay)
        return min(self.base_delay * (self.exponential_base ** attempt), self.max_delay)


def retry_with_exponential_backoff(
    config: RetryConfig = None,
    max_attempts: int = None,
    base_delay: float = None,
    max_delay: float = None,
    retryable_exceptions: Tuple[Type[Exception], ...] = None,
) -> Callable:
    """
    Decorator for automatic retry with exponential backoff.

    Can be used with a RetryConfig object or individual parameters.
    A ``RateLimitError`` carrying ``retry_after`` waits that long instead
    of the computed backoff.

    Args:
        config: RetryConfig object (if provided, other params are ignored)
        max_attempts: Total number of attempts
        base_delay: Initial delay in seconds
        max_delay: Maximum delay in seconds
        retryable_exceptions: Tuple of exception types to retry

    Returns:
        Decorated function with retry logic

    Example:
        @retry_with_exponential_backoff(max_attempts=3, base_delay=0.5)
        def forward_geocode(query):
            ...
    """
    if config is None:
        config = RetryConfig(
            max_attempts=max_attempts or 3,
            base_delay=base_delay if base_delay is not None else 0.5,
            max_delay=max_delay or 8.0,
            retryable_exceptions=retryable_exceptions or (TransientError,),
        )

    def decorator(func: Callable) -> Callable:
        @wraps(func)
        def wrapper(*args, **kwargs):
            for attempt in range(config.max_attempts):
                try:
                    return func(*args, **kwargs)
                except config.retryable_exceptions as e:
                    if attempt == config.max_attempts - 1:
                        logger.error(
                            "retry_exhausted",
                            function=func.__name__,
                            attempts=config.max_attempts,
                            error=str(e),
                            error_type=type(e).__name__
                        )
                        raise

                    delay = config.delay_for(attempt, e)
                    logger.warning(
                        "retry_attempt",
                        function=func.__name__,
                        attempt=attempt + 1,
                        max_attempts=config.max_attempts,
                        error=str(e),
                        error_type=type(e).__name__,
                        retry_delay_seconds=delay
                    )
                    (config.sleep or time.sleep)(delay)

        wrapper.retry_config = config
        return wrapper
    return decorator
