"""
Custom exception classes for error categorization in the GlobePlot map core.
"""


class GlobePlotError(Exception):
    """Base exception for all GlobePlot errors."""

    def __init__(self, message: str, context: dict = None):
        """
        Initialize exception with message and optional context.

        Args:
            message: Error message
            context: Optional dictionary with additional error context
        """
        super().__init__(message)
        self.message = message
        self.context = context or {}


class TransientError(GlobePlotError):
    """
    Exception for transient errors that should be retried.

    Examples:
        - Network timeouts
        - Geocoding provider returning 5xx
        - Refresh store temporarily unreachable
    """
    pass


class PermanentError(GlobePlotError):
    """
    Exception for permanent errors that should not be retried.

    Examples:
        - Missing or invalid access token
        - Malformed geocoding queries
        - Event payload validation failures
    """
    pass


class StoreError(GlobePlotError):
    """Exception for refresh-timestamp store failures."""
    pass


class APIError(GlobePlotError):
    """Base exception for external API errors."""
    pass


class GeocodingError(APIError):
    """
    Exception for geocoding provider failures.

    Recoverable: the affected events keep their previous coordinates
    and can be refreshed again later.
    """
    pass


class RateLimitError(TransientError):
    """Exception for API rate limiting."""

    def __init__(self, message: str, retry_after: float = None, context: dict = None):
        """
        Initialize rate limit error.

        Args:
            message: Error message
            retry_after: Seconds to wait before retrying
            context: Additional error context
        """
        super().__init__(message, context)
        self.retry_after = retry_after


class RefreshCooldownError(GlobePlotError):
    """Raised when a coordinate refresh is requested during the cooldown window."""

    def __init__(self, remaining_seconds: float, remaining: str, context: dict = None):
        """
        Initialize cooldown rejection.

        Args:
            remaining_seconds: Seconds until another refresh is allowed
            remaining: Human readable remaining time, e.g. "1m 05s"
            context: Additional error context
        """
        super().__init__(f"Please wait {remaining} before refreshing again.", context)
        self.remaining_seconds = remaining_seconds
        self.remaining = remaining


class ValidationError(PermanentError):
    """Exception for data validation failures."""

    def __init__(self, message: str, validation_errors: list = None, context: dict = None):
        """
        Initialize validation error.

        Args:
            message: Error message
            validation_errors: List of specific validation errors
            context: Additional error context
        """
        super().__init__(message, context)
        self.validation_errors = validation_errors or []


class ConnectionError(TransientError):
    """Exception for connection failures."""
    pass


class TimeoutError(TransientError):
    """Exception for operation timeouts."""
    pass


class ConfigurationError(PermanentError):
    """Exception for configuration errors."""
    pass
