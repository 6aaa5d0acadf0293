"""Custom exceptions for SCM Collector."""

from scm_collector.utils import get_logger
from typing import Optional

logger = get_logger(__name__)


class CollectorError(Exception):
    """Base exception for SCM Collector."""

    def __init__(self, message: str, details: str = None):
        super().__init__(message)
        self.message = message
        self.details = details

        logger.debug(f"Exception raised: {self.__class__.__name__}: {message}")
        if details:
            logger.debug(f"Exception details: {details}")


class ConfigurationError(CollectorError):
    """Raised when there's a configuration problem."""
    pass


class InvalidURLError(CollectorError):
    """Raised when a repository URL cannot be parsed."""
    pass


class MissingPathSegmentsError(InvalidURLError):
    """Raised when a repository URL lacks the namespace or repository name."""
    pass


class UnsupportedPlatformError(CollectorError):
    """Raised when no adapter is registered for the requested platform."""
    pass


class AdapterInitError(CollectorError):
    """Raised when a platform adapter cannot establish its transport."""
    pass


class AggregationCancelledError(CollectorError):
    """Raised when an aggregation is cancelled between steps."""
    pass


class FetchError(CollectorError):
    """Raised when a single platform fetch fails."""
    pass


class APIError(FetchError):
    """Raised when API calls fail."""

    def __init__(self, message: str, status_code: Optional[int] = None, details: str = None):
        super().__init__(message, details)
        self.status_code = status_code


class NotFoundError(APIError):
    """Raised when a resource is not found."""

    def __init__(self, message: str, details: str = None):
        super().__init__(message, status_code=404, details=details)


class AccessPermissionError(APIError):
    """Raised when lacking required permissions."""

    def __init__(self, message: str, status_code: Optional[int] = 403, details: str = None):
        super().__init__(message, status_code=status_code, details=details)


class RateLimitError(APIError):
    """Raised when hitting rate limits."""

    def __init__(
        self,
        message: str,
        reset_at: Optional[int] = None,
        details: str = None
    ):
        super().__init__(message, status_code=429, details=details)
        self.reset_at = reset_at