"""Core functionality for SCM Collector."""

from .models import (
    OwnerKind,
    RepositoryLocator,
    User,
    Member,
    Owner,
    Hook,
    Repository,
    BranchProtection,
    Pipeline,
    Organization,
    Package,
    PackageRegistry,
    AssetsData,
    AggregationResult,
)

from .exceptions import (
    CollectorError,
    ConfigurationError,
    InvalidURLError,
    MissingPathSegmentsError,
    UnsupportedPlatformError,
    AdapterInitError,
    AggregationCancelledError,
    FetchError,
    APIError,
    NotFoundError,
    AccessPermissionError,
    RateLimitError,
)

from .url_resolver import resolve_repository_url

__all__ = [
    # Enums
    "OwnerKind",
    # Models
    "RepositoryLocator",
    "User",
    "Member",
    "Owner",
    "Hook",
    "Repository",
    "BranchProtection",
    "Pipeline",
    "Organization",
    "Package",
    "PackageRegistry",
    "AssetsData",
    "AggregationResult",
    # Exceptions
    "CollectorError",
    "ConfigurationError",
    "InvalidURLError",
    "MissingPathSegmentsError",
    "UnsupportedPlatformError",
    "AdapterInitError",
    "AggregationCancelledError",
    "FetchError",
    "APIError",
    "NotFoundError",
    "AccessPermissionError",
    "RateLimitError",
    # URL handling
    "resolve_repository_url",
]
