"""
Base adapter interface for SCM platform integrations.
"""
from abc import ABC, abstractmethod
from typing import List, Optional, Dict
from dataclasses import dataclass
from enum import Enum

import requests

from scm_collector.core.models import (
    User,
    Member,
    Repository,
    BranchProtection,
    Pipeline,
    Organization,
    PackageRegistry,
)
from scm_collector.core.exceptions import UnsupportedPlatformError
from scm_collector.utils import get_logger

logger = get_logger(__name__)


class PlatformType(Enum):
    """Supported SCM platforms."""
    GITHUB = "github"
    GITLAB = "gitlab"

    @classmethod
    def from_value(cls, value) -> "PlatformType":
        """
        Convert a platform name into a PlatformType.

        Args:
            value: Platform name (case-insensitive) or PlatformType

        Returns:
            Matching PlatformType

        Raises:
            UnsupportedPlatformError: If the name is unknown
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value or "").strip().lower())
        except ValueError:
            supported = ", ".join(p.value for p in cls)
            raise UnsupportedPlatformError(
                f"Unsupported platform: {value!r}. Supported platforms: {supported}"
            )


@dataclass
class AdapterConfig:
    """Configuration for adapter instances."""
    platform: PlatformType
    base_url: str
    token: str
    host: Optional[str] = None
    timeout: int = 30
    max_retries: int = 3
    verify_ssl: bool = True
    custom_headers: Optional[Dict[str, str]] = None


class BaseAdapter(ABC):
    """
    Base adapter interface for SCM platform integrations.

    All platform-specific adapters must inherit from this class and
    implement all abstract methods. An adapter is built for a single
    aggregation; ``init`` must succeed before any fetch method is used.

    Fetch methods raise ``FetchError`` subclasses (``NotFoundError``,
    ``AccessPermissionError``, ``RateLimitError``, ``APIError``) and never
    leak the underlying client library's exceptions.
    """

    def __init__(self, config: AdapterConfig):
        """
        Initialize the adapter.

        Args:
            config: Adapter configuration
        """
        self.config = config
        self.session: Optional[requests.Session] = None
        self.logger = get_logger(f"{__name__}.{self.__class__.__name__}")
        self.logger.debug(f"Constructing {self.__class__.__name__}")

    @abstractmethod
    def init(self, session: requests.Session) -> None:
        """
        Establish the authenticated transport state.

        Args:
            session: Authenticated HTTP session for this aggregation

        Raises:
            AdapterInitError: If the client cannot be set up
        """
        pass

    @abstractmethod
    def get_authorized_user(self) -> User:
        """
        Get the user the access token belongs to.

        Raises:
            FetchError: If the user cannot be fetched
        """
        pass

    @abstractmethod
    def get_repository(
        self,
        organization: str,
        repository_name: str,
        branch: str = ""
    ) -> Repository:
        """
        Fetch repository settings.

        Args:
            organization: Namespace (may be nested for GitLab groups)
            repository_name: Repository name
            branch: Branch requested by the caller (may be empty)

        Returns:
            Repository with owner kind populated

        Raises:
            NotFoundError: If the repository doesn't exist
            FetchError: For other failures
        """
        pass

    @abstractmethod
    def get_branch_protection(
        self,
        organization: str,
        repository: Repository,
        branch_name: str
    ) -> BranchProtection:
        """
        Fetch the protection rules of a branch.

        Raises:
            NotFoundError: If the branch is not protected
            FetchError: For other failures
        """
        pass

    @abstractmethod
    def get_pipelines(
        self,
        organization: str,
        repository_name: str,
        branch_name: str
    ) -> List[Pipeline]:
        """
        Fetch the CI/CD pipeline definitions at a branch.

        Raises:
            FetchError: If the definitions cannot be listed
        """
        pass

    @abstractmethod
    def get_organization(self, organization: str) -> Organization:
        """
        Fetch organization (or group) settings.

        Raises:
            FetchError: If the organization cannot be fetched
        """
        pass

    @abstractmethod
    def get_registry(self, organization: Organization) -> PackageRegistry:
        """
        Fetch the package registry configuration of an organization.

        Raises:
            FetchError: If the registry cannot be fetched
        """
        pass

    @abstractmethod
    def list_organization_members(self, organization: str) -> List[Member]:
        """
        List the members of an organization.

        Raises:
            FetchError: If the members cannot be listed
        """
        pass

    @abstractmethod
    def list_supported_checks_ids(self) -> List[str]:
        """
        List the compliance check identifiers this platform supports.

        Raises:
            FetchError: If the identifiers cannot be determined
        """
        pass

    @property
    def is_initialized(self) -> bool:
        """Check if init() has completed."""
        return self.session is not None

    @staticmethod
    def get_branch_name(default_branch: Optional[str], branch: Optional[str]) -> str:
        """
        Pick the branch to inspect.

        Args:
            default_branch: Default branch reported by the platform
            branch: Branch requested by the caller

        Returns:
            The requested branch when given, the default branch otherwise
        """
        if branch:
            return branch
        return default_branch or ""

    def __repr__(self) -> str:
        """String representation of adapter."""
        return (
            f"{self.__class__.__name__}("
            f"platform={self.config.platform.value}, "
            f"base_url={self.config.base_url})"
        )
