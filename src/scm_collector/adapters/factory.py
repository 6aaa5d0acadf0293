"""
Factory for creating platform-specific adapters.
"""
from typing import Optional, Union

from scm_collector.utils import get_logger, get_http_session
from scm_collector.config import get_settings
from scm_collector.core.exceptions import AdapterInitError, UnsupportedPlatformError
from .base import BaseAdapter, AdapterConfig, PlatformType
from .github import GitHubAdapter
from .gitlab import GitLabAdapter

logger = get_logger(__name__)

GITHUB_ENDPOINT = "github.com"
GITLAB_ENDPOINT = "gitlab.com"

KNOWN_HOSTS = {
    GITHUB_ENDPOINT: PlatformType.GITHUB,
    GITLAB_ENDPOINT: PlatformType.GITLAB,
}

# Header scheme each platform expects for its access token
AUTH_SCHEMES = {
    PlatformType.GITHUB: "token",
    PlatformType.GITLAB: "private-token",
}


def select_platform(host: str, explicit_platform: Optional[str] = "") -> str:
    """
    Decide which platform serves a host.

    Well-known public hosts win over the caller's choice; any other host
    (a self-hosted instance) uses the explicit value verbatim.

    Args:
        host: Host part of the repository URL
        explicit_platform: Platform requested by the caller

    Returns:
        Platform name, validated later by adapter construction
    """
    known = KNOWN_HOSTS.get((host or "").lower())
    if known is not None:
        if explicit_platform and explicit_platform.lower() != known.value:
            logger.info(
                f"Host {host} is served by {known.value}; ignoring requested platform "
                f"{explicit_platform!r}"
            )
        return known.value
    return explicit_platform


class AdapterFactory:
    """Factory for creating platform adapters."""

    _adapters = {}  # Registry of available adapters

    @classmethod
    def register_adapter(cls, platform: PlatformType, adapter_class: type):
        """
        Register an adapter class for a platform.

        Args:
            platform: Platform type
            adapter_class: Adapter class to register
        """
        cls._adapters[platform] = adapter_class
        logger.debug(f"Registered adapter for {platform.value}: {adapter_class.__name__}")

    @classmethod
    def create_adapter(
        cls,
        platform: Union[PlatformType, str],
        token: Optional[str] = None,
        host: Optional[str] = None,
        base_url: Optional[str] = None,
        **kwargs
    ) -> BaseAdapter:
        """
        Create and initialize an adapter for the specified platform.

        A new adapter and HTTP session are built on every call.

        Args:
            platform: Platform type or name
            token: Access token (read from config if not provided)
            host: SCM host the repository lives on
            base_url: API base URL (derived from host if not provided)
            **kwargs: timeout, max_retries, verify_ssl, custom_headers

        Returns:
            Initialized adapter instance

        Raises:
            UnsupportedPlatformError: If platform is not supported
            AdapterInitError: If the token is missing or initialization fails
        """
        platform = PlatformType.from_value(platform)
        if platform not in cls._adapters:
            available = ", ".join(p.value for p in cls._adapters.keys())
            raise UnsupportedPlatformError(
                f"Unsupported platform: {platform.value}. "
                f"Available platforms: {available}"
            )

        settings = get_settings()
        platform_settings = getattr(settings, platform.value)

        if base_url is None:
            base_url = cls._get_base_url(platform, host)

        if token is None:
            token = settings.token_for(platform.value)

        if not token:
            raise AdapterInitError(f"Authentication token required for {platform.value}")

        config = AdapterConfig(
            platform=platform,
            base_url=base_url,
            token=token,
            host=host,
            timeout=kwargs.get('timeout', platform_settings.timeout),
            max_retries=kwargs.get('max_retries', platform_settings.max_retries),
            verify_ssl=kwargs.get('verify_ssl', settings.collector.verify_ssl),
            custom_headers=kwargs.get('custom_headers')
        )

        session = get_http_session(
            token,
            timeout=config.timeout,
            max_retries=config.max_retries,
            verify_ssl=config.verify_ssl,
            auth_scheme=AUTH_SCHEMES.get(platform, "token"),
        )
        if config.custom_headers:
            session.headers.update(config.custom_headers)

        adapter_class = cls._adapters[platform]
        adapter = adapter_class(config)

        try:
            adapter.init(session)
        except AdapterInitError:
            session.close()
            logger.error(f"error with SCM init client for {platform.value}")
            raise

        logger.info(f"Created {platform.value} adapter for {base_url}")
        return adapter

    @staticmethod
    def _get_base_url(platform: PlatformType, host: Optional[str] = None) -> str:
        """Derive the API base URL of a platform from the repository host."""
        settings = get_settings()
        if platform == PlatformType.GITHUB:
            if not host or host.lower() == GITHUB_ENDPOINT:
                return settings.github.api_base_url
            return f"https://{host}/api/v3"
        if platform == PlatformType.GITLAB:
            if not host or host.lower() == GITLAB_ENDPOINT:
                return settings.gitlab.api_base_url
            return f"https://{host}/api/v4"
        return ""

    @classmethod
    def list_available_platforms(cls) -> list[str]:
        """Get list of available platforms."""
        return [platform.value for platform in cls._adapters.keys()]


def get_adapter(
    platform: Union[PlatformType, str],
    access_token: Optional[str],
    host: Optional[str],
) -> BaseAdapter:
    """Build an initialized adapter; see ``AdapterFactory.create_adapter``."""
    return AdapterFactory.create_adapter(platform, token=access_token, host=host)


AdapterFactory.register_adapter(PlatformType.GITHUB, GitHubAdapter)
AdapterFactory.register_adapter(PlatformType.GITLAB, GitLabAdapter)
