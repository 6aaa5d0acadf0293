"""Adapter modules for SCM platform integrations."""

from .base import (
    BaseAdapter,
    AdapterConfig,
    PlatformType,
)
from .factory import AdapterFactory, get_adapter, select_platform
from .github import GitHubAdapter
from .gitlab import GitLabAdapter

__all__ = [
    "BaseAdapter",
    "AdapterConfig",
    "PlatformType",
    "AdapterFactory",
    "get_adapter",
    "select_platform",
    "GitHubAdapter",
    "GitLabAdapter",
]
