"""Tests for adapter factory and platform selection."""

import pytest
from unittest.mock import patch

from scm_collector.adapters.factory import AdapterFactory, get_adapter, select_platform
from scm_collector.adapters.base import BaseAdapter, PlatformType
from scm_collector.adapters.github import GitHubAdapter
from scm_collector.adapters.gitlab import GitLabAdapter
from scm_collector.core.exceptions import AdapterInitError, UnsupportedPlatformError

from tests.utils import FakeAdapter


class FailingInitAdapter(FakeAdapter):
    """Adapter whose initialization always fails."""

    def init(self, session) -> None:
        raise AdapterInitError("error with SCM init client")


class ChecksOnlyAdapter(FakeAdapter):
    """Adapter that only knows its supported checks."""

    def __init__(self, config):
        super().__init__(config, list_supported_checks_ids=["1.1.3"])


class TestSelectPlatform:
    """Test host based platform detection."""

    @pytest.mark.parametrize("host,explicit,expected", [
        ("github.com", "", "github"),
        ("github.com", "gitlab", "github"),
        ("GitHub.com", "gitlab", "github"),
        ("gitlab.com", "github", "gitlab"),
        ("gitlab.com", "", "gitlab"),
    ])
    def test_known_hosts_override(self, host, explicit, expected):
        assert select_platform(host, explicit) == expected

    def test_self_hosted_keeps_explicit_value(self):
        assert select_platform("git.example.com", "gitlab") == "gitlab"

    def test_explicit_value_is_verbatim(self):
        assert select_platform("git.example.com", "Bitbucket") == "Bitbucket"

    def test_unknown_host_without_platform(self):
        assert select_platform("git.example.com", "") == ""


class TestPlatformType:
    """Test platform name conversion."""

    def test_from_value_case_insensitive(self):
        assert PlatformType.from_value("GitLab") is PlatformType.GITLAB
        assert PlatformType.from_value(PlatformType.GITHUB) is PlatformType.GITHUB

    @pytest.mark.parametrize("value", ["", None, "bitbucket", "svn"])
    def test_from_value_unsupported(self, value):
        with pytest.raises(UnsupportedPlatformError, match="Unsupported platform"):
            PlatformType.from_value(value)


class TestAdapterFactory:
    """Test adapter factory."""

    @pytest.fixture(autouse=True)
    def setup_teardown(self):
        """Store and restore the adapter registry around each test."""
        original_adapters = AdapterFactory._adapters.copy()

        yield

        AdapterFactory._adapters = original_adapters

    def test_default_registrations(self):
        assert AdapterFactory._adapters[PlatformType.GITHUB] is GitHubAdapter
        assert AdapterFactory._adapters[PlatformType.GITLAB] is GitLabAdapter

    def test_list_available_platforms(self):
        platforms = AdapterFactory.list_available_platforms()

        assert isinstance(platforms, list)
        assert 'github' in platforms
        assert 'gitlab' in platforms

    def test_register_adapter(self):
        AdapterFactory.register_adapter(PlatformType.GITHUB, FakeAdapter)

        adapter = AdapterFactory.create_adapter("github", token="test_token_123")

        assert isinstance(adapter, FakeAdapter)
        assert adapter.config.token == "test_token_123"
        assert adapter.config.platform == PlatformType.GITHUB
        assert adapter.is_initialized

    def test_unregistered_platform(self):
        AdapterFactory._adapters = {PlatformType.GITHUB: FakeAdapter}

        with pytest.raises(UnsupportedPlatformError, match="Available platforms: github"):
            AdapterFactory.create_adapter(PlatformType.GITLAB, token="t")

    def test_unknown_platform_name(self):
        with pytest.raises(UnsupportedPlatformError):
            AdapterFactory.create_adapter("svn", token="t")

    def test_missing_token(self, no_configured_tokens):
        with pytest.raises(AdapterInitError, match="token required"):
            AdapterFactory.create_adapter(PlatformType.GITHUB)

    def test_token_from_settings(self, no_configured_tokens, monkeypatch):
        AdapterFactory.register_adapter(PlatformType.GITLAB, FakeAdapter)
        monkeypatch.setattr(no_configured_tokens.gitlab, "token", "configured")

        adapter = AdapterFactory.create_adapter(PlatformType.GITLAB)

        assert adapter.config.token == "configured"

    def test_init_failure_is_raised(self):
        AdapterFactory.register_adapter(PlatformType.GITHUB, FailingInitAdapter)

        with pytest.raises(AdapterInitError):
            AdapterFactory.create_adapter(PlatformType.GITHUB, token="t")

    def test_each_call_builds_a_new_adapter(self):
        AdapterFactory.register_adapter(PlatformType.GITHUB, FakeAdapter)

        first = AdapterFactory.create_adapter(PlatformType.GITHUB, token="a")
        second = AdapterFactory.create_adapter(PlatformType.GITHUB, token="b")

        assert first is not second
        assert first.session is not second.session

    def test_custom_config(self):
        AdapterFactory.register_adapter(PlatformType.GITHUB, FakeAdapter)

        adapter = AdapterFactory.create_adapter(
            PlatformType.GITHUB,
            token="test_token",
            timeout=60,
            max_retries=5,
            verify_ssl=False,
        )

        assert adapter.config.timeout == 60
        assert adapter.config.max_retries == 5
        assert adapter.config.verify_ssl is False
        assert adapter.session.verify is False

    @pytest.mark.parametrize("platform,host,expected", [
        (PlatformType.GITHUB, "github.com", "https://api.github.com"),
        (PlatformType.GITHUB, None, "https://api.github.com"),
        (PlatformType.GITHUB, "ghe.example.com", "https://ghe.example.com/api/v3"),
        (PlatformType.GITLAB, "gitlab.com", "https://gitlab.com/api/v4"),
        (PlatformType.GITLAB, "git.example.com", "https://git.example.com/api/v4"),
    ])
    def test_base_url_from_host(self, platform, host, expected):
        assert AdapterFactory._get_base_url(platform, host) == expected

    def test_session_auth_headers(self):
        AdapterFactory.register_adapter(PlatformType.GITHUB, FakeAdapter)
        AdapterFactory.register_adapter(PlatformType.GITLAB, FakeAdapter)

        github = AdapterFactory.create_adapter(PlatformType.GITHUB, token="gh")
        gitlab = AdapterFactory.create_adapter(PlatformType.GITLAB, token="gl")

        assert github.session.headers["Authorization"] == "token gh"
        assert gitlab.session.headers["PRIVATE-TOKEN"] == "gl"

    def test_new_platform_adapter_reaches_orchestrator(self):
        """A registered adapter is used by the aggregator without changes to it."""
        from scm_collector.core.aggregator import AssetsAggregator

        AdapterFactory.register_adapter(PlatformType.GITLAB, ChecksOnlyAdapter)

        result = AssetsAggregator().aggregate(
            "token", "https://code.example.com/team/app", scm_platform="gitlab"
        )

        assert result.assets.repository is None
        assert result.checks_ids == ["1.1.3"]


class TestGetAdapter:
    """Test the functional constructor."""

    def test_builds_real_github_adapter(self):
        with patch('scm_collector.adapters.github.Github') as mock_github:
            adapter = get_adapter("github", "test_token", "github.com")

        assert isinstance(adapter, GitHubAdapter)
        assert isinstance(adapter, BaseAdapter)
        assert adapter.config.base_url == "https://api.github.com"
        mock_github.assert_called_once()

    def test_builds_gitlab_adapter_for_self_hosted(self):
        adapter = get_adapter("gitlab", "test_token", "git.example.com")

        assert isinstance(adapter, GitLabAdapter)
        assert adapter.api_url == "https://git.example.com/api/v4"
        assert adapter.config.host == "git.example.com"
