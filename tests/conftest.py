"""
Shared test fixtures and configuration for pytest.
This file is automatically discovered by pytest.
"""

import pytest

from scm_collector.config import get_settings
from scm_collector.core import (
    User,
    Member,
    Owner,
    OwnerKind,
    Repository,
    BranchProtection,
    Pipeline,
    Organization,
    Package,
    PackageRegistry,
)

from tests.utils import FakeAdapter, FakeAdapterFactory


@pytest.fixture
def sample_user():
    """Create a sample authorized User."""
    return User(id=1, username="octocat", name="The Octocat", email="octocat@example.com")


@pytest.fixture
def org_repository():
    """Create a repository owned by an organization."""
    return Repository(
        id=42,
        name="widgets",
        full_name="acme/widgets",
        owner=Owner(login="acme", kind=OwnerKind.ORGANIZATION, id=7),
        default_branch="main",
        is_private=True,
    )


@pytest.fixture
def user_repository():
    """Create a repository owned by a user account."""
    return Repository(
        id=43,
        name="dotfiles",
        full_name="octocat/dotfiles",
        owner=Owner(login="octocat", kind=OwnerKind.USER, id=1),
        default_branch="master",
    )


@pytest.fixture
def sample_protection():
    """Create sample BranchProtection settings."""
    return BranchProtection(
        branch="main",
        enforce_admins=True,
        require_pull_request_reviews=True,
        required_approving_review_count=2,
        dismiss_stale_reviews=True,
    )


@pytest.fixture
def sample_pipelines():
    """Create sample pipeline definitions."""
    return [
        Pipeline(name="CI", path=".github/workflows/ci.yml", jobs=["build", "test"]),
    ]


@pytest.fixture
def sample_organization():
    """Create sample Organization settings without members."""
    return Organization(
        id=7,
        login="acme",
        name="Acme Corp",
        two_factor_requirement_enabled=True,
        default_repository_permission="read",
    )


@pytest.fixture
def sample_members():
    """Create sample organization members."""
    return [
        Member(id=1, username="octocat", is_admin=True, role="admin"),
        Member(id=2, username="hubot", is_admin=False, role="member"),
    ]


@pytest.fixture
def sample_registry():
    """Create a sample PackageRegistry."""
    return PackageRegistry(
        two_factor_requirement_enabled=True,
        packages=[Package(name="widgets", package_type="npm", visibility="private")],
    )


@pytest.fixture
def fake_adapter(
    sample_user,
    org_repository,
    sample_protection,
    sample_pipelines,
    sample_organization,
    sample_members,
    sample_registry,
):
    """Create a FakeAdapter whose every fetch succeeds."""
    return FakeAdapter(
        get_authorized_user=sample_user,
        get_repository=org_repository,
        get_branch_protection=sample_protection,
        get_pipelines=sample_pipelines,
        get_organization=sample_organization,
        get_registry=sample_registry,
        list_organization_members=sample_members,
        list_supported_checks_ids=["1.1.3", "1.3.5"],
    )


@pytest.fixture
def fake_factory(fake_adapter):
    """Create a factory that hands out fresh copies of fake_adapter."""
    return FakeAdapterFactory(fake_adapter)


@pytest.fixture
def no_configured_tokens(monkeypatch):
    """Make sure no token leaks in from the environment or .env."""
    settings = get_settings()
    monkeypatch.setattr(settings.github, "token", None)
    monkeypatch.setattr(settings.gitlab, "token", None)
    return settings
