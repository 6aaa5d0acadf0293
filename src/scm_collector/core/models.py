"""
Core data models for SCM Collector.

Every model is platform neutral: the adapters map GitHub and GitLab payloads
onto these types, and the aggregator assembles them into ``AssetsData``.
"""
from dataclasses import dataclass, field
from typing import List, Optional, Dict, Any
from datetime import datetime
from enum import Enum

from scm_collector.utils import get_logger

logger = get_logger(__name__)


class OwnerKind(Enum):
    """Kind of account that owns a repository."""
    ORGANIZATION = "Organization"
    USER = "User"


def _isoformat(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


@dataclass(frozen=True)
class RepositoryLocator:
    """
    Where a repository lives, derived once from its URL.

    Attributes:
        host: Network location of the SCM (e.g. "github.com")
        organization: Namespace; may contain several segments for nested groups
        repository_name: Last path segment of the URL
    """
    host: str
    organization: str
    repository_name: str

    @property
    def full_name(self) -> str:
        """Namespace and repository joined with a slash."""
        return f"{self.organization}/{self.repository_name}"


@dataclass
class User:
    """An account on the SCM platform."""
    id: Optional[int] = None
    username: Optional[str] = None
    name: Optional[str] = None
    email: Optional[str] = None
    is_admin: Optional[bool] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'username': self.username,
            'name': self.name,
            'email': self.email,
            'is_admin': self.is_admin,
        }


@dataclass
class Member:
    """A user with a role inside an organization or repository."""
    username: str
    id: Optional[int] = None
    is_admin: bool = False
    role: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'username': self.username,
            'is_admin': self.is_admin,
            'role': self.role,
        }


@dataclass
class Owner:
    """Owner of a repository."""
    login: str
    kind: OwnerKind = OwnerKind.USER
    id: Optional[int] = None

    def __post_init__(self):
        if isinstance(self.kind, str):
            self.kind = OwnerKind(self.kind)

    @property
    def is_organization(self) -> bool:
        """Check if the owner is an organization (or GitLab group)."""
        return self.kind == OwnerKind.ORGANIZATION

    def to_dict(self) -> Dict[str, Any]:
        return {'id': self.id, 'login': self.login, 'kind': self.kind.value}


@dataclass
class Hook:
    """A repository webhook."""
    url: Optional[str] = None
    events: List[str] = field(default_factory=list)
    active: bool = True
    insecure_ssl: bool = False
    has_secret: Optional[bool] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'url': self.url,
            'events': list(self.events),
            'active': self.active,
            'insecure_ssl': self.insecure_ssl,
            'has_secret': self.has_secret,
        }


@dataclass
class Repository:
    """
    Repository settings as reported by the platform.

    Attributes:
        id: Platform identifier
        name: Repository name
        full_name: Namespace and name (e.g. "owner/repo")
        owner: Owning account
        default_branch: Default branch reported by the platform
        is_private: Whether the repository is private
        is_archived: Whether the repository is archived
        url: Web URL
        allow_merge_commit: Merge commits allowed
        allow_squash_merge: Squash merging allowed
        allow_rebase_merge: Rebase merging allowed
        delete_branch_on_merge: Head branches deleted automatically
        allow_forking: Forking allowed
        collaborators: Users with direct access
        hooks: Configured webhooks
        created_at: Creation timestamp
        updated_at: Last update timestamp
    """
    name: str
    full_name: str
    owner: Owner
    id: Optional[int] = None
    default_branch: Optional[str] = None
    is_private: Optional[bool] = None
    is_archived: Optional[bool] = None
    url: Optional[str] = None
    allow_merge_commit: Optional[bool] = None
    allow_squash_merge: Optional[bool] = None
    allow_rebase_merge: Optional[bool] = None
    delete_branch_on_merge: Optional[bool] = None
    allow_forking: Optional[bool] = None
    collaborators: List[Member] = field(default_factory=list)
    hooks: List[Hook] = field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self):
        logger.debug(
            f"Created Repository {self.full_name} "
            f"(owner kind: {self.owner.kind.value}, default branch: {self.default_branch})"
        )

    @property
    def is_owned_by_organization(self) -> bool:
        return self.owner.is_organization

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'full_name': self.full_name,
            'owner': self.owner.to_dict(),
            'default_branch': self.default_branch,
            'is_private': self.is_private,
            'is_archived': self.is_archived,
            'url': self.url,
            'allow_merge_commit': self.allow_merge_commit,
            'allow_squash_merge': self.allow_squash_merge,
            'allow_rebase_merge': self.allow_rebase_merge,
            'delete_branch_on_merge': self.delete_branch_on_merge,
            'allow_forking': self.allow_forking,
            'collaborators': [c.to_dict() for c in self.collaborators],
            'hooks': [h.to_dict() for h in self.hooks],
            'created_at': _isoformat(self.created_at),
            'updated_at': _isoformat(self.updated_at),
        }


@dataclass
class BranchProtection:
    """Protection rules on a single branch."""
    branch: str
    enforce_admins: Optional[bool] = None
    required_status_checks_strict: Optional[bool] = None
    required_status_checks: List[str] = field(default_factory=list)
    require_pull_request_reviews: Optional[bool] = None
    required_approving_review_count: Optional[int] = None
    dismiss_stale_reviews: Optional[bool] = None
    require_code_owner_reviews: Optional[bool] = None
    required_linear_history: Optional[bool] = None
    allow_force_pushes: Optional[bool] = None
    allow_deletions: Optional[bool] = None
    required_signatures: Optional[bool] = None
    required_conversation_resolution: Optional[bool] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'branch': self.branch,
            'enforce_admins': self.enforce_admins,
            'required_status_checks_strict': self.required_status_checks_strict,
            'required_status_checks': list(self.required_status_checks),
            'require_pull_request_reviews': self.require_pull_request_reviews,
            'required_approving_review_count': self.required_approving_review_count,
            'dismiss_stale_reviews': self.dismiss_stale_reviews,
            'require_code_owner_reviews': self.require_code_owner_reviews,
            'required_linear_history': self.required_linear_history,
            'allow_force_pushes': self.allow_force_pushes,
            'allow_deletions': self.allow_deletions,
            'required_signatures': self.required_signatures,
            'required_conversation_resolution': self.required_conversation_resolution,
        }


@dataclass
class Pipeline:
    """
    A CI/CD pipeline definition file.

    Attributes:
        name: Display name (workflow name or file name)
        path: Path of the definition inside the repository
        raw: Unparsed file content
        definition: Parsed YAML document (None if it could not be parsed)
        jobs: Names of the jobs declared in the definition
    """
    name: str
    path: str
    raw: Optional[str] = None
    definition: Optional[Dict[str, Any]] = None
    jobs: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'path': self.path,
            'jobs': list(self.jobs),
            'parsed': self.definition is not None,
        }


@dataclass
class Organization:
    """Organization (GitHub) or group (GitLab) settings."""
    login: str
    id: Optional[int] = None
    name: Optional[str] = None
    two_factor_requirement_enabled: Optional[bool] = None
    default_repository_permission: Optional[str] = None
    members_can_create_repositories: Optional[bool] = None
    is_verified: Optional[bool] = None
    members: List[Member] = field(default_factory=list)

    @property
    def admins(self) -> List[Member]:
        return [m for m in self.members if m.is_admin]

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'login': self.login,
            'name': self.name,
            'two_factor_requirement_enabled': self.two_factor_requirement_enabled,
            'default_repository_permission': self.default_repository_permission,
            'members_can_create_repositories': self.members_can_create_repositories,
            'is_verified': self.is_verified,
            'members': [m.to_dict() for m in self.members],
        }


@dataclass
class Package:
    """A package published to the platform registry."""
    name: str
    package_type: str
    visibility: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'package_type': self.package_type,
            'visibility': self.visibility,
        }


@dataclass
class PackageRegistry:
    """Registry configuration for an organization."""
    two_factor_requirement_enabled: Optional[bool] = None
    packages: List[Package] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'two_factor_requirement_enabled': self.two_factor_requirement_enabled,
            'packages': [p.to_dict() for p in self.packages],
        }


@dataclass
class AssetsData:
    """
    Aggregated snapshot handed to the compliance-check engine.

    Fields are filled independently; an unset field means "unknown", never
    "disabled".
    """
    authorized_user: Optional[User] = None
    organization: Optional[Organization] = None
    repository: Optional[Repository] = None
    branch_protections: Optional[BranchProtection] = None
    pipelines: List[Pipeline] = field(default_factory=list)
    registry: Optional[PackageRegistry] = None

    @property
    def is_empty(self) -> bool:
        """Check if nothing at all was collected."""
        return (
            self.authorized_user is None
            and self.organization is None
            and self.repository is None
            and self.branch_protections is None
            and not self.pipelines
            and self.registry is None
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert the snapshot to dictionary format."""
        return {
            'authorized_user': self.authorized_user.to_dict() if self.authorized_user else None,
            'organization': self.organization.to_dict() if self.organization else None,
            'repository': self.repository.to_dict() if self.repository else None,
            'branch_protections': (
                self.branch_protections.to_dict() if self.branch_protections else None
            ),
            'pipelines': [p.to_dict() for p in self.pipelines],
            'registry': self.registry.to_dict() if self.registry else None,
        }


@dataclass
class AggregationResult:
    """
    Outcome of one aggregation.

    Attributes:
        assets: Collected snapshot (possibly partial)
        checks_ids: Check identifiers supported by the platform adapter
        error: Non-fatal error raised while listing check identifiers
    """
    assets: AssetsData
    checks_ids: List[str] = field(default_factory=list)
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'assets': self.assets.to_dict(),
            'checks_ids': list(self.checks_ids),
            'error': str(self.error) if self.error else None,
        }
