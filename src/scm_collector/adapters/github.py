"""
GitHub adapter for collecting repository and organization settings.
"""
from typing import List, Optional

import requests
from github import Github, GithubException, RateLimitExceededException

from scm_collector.utils import get_logger
from scm_collector.core.checks import ALL_CHECKS
from scm_collector.core.pipelines import build_pipeline, github_job_names
from scm_collector.core.models import (
    User,
    Member,
    Owner,
    OwnerKind,
    Hook,
    Repository,
    BranchProtection,
    Pipeline,
    Organization,
    Package,
    PackageRegistry,
)
from scm_collector.core.exceptions import (
    AdapterInitError,
    NotFoundError,
    AccessPermissionError,
    APIError,
    RateLimitError,
)
from .base import BaseAdapter, AdapterConfig

logger = get_logger(__name__)

PACKAGE_TYPES = ("npm", "maven", "rubygems", "nuget", "container")


def _error_message(e: GithubException) -> str:
    data = getattr(e, 'data', None)
    if isinstance(data, dict):
        return data.get('message', str(e))
    return str(e)


class GitHubAdapter(BaseAdapter):
    """
    GitHub-specific adapter implementation.

    Uses PyGithub for the REST resources it models and the shared requests
    session for the ones it doesn't (organization packages).
    """

    def __init__(self, config: AdapterConfig):
        super().__init__(config)
        self.client: Optional[Github] = None

    def init(self, session: requests.Session) -> None:
        """
        Create the PyGithub client for this aggregation.

        Raises:
            AdapterInitError: If no token is configured or the client fails
        """
        if not self.config.token:
            raise AdapterInitError("GitHub access token is required")

        try:
            self.client = Github(
                login_or_token=self.config.token,
                base_url=self.config.base_url,
                timeout=self.config.timeout,
                retry=self.config.max_retries,
                verify=self.config.verify_ssl,
            )
        except (GithubException, ValueError, TypeError) as e:
            raise AdapterInitError("error with SCM init client", details=str(e))

        self.session = session
        logger.info(f"GitHubAdapter initialized for {self.config.base_url}")

    def get_authorized_user(self) -> User:
        try:
            user = self.client.get_user()
            logger.debug(f"Authorized as {user.login}")
            return User(
                id=user.id,
                username=user.login,
                name=user.name,
                email=user.email,
                is_admin=user.site_admin,
            )
        except (GithubException, requests.RequestException) as e:
            self._raise_api_error(e, "authorized user")

    def get_repository(
        self,
        organization: str,
        repository_name: str,
        branch: str = ""
    ) -> Repository:
        full_name = f"{organization}/{repository_name}"
        try:
            logger.info(f"Fetching repository settings for {full_name}")
            repo = self.client.get_repo(full_name)

            return Repository(
                id=repo.id,
                name=repo.name,
                full_name=repo.full_name,
                owner=Owner(
                    id=repo.owner.id,
                    login=repo.owner.login,
                    kind=self._map_owner_kind(repo.owner.type),
                ),
                default_branch=repo.default_branch,
                is_private=repo.private,
                is_archived=repo.archived,
                url=repo.html_url,
                allow_merge_commit=repo.allow_merge_commit,
                allow_squash_merge=repo.allow_squash_merge,
                allow_rebase_merge=repo.allow_rebase_merge,
                delete_branch_on_merge=repo.delete_branch_on_merge,
                allow_forking=repo.allow_forking,
                collaborators=self._list_collaborators(repo),
                hooks=self._list_hooks(repo),
                created_at=repo.created_at,
                updated_at=repo.updated_at,
            )
        except (GithubException, requests.RequestException) as e:
            self._raise_api_error(e, f"repository {full_name}")

    def get_branch_protection(
        self,
        organization: str,
        repository: Repository,
        branch_name: str
    ) -> BranchProtection:
        try:
            logger.debug(f"Fetching protection of {repository.full_name}@{branch_name}")
            repo = self.client.get_repo(repository.full_name)
            branch = repo.get_branch(branch_name)
            protection = branch.get_protection()

            status_checks = protection.required_status_checks
            reviews = protection.required_pull_request_reviews

            return BranchProtection(
                branch=branch_name,
                enforce_admins=protection.enforce_admins,
                required_status_checks_strict=status_checks.strict if status_checks else None,
                required_status_checks=list(status_checks.contexts) if status_checks else [],
                require_pull_request_reviews=reviews is not None,
                required_approving_review_count=(
                    reviews.required_approving_review_count if reviews else None
                ),
                dismiss_stale_reviews=reviews.dismiss_stale_reviews if reviews else None,
                require_code_owner_reviews=reviews.require_code_owner_reviews if reviews else None,
                required_linear_history=protection.required_linear_history,
                allow_force_pushes=protection.allow_force_pushes,
                allow_deletions=protection.allow_deletions,
                required_signatures=self._required_signatures(branch),
                required_conversation_resolution=protection.required_conversation_resolution,
            )
        except (GithubException, requests.RequestException) as e:
            self._raise_api_error(e, f"branch protection for {branch_name}")

    def get_pipelines(
        self,
        organization: str,
        repository_name: str,
        branch_name: str
    ) -> List[Pipeline]:
        full_name = f"{organization}/{repository_name}"
        try:
            repo = self.client.get_repo(full_name)
            pipelines = []
            for workflow in repo.get_workflows():
                raw = self._read_file(repo, workflow.path, branch_name)
                pipelines.append(
                    build_pipeline(workflow.name, workflow.path, raw, github_job_names)
                )

            logger.debug(f"Found {len(pipelines)} workflows in {full_name}")
            return pipelines
        except (GithubException, requests.RequestException) as e:
            self._raise_api_error(e, f"workflows of {full_name}")

    def get_organization(self, organization: str) -> Organization:
        try:
            gh_org = self.client.get_organization(organization)
            return Organization(
                id=gh_org.id,
                login=gh_org.login,
                name=gh_org.name,
                two_factor_requirement_enabled=gh_org.two_factor_requirement_enabled,
                default_repository_permission=gh_org.default_repository_permission,
                members_can_create_repositories=gh_org.members_can_create_repositories,
                is_verified=getattr(gh_org, "is_verified", None),
            )
        except (GithubException, requests.RequestException) as e:
            self._raise_api_error(e, f"organization {organization}")

    def get_registry(self, organization: Organization) -> PackageRegistry:
        packages = []
        for package_type in PACKAGE_TYPES:
            url = f"{self.config.base_url.rstrip('/')}/orgs/{organization.login}/packages"
            try:
                response = self.session.get(url, params={"package_type": package_type})
            except requests.RequestException as e:
                raise APIError(f"Failed to list {package_type} packages: {e}")

            if response.status_code == 404:
                continue
            self._raise_for_status(response, f"{package_type} packages")

            try:
                items = response.json()
            except ValueError as e:
                raise APIError(
                    f"Invalid JSON from {package_type} packages",
                    status_code=response.status_code,
                    details=str(e),
                )

            for item in items:
                packages.append(Package(
                    name=item.get("name"),
                    package_type=item.get("package_type", package_type),
                    visibility=item.get("visibility"),
                ))

        return PackageRegistry(
            two_factor_requirement_enabled=organization.two_factor_requirement_enabled,
            packages=packages,
        )

    def list_organization_members(self, organization: str) -> List[Member]:
        try:
            gh_org = self.client.get_organization(organization)
            admins = {user.login for user in gh_org.get_members(role="admin")}
            return [
                Member(
                    id=user.id,
                    username=user.login,
                    is_admin=user.login in admins,
                    role="admin" if user.login in admins else "member",
                )
                for user in gh_org.get_members()
            ]
        except (GithubException, requests.RequestException) as e:
            self._raise_api_error(e, f"members of {organization}")

    def list_supported_checks_ids(self) -> List[str]:
        return list(ALL_CHECKS)

    def _list_collaborators(self, repo) -> List[Member]:
        """Collaborators need push access to list; return what we can."""
        try:
            return [
                Member(
                    id=user.id,
                    username=user.login,
                    is_admin=bool(user.permissions and user.permissions.admin),
                    role=getattr(user, "role_name", None),
                )
                for user in repo.get_collaborators()
            ]
        except (GithubException, requests.RequestException) as e:
            logger.debug(f"Collaborators unavailable for {repo.full_name}: {_error_message(e)}")
            return []

    def _list_hooks(self, repo) -> List[Hook]:
        try:
            hooks = []
            for gh_hook in repo.get_hooks():
                config = gh_hook.config or {}
                hooks.append(Hook(
                    url=config.get("url"),
                    events=list(gh_hook.events or []),
                    active=gh_hook.active,
                    insecure_ssl=str(config.get("insecure_ssl", "0")) == "1",
                    has_secret="secret" in config,
                ))
            return hooks
        except (GithubException, requests.RequestException) as e:
            logger.debug(f"Hooks unavailable for {repo.full_name}: {_error_message(e)}")
            return []

    def _required_signatures(self, branch) -> Optional[bool]:
        try:
            return branch.get_required_signatures()
        except (GithubException, requests.RequestException) as e:
            logger.debug(f"Signature requirement unavailable: {_error_message(e)}")
            return None

    def _read_file(self, repo, path: str, ref: str) -> Optional[str]:
        try:
            content = repo.get_contents(path, ref=ref) if ref else repo.get_contents(path)
            return content.decoded_content.decode('utf-8')
        except GithubException as e:
            logger.warning(f"Could not read {path} at {ref or 'default branch'}: {_error_message(e)}")
            return None
        except UnicodeDecodeError as e:
            logger.warning(f"{path} at {ref or 'default branch'} is not valid UTF-8: {e}")
            return None

    @staticmethod
    def _map_owner_kind(owner_type: Optional[str]) -> OwnerKind:
        if owner_type == OwnerKind.ORGANIZATION.value:
            return OwnerKind.ORGANIZATION
        return OwnerKind.USER

    @staticmethod
    def _raise_api_error(e: Exception, what: str) -> None:
        """Translate a PyGithub or transport exception into a FetchError."""
        if not isinstance(e, GithubException):
            raise APIError(f"Failed to fetch {what}: {e}")
        message = _error_message(e)
        if isinstance(e, RateLimitExceededException):
            raise RateLimitError(f"Rate limit exceeded while fetching {what}", details=message)
        if e.status == 404:
            raise NotFoundError(f"{what} not found", details=message)
        if e.status in (401, 403):
            raise AccessPermissionError(f"Access denied to {what}", status_code=e.status, details=message)
        raise APIError(f"Failed to fetch {what}: {message}", status_code=e.status)

    @staticmethod
    def _raise_for_status(response: requests.Response, what: str) -> None:
        if response.status_code < 400:
            return
        if response.status_code in (401, 403):
            raise AccessPermissionError(f"Access denied to {what}", status_code=response.status_code)
        if response.status_code == 429:
            raise RateLimitError(f"Rate limit exceeded while fetching {what}")
        raise APIError(
            f"Failed to fetch {what}: HTTP {response.status_code}",
            status_code=response.status_code
        )
