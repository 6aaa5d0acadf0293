"""
GitLab adapter built on the GitLab REST API (v4).
"""
from datetime import datetime
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import requests

from scm_collector.utils import get_logger
from scm_collector.core.checks import GITLAB_CHECKS
from scm_collector.core.pipelines import build_pipeline, gitlab_job_names
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

PIPELINE_FILE = ".gitlab-ci.yml"
PER_PAGE = 100

# GitLab access levels
NO_ACCESS = 0
MAINTAINER_ACCESS = 40
OWNER_ACCESS = 50


def _encode(path: str) -> str:
    """URL-encode a namespaced path for use as a GitLab resource id."""
    return quote(path, safe="")


def _parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None


class GitLabAdapter(BaseAdapter):
    """
    GitLab-specific adapter implementation.

    Groups play the role of organizations; a project whose namespace kind is
    ``group`` is treated as organization-owned.
    """

    def __init__(self, config: AdapterConfig):
        super().__init__(config)
        self.api_url = config.base_url.rstrip("/")

    def init(self, session: requests.Session) -> None:
        """
        Attach the authenticated session.

        Raises:
            AdapterInitError: If no token is configured or the API URL is unusable
        """
        if not self.config.token:
            raise AdapterInitError("GitLab access token is required")
        if not self.api_url.startswith(("http://", "https://")):
            raise AdapterInitError(
                "error with SCM init client",
                details=f"invalid GitLab API URL: {self.api_url}"
            )

        self.session = session
        logger.info(f"GitLabAdapter initialized for {self.api_url}")

    def get_authorized_user(self) -> User:
        data = self._get("/user", "authorized user")
        return User(
            id=data.get("id"),
            username=data.get("username"),
            name=data.get("name"),
            email=data.get("email"),
            is_admin=data.get("is_admin"),
        )

    def get_repository(
        self,
        organization: str,
        repository_name: str,
        branch: str = ""
    ) -> Repository:
        full_name = f"{organization}/{repository_name}"
        logger.info(f"Fetching project settings for {full_name}")
        project = self._get(f"/projects/{_encode(full_name)}", f"project {full_name}")

        project_id = project.get("id") or _encode(full_name)
        namespace = project.get("namespace") or {}
        merge_method = project.get("merge_method")
        squash_option = project.get("squash_option")

        return Repository(
            id=project.get("id"),
            name=project.get("path") or repository_name,
            full_name=project.get("path_with_namespace") or full_name,
            owner=Owner(
                id=namespace.get("id"),
                login=namespace.get("full_path") or organization,
                kind=self._map_owner_kind(namespace.get("kind")),
            ),
            default_branch=project.get("default_branch"),
            is_private=project.get("visibility") != "public" if project.get("visibility") else None,
            is_archived=project.get("archived"),
            url=project.get("web_url"),
            allow_merge_commit=merge_method == "merge" if merge_method else None,
            allow_squash_merge=squash_option != "never" if squash_option else None,
            allow_rebase_merge=merge_method in ("rebase_merge", "ff") if merge_method else None,
            delete_branch_on_merge=project.get("remove_source_branch_after_merge"),
            allow_forking=(
                project.get("forking_access_level") != "disabled"
                if project.get("forking_access_level") else None
            ),
            collaborators=self._list_project_members(project_id),
            hooks=self._list_hooks(project_id),
            created_at=_parse_timestamp(project.get("created_at")),
            updated_at=_parse_timestamp(project.get("last_activity_at")),
        )

    def get_branch_protection(
        self,
        organization: str,
        repository: Repository,
        branch_name: str
    ) -> BranchProtection:
        project_id = repository.id or _encode(repository.full_name)
        protected = self._get(
            f"/projects/{project_id}/protected_branches/{_encode(branch_name)}",
            f"protected branch {branch_name}"
        )

        push_levels = [
            level.get("access_level") for level in protected.get("push_access_levels") or []
        ]
        approvals = self._get_optional(f"/projects/{project_id}/approvals") or {}

        return BranchProtection(
            branch=branch_name,
            require_pull_request_reviews=bool(push_levels) and all(
                level == NO_ACCESS for level in push_levels
            ),
            required_approving_review_count=approvals.get("approvals_before_merge"),
            dismiss_stale_reviews=approvals.get("reset_approvals_on_push"),
            require_code_owner_reviews=protected.get("code_owner_approval_required"),
            allow_force_pushes=protected.get("allow_force_push"),
        )

    def get_pipelines(
        self,
        organization: str,
        repository_name: str,
        branch_name: str
    ) -> List[Pipeline]:
        full_name = f"{organization}/{repository_name}"
        params = {"ref": branch_name} if branch_name else None
        response = self._request(
            f"/projects/{_encode(full_name)}/repository/files/{_encode(PIPELINE_FILE)}/raw",
            params=params,
        )

        if response.status_code == 404:
            logger.debug(f"No {PIPELINE_FILE} in {full_name}")
            return []
        self._raise_for_status(response, f"{PIPELINE_FILE} of {full_name}")

        return [build_pipeline(PIPELINE_FILE, PIPELINE_FILE, response.text, gitlab_job_names)]

    def get_organization(self, organization: str) -> Organization:
        group = self._get(f"/groups/{_encode(organization)}", f"group {organization}")
        creation_level = group.get("project_creation_level")
        return Organization(
            id=group.get("id"),
            login=group.get("full_path") or organization,
            name=group.get("name"),
            two_factor_requirement_enabled=group.get("require_two_factor_authentication"),
            members_can_create_repositories=(
                creation_level == "developer" if creation_level else None
            ),
        )

    def get_registry(self, organization: Organization) -> PackageRegistry:
        group_id = organization.id or _encode(organization.login)
        items = self._get_paginated(f"/groups/{group_id}/packages", "group packages")
        return PackageRegistry(
            two_factor_requirement_enabled=organization.two_factor_requirement_enabled,
            packages=[
                Package(name=item.get("name"), package_type=item.get("package_type"))
                for item in items
            ],
        )

    def list_organization_members(self, organization: str) -> List[Member]:
        items = self._get_paginated(
            f"/groups/{_encode(organization)}/members/all",
            f"members of {organization}"
        )
        return [self._to_member(item, OWNER_ACCESS) for item in items]

    def list_supported_checks_ids(self) -> List[str]:
        return list(GITLAB_CHECKS)

    def _list_project_members(self, project_id) -> List[Member]:
        try:
            items = self._get_paginated(f"/projects/{project_id}/members/all", "project members")
        except APIError as e:
            logger.debug(f"Project members unavailable: {e.message}")
            return []
        return [self._to_member(item, MAINTAINER_ACCESS) for item in items]

    def _list_hooks(self, project_id) -> List[Hook]:
        try:
            items = self._get_paginated(f"/projects/{project_id}/hooks", "project hooks")
        except APIError as e:
            logger.debug(f"Project hooks unavailable: {e.message}")
            return []
        return [
            Hook(
                url=item.get("url"),
                events=sorted(
                    key[:-len("_events")] for key, value in item.items()
                    if key.endswith("_events") and value is True
                ),
                active=not item.get("disabled_until"),
                insecure_ssl=item.get("enable_ssl_verification") is False,
            )
            for item in items
        ]

    @staticmethod
    def _to_member(item: Dict[str, Any], admin_level: int) -> Member:
        access_level = item.get("access_level") or 0
        return Member(
            id=item.get("id"),
            username=item.get("username"),
            is_admin=access_level >= admin_level,
            role=str(access_level),
        )

    @staticmethod
    def _map_owner_kind(namespace_kind: Optional[str]) -> OwnerKind:
        if namespace_kind == "group":
            return OwnerKind.ORGANIZATION
        return OwnerKind.USER

    def _request(self, path: str, params: Optional[Dict[str, Any]] = None) -> requests.Response:
        url = f"{self.api_url}{path}"
        try:
            logger.debug(f"GET {url}")
            return self.session.get(url, params=params, timeout=self.config.timeout)
        except requests.RequestException as e:
            raise APIError(f"Request to {path} failed: {e}")

    def _get(self, path: str, what: str) -> Any:
        response = self._request(path)
        self._raise_for_status(response, what)
        return self._json(response, what)

    def _get_optional(self, path: str) -> Optional[Any]:
        """GET that treats any failure as missing data."""
        try:
            return self._get(path, path)
        except APIError as e:
            logger.debug(f"Optional resource {path} unavailable: {e.message}")
            return None

    def _get_paginated(self, path: str, what: str) -> List[Any]:
        items = []
        page = "1"
        while page:
            response = self._request(path, params={"per_page": PER_PAGE, "page": page})
            self._raise_for_status(response, what)
            items.extend(self._json(response, what))
            page = response.headers.get("X-Next-Page", "")
        return items

    @staticmethod
    def _json(response: requests.Response, what: str) -> Any:
        """Decode a JSON body; HTML sign-in or proxy pages become APIError."""
        try:
            return response.json()
        except ValueError as e:
            raise APIError(
                f"Invalid JSON from {what}",
                status_code=response.status_code,
                details=str(e),
            )

    @staticmethod
    def _raise_for_status(response: requests.Response, what: str) -> None:
        status = response.status_code
        if status < 400:
            return

        try:
            body = response.json()
            message = body.get("message") or body.get("error") if isinstance(body, dict) else None
        except ValueError:
            message = None
        message = str(message or response.reason or status)

        if status == 404:
            raise NotFoundError(f"{what} not found", details=message)
        if status in (401, 403):
            raise AccessPermissionError(f"Access denied to {what}", status_code=status, details=message)
        if status == 429:
            reset = response.headers.get("RateLimit-Reset")
            raise RateLimitError(
                f"Rate limit exceeded while fetching {what}",
                reset_at=int(reset) if reset and reset.isdigit() else None,
                details=message,
            )
        raise APIError(f"Failed to fetch {what}: {message}", status_code=status)
