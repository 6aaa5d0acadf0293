"""
Assets Aggregator - orchestrates the data collection for one repository.
"""
import threading
from typing import Any, Callable, List, Optional, Tuple

from scm_collector.utils import get_logger, ProgressReporter, NullProgressReporter
from scm_collector.adapters.base import BaseAdapter
from scm_collector.adapters.factory import AdapterFactory, select_platform
from .models import AssetsData, AggregationResult, Organization, RepositoryLocator
from .exceptions import CollectorError, AggregationCancelledError
from .url_resolver import resolve_repository_url

logger = get_logger(__name__)

# Emoji shown next to each finished phase
REPOSITORY_EMOJI = "\U0001F6E2\uFE0F"  # oil drum
BRANCH_PROTECTION_EMOJI = "\U0001F331"  # seedling
PIPELINES_EMOJI = "\U0001F527"  # wrench
ORGANIZATION_EMOJI = "\U0001F3E2"  # office building
MEMBERS_EMOJI = "\U0001F46B"  # woman and man holding hands


class AssetsAggregator:
    """
    Drives a platform adapter through the fetch sequence.

    The sequence is strictly ordered and runs each step at most once. Only
    URL resolution and adapter construction are fatal; every other fetch is
    tolerated and leaves its field unset, except the final check-ID listing
    whose failure is returned on the result next to the collected data.
    """

    def __init__(
        self,
        adapter_factory: Any = AdapterFactory,
        progress: Optional[ProgressReporter] = None,
    ):
        """
        Initialize the aggregator.

        Args:
            adapter_factory: Object with a ``create_adapter(platform, token=, host=)``
                method
            progress: Sink notified after each fetch phase
        """
        self.adapter_factory = adapter_factory
        self.progress = progress or NullProgressReporter()

    def aggregate(
        self,
        access_token: str,
        repository_url: str,
        scm_platform: str = "",
        branch: str = "",
        cancel_event: Optional[threading.Event] = None,
    ) -> AggregationResult:
        """
        Collect the assets snapshot of a repository.

        Args:
            access_token: Token for the SCM platform
            repository_url: Absolute repository URL
            scm_platform: Platform to use when the host is not a public one
            branch: Branch to inspect; empty means the default branch
            cancel_event: Checked between steps; setting it aborts the run

        Returns:
            AggregationResult with the snapshot, supported check ids and the
            non-fatal check listing error, if any

        Raises:
            InvalidURLError: If the URL cannot be resolved
            UnsupportedPlatformError: If no adapter serves the platform
            AdapterInitError: If the adapter cannot be initialized
            AggregationCancelledError: If cancel_event was set
        """
        locator = resolve_repository_url(repository_url)
        platform = select_platform(locator.host, scm_platform)
        logger.info(f"Collecting {locator.full_name} from {locator.host} ({platform})")

        self._check_cancelled(cancel_event)
        adapter = self.adapter_factory.create_adapter(
            platform, token=access_token, host=locator.host
        )

        assets = AssetsData()

        self._check_cancelled(cancel_event)
        assets.authorized_user = self._attempt(
            "authorized user", adapter.get_authorized_user
        )

        self._check_cancelled(cancel_event)
        assets.repository = self._attempt(
            "repository settings",
            adapter.get_repository,
            locator.organization,
            locator.repository_name,
            branch,
        )
        self.progress.fetching_finished("Repository Settings", REPOSITORY_EMOJI)

        if assets.repository is not None:
            self._collect_repository_context(adapter, locator, assets, branch, cancel_event)
        else:
            logger.warning(
                f"Repository {locator.full_name} is unavailable; "
                "skipping branch, pipeline and organization data"
            )

        self._check_cancelled(cancel_event)
        checks_ids, error = self._list_checks_ids(adapter)

        return AggregationResult(assets=assets, checks_ids=checks_ids, error=error)

    def _collect_repository_context(
        self,
        adapter: BaseAdapter,
        locator: RepositoryLocator,
        assets: AssetsData,
        branch: str,
        cancel_event: Optional[threading.Event] = None,
    ) -> None:
        """Fetch everything that needs repository metadata."""
        repository = assets.repository
        branch_name = adapter.get_branch_name(repository.default_branch, branch)

        self._check_cancelled(cancel_event)
        assets.branch_protections = self._attempt(
            "branch protection",
            adapter.get_branch_protection,
            locator.organization,
            repository,
            branch_name,
        )
        self.progress.fetching_finished("Branch Protection Settings", BRANCH_PROTECTION_EMOJI)

        self._check_cancelled(cancel_event)
        assets.pipelines = self._attempt(
            "pipelines",
            adapter.get_pipelines,
            locator.organization,
            locator.repository_name,
            branch_name,
        ) or []
        self.progress.fetching_finished("Pipelines", PIPELINES_EMOJI)

        if repository.owner.is_organization:
            self._collect_organization(adapter, locator.organization, assets, cancel_event)
        else:
            logger.debug(f"{repository.owner.login} is a user account; no organization data")

    def _collect_organization(
        self,
        adapter: BaseAdapter,
        organization_name: str,
        assets: AssetsData,
        cancel_event: Optional[threading.Event] = None,
    ) -> None:
        """Fetch organization settings, then registry and members if they succeeded."""
        self._check_cancelled(cancel_event)
        organization: Optional[Organization] = self._attempt(
            "organization settings", adapter.get_organization, organization_name
        )
        assets.organization = organization
        self.progress.fetching_finished("Organization Settings", ORGANIZATION_EMOJI)

        if organization is None:
            return

        self._check_cancelled(cancel_event)
        assets.registry = self._attempt("package registry", adapter.get_registry, organization)

        self._check_cancelled(cancel_event)
        members = self._attempt(
            "organization members", adapter.list_organization_members, organization_name
        )
        if members is not None:
            organization.members = members
            self.progress.fetching_finished("Members", MEMBERS_EMOJI)

    def _list_checks_ids(self, adapter: BaseAdapter) -> Tuple[List[str], Optional[CollectorError]]:
        try:
            return adapter.list_supported_checks_ids(), None
        except CollectorError as e:
            logger.warning(f"Could not list supported checks: {e.message}")
            return [], e

    @staticmethod
    def _attempt(what: str, fetch: Callable, *args) -> Optional[Any]:
        """Run a tolerated fetch; a CollectorError leaves the result unset."""
        try:
            return fetch(*args)
        except CollectorError as e:
            logger.warning(f"Failed to fetch {what}: {e.message}")
            return None

    @staticmethod
    def _check_cancelled(cancel_event: Optional[threading.Event]) -> None:
        if cancel_event is not None and cancel_event.is_set():
            raise AggregationCancelledError("aggregation cancelled")


def fetch_client_data(
    access_token: str,
    repository_url: str,
    scm_platform: str = "",
    branch: str = "",
    progress: Optional[ProgressReporter] = None,
    cancel_event: Optional[threading.Event] = None,
) -> AggregationResult:
    """
    Collect the assets snapshot of a repository with the registered adapters.

    See ``AssetsAggregator.aggregate`` for the error policy.
    """
    aggregator = AssetsAggregator(progress=progress)
    return aggregator.aggregate(
        access_token,
        repository_url,
        scm_platform=scm_platform,
        branch=branch,
        cancel_event=cancel_event,
    )
