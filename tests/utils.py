"""
Utility classes for testing.
"""

import copy
from typing import Any, Dict, List

from scm_collector.adapters.base import BaseAdapter, AdapterConfig, PlatformType
from scm_collector.utils import ProgressReporter


class FakeAdapter(BaseAdapter):
    """
    Adapter with canned responses.

    Each response is keyed by method name. An exception instance is raised
    instead of returned. Returned values are deep copies so that one
    aggregation never sees another's mutations.
    """

    def __init__(self, config: AdapterConfig = None, **responses: Any):
        super().__init__(config or AdapterConfig(
            platform=PlatformType.GITHUB,
            base_url="https://api.github.com",
            token="test_token",
        ))
        self.responses: Dict[str, Any] = responses
        self.calls: List[str] = []
        self.call_args: Dict[str, tuple] = {}

    def _respond(self, name: str, *args):
        self.calls.append(name)
        self.call_args[name] = args
        value = self.responses.get(name)
        if isinstance(value, Exception):
            raise value
        return copy.deepcopy(value)

    def init(self, session) -> None:
        self.session = session

    def get_authorized_user(self):
        return self._respond("get_authorized_user")

    def get_repository(self, organization, repository_name, branch=""):
        return self._respond("get_repository", organization, repository_name, branch)

    def get_branch_protection(self, organization, repository, branch_name):
        return self._respond("get_branch_protection", organization, repository, branch_name)

    def get_pipelines(self, organization, repository_name, branch_name):
        return self._respond("get_pipelines", organization, repository_name, branch_name)

    def get_organization(self, organization):
        return self._respond("get_organization", organization)

    def get_registry(self, organization):
        return self._respond("get_registry", organization)

    def list_organization_members(self, organization):
        return self._respond("list_organization_members", organization)

    def list_supported_checks_ids(self):
        return self._respond("list_supported_checks_ids")


class FakeAdapterFactory:
    """Factory that builds a fresh FakeAdapter per request from a template."""

    def __init__(self, template: FakeAdapter):
        self.template = template
        self.requests: List[tuple] = []
        self.created: List[FakeAdapter] = []

    def create_adapter(self, platform, token=None, host=None, **kwargs):
        self.requests.append((platform, token, host))
        adapter = FakeAdapter(self.template.config, **self.template.responses)
        adapter.init(session=object())
        self.created.append(adapter)
        return adapter

    @property
    def last_adapter(self) -> FakeAdapter:
        return self.created[-1]


class RecordingProgressReporter(ProgressReporter):
    """Keeps the ordered list of finished phases."""

    def __init__(self):
        self.phases: List[str] = []

    def fetching_finished(self, phase: str, emoji: str = "") -> None:
        self.phases.append(phase)
