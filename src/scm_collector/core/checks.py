"""
Catalogue of compliance check identifiers.

Only identifiers live here; the rules behind them belong to the check engine.
"""
from typing import Dict, List

SOURCE_CODE_CHECKS = [
    "1.1.3",   # required approvals
    "1.1.4",   # stale approvals dismissed on new commits
    "1.1.5",   # code owner review required
    "1.1.6",   # code owners file present
    "1.1.8",   # inactive branches
    "1.1.9",   # status checks pass before merge
    "1.1.10",  # branches up to date before merge
    "1.1.11",  # conversations resolved before merge
    "1.1.12",  # signed commits required
    "1.1.13",  # linear history required
    "1.1.14",  # protection enforced for administrators
    "1.1.16",  # force push denied
    "1.1.17",  # branch deletion denied
    "1.2.1",   # public repository has SECURITY.md
    "1.2.2",   # repository creation limited to specific members
    "1.2.3",   # repository deletion limited to specific users
    "1.2.4",   # issue deletion limited to specific users
    "1.3.1",   # inactive users reviewed
    "1.3.3",   # minimum number of administrators
    "1.3.5",   # two-factor authentication enforced
    "1.3.7",   # two administrators per repository
    "1.3.8",   # strict base permissions
    "1.3.9",   # verified domain
    "1.5.1",   # secret scanning
]

BUILD_PIPELINE_CHECKS = [
    "2.3.1",   # pipeline dependencies pinned
    "2.3.5",   # scanners run in pipelines
    "2.3.7",   # vulnerability scanning in pipelines
    "2.3.8",   # secrets scanning in pipelines
    "2.4.2",   # pipeline actions pinned to commits
    "2.4.6",   # SBOM generated by pipelines
]

DEPENDENCY_CHECKS = [
    "3.1.7",   # dependencies pinned
    "3.2.2",   # dependency vulnerability scanning
    "3.2.3",   # dependency license scanning
]

ARTIFACT_CHECKS = [
    "4.2.3",   # registry two-factor authentication
    "4.2.5",   # anonymous registry access disabled
    "4.3.4",   # webhooks use SSL
]

CHECK_CATEGORIES: Dict[str, List[str]] = {
    "source_code": SOURCE_CODE_CHECKS,
    "build_pipelines": BUILD_PIPELINE_CHECKS,
    "dependencies": DEPENDENCY_CHECKS,
    "artifacts": ARTIFACT_CHECKS,
}

ALL_CHECKS: List[str] = [
    check_id for checks in CHECK_CATEGORIES.values() for check_id in checks
]

# GitLab exposes no equivalents for these
GITLAB_UNSUPPORTED_CHECKS = frozenset({
    "1.1.10",
    "1.1.11",
    "1.1.12",
    "1.1.13",
    "1.1.14",
    "1.1.17",
    "1.2.4",
    "1.3.8",
    "1.3.9",
    "4.2.5",
})

GITLAB_CHECKS: List[str] = [
    check_id for check_id in ALL_CHECKS if check_id not in GITLAB_UNSUPPORTED_CHECKS
]


def category_of(check_id: str) -> str:
    """Return the category a check identifier belongs to."""
    for category, checks in CHECK_CATEGORIES.items():
        if check_id in checks:
            return category
    raise KeyError(f"Unknown check identifier: {check_id}")
