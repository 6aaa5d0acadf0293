"""Helpers for turning pipeline definition files into Pipeline models."""

from typing import Any, Callable, Dict, List, Optional

import yaml

from scm_collector.utils import get_logger
from .models import Pipeline

logger = get_logger(__name__)

GITLAB_RESERVED_KEYWORDS = frozenset({
    "default",
    "include",
    "stages",
    "variables",
    "workflow",
    "image",
    "services",
    "cache",
    "before_script",
    "after_script",
    "pages",
})


def github_job_names(definition: Dict[str, Any]) -> List[str]:
    """Job ids of a GitHub Actions workflow."""
    jobs = definition.get("jobs") or {}
    return list(jobs.keys()) if isinstance(jobs, dict) else []


def gitlab_job_names(definition: Dict[str, Any]) -> List[str]:
    """Job names of a .gitlab-ci.yml file (hidden jobs excluded)."""
    return [
        key for key, value in definition.items()
        if isinstance(key, str)
        and isinstance(value, dict)
        and key not in GITLAB_RESERVED_KEYWORDS
        and not key.startswith(".")
    ]


def build_pipeline(
    name: str,
    path: str,
    raw: Optional[str],
    job_names: Callable[[Dict[str, Any]], List[str]],
) -> Pipeline:
    """
    Parse a definition file into a Pipeline.

    A file that is not valid YAML, or not a mapping, still yields a Pipeline
    with its raw content and no jobs.
    """
    definition = None
    if raw:
        try:
            loaded = yaml.safe_load(raw)
        except yaml.YAMLError as e:
            logger.warning(f"Could not parse pipeline {path}: {e}")
            loaded = None
        if isinstance(loaded, dict):
            definition = loaded

    if definition is not None and isinstance(definition.get("name"), str):
        name = definition["name"]

    return Pipeline(
        name=name,
        path=path,
        raw=raw,
        definition=definition,
        jobs=job_names(definition) if definition is not None else [],
    )
