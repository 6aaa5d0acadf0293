"""Tests for pipeline definition parsing."""

from scm_collector.core.pipelines import (
    build_pipeline,
    github_job_names,
    gitlab_job_names,
)


WORKFLOW = """
name: Release
on: [push]
jobs:
  build:
    runs-on: ubuntu-latest
  publish:
    needs: build
"""


class TestGitHubJobNames:
    """Test job extraction from workflows."""

    def test_jobs(self):
        assert github_job_names({"jobs": {"lint": {}, "test": {}}}) == ["lint", "test"]

    def test_no_jobs(self):
        assert github_job_names({"name": "empty"}) == []
        assert github_job_names({"jobs": ["not", "a", "mapping"]}) == []


class TestGitLabJobNames:
    """Test job extraction from .gitlab-ci.yml."""

    def test_skips_keywords_and_hidden_jobs(self):
        definition = {
            "stages": ["build"],
            "variables": {"FOO": "bar"},
            "default": {"image": "python"},
            ".base": {"script": "true"},
            "build": {"script": "make"},
            "deploy": {"script": "make deploy"},
        }

        assert gitlab_job_names(definition) == ["build", "deploy"]


class TestBuildPipeline:
    """Test Pipeline construction."""

    def test_workflow_name_overrides_file_name(self):
        pipeline = build_pipeline("release.yml", ".github/workflows/release.yml", WORKFLOW, github_job_names)

        assert pipeline.name == "Release"
        assert pipeline.path == ".github/workflows/release.yml"
        assert pipeline.jobs == ["build", "publish"]
        assert pipeline.raw == WORKFLOW

    def test_invalid_yaml(self):
        pipeline = build_pipeline("ci.yml", "ci.yml", "jobs: [unclosed", github_job_names)

        assert pipeline.name == "ci.yml"
        assert pipeline.definition is None
        assert pipeline.jobs == []

    def test_non_mapping_document(self):
        pipeline = build_pipeline("ci.yml", "ci.yml", "- just\n- a list\n", github_job_names)

        assert pipeline.definition is None

    def test_empty_content(self):
        pipeline = build_pipeline(".gitlab-ci.yml", ".gitlab-ci.yml", None, gitlab_job_names)

        assert pipeline.raw is None
        assert pipeline.jobs == []
