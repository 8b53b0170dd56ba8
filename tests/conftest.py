"""Shared test fixtures and configuration."""
from __future__ import annotations

import os
from typing import Generator

import pytest
from fastapi.testclient import TestClient

# Set test environment variables before importing app
os.environ["ALLOWED_ORIGINS"] = "http://localhost:3000,http://localhost:4200"
os.environ["GITHUB_API_URL"] = "https://api.github.test"
os.environ["GITHUB_TOKEN"] = "test_token_12345"
os.environ["GITHUB_REPOSITORY"] = "octo-org/hello-world"

from actions_monitor.main import create_app
from actions_monitor.services.github_models import Job


@pytest.fixture
def app():
    """Create a FastAPI app instance for testing."""
    return create_app()


@pytest.fixture
def client(app) -> Generator[TestClient, None, None]:
    """Create a test client for the FastAPI app."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def make_job():
    """Build a Job with sensible defaults."""
    def _make_job(job_id: int, **overrides) -> Job:
        fields = {
            "id": job_id,
            "run_id": 100,
            "status": "completed",
            "name": f"job-{job_id}",
        }
        fields.update(overrides)
        return Job(**fields)
    return _make_job


@pytest.fixture
def sample_jobs_payload():
    """Sample GitHub "list jobs for a workflow run" response."""
    return {
        "total_count": 3,
        "jobs": [
            {
                "id": 11,
                "run_id": 555,
                "run_attempt": 1,
                "status": "completed",
                "conclusion": "success",
                "name": "build",
                "started_at": "2026-03-01T10:00:00Z",
                "completed_at": "2026-03-01T10:04:05Z",
                "html_url": "https://github.com/octo-org/hello-world/actions/runs/555/job/11",
                "labels": ["ubuntu-latest"],
                "runner_id": 7,
                "runner_name": "GitHub Actions 7",
                "runner_group_id": 1,
                "runner_group_name": "GitHub Actions",
                "steps": [
                    {
                        "name": "Set up job",
                        "status": "completed",
                        "conclusion": "success",
                        "number": 1,
                        "started_at": "2026-03-01T10:00:00.000Z",
                        "completed_at": "2026-03-01T10:00:02.000Z",
                    }
                ],
            },
            {
                "id": 12,
                "run_id": 555,
                "run_attempt": 1,
                "status": "in_progress",
                "conclusion": None,
                "name": "test",
                "started_at": "2026-03-01T10:05:00Z",
                "completed_at": None,
                "labels": ["ubuntu-latest"],
                "runner_id": None,
                "steps": [],
            },
            {
                "id": 13,
                "run_id": 555,
                "run_attempt": 1,
                "status": "completed",
                "conclusion": "failure",
                "name": "lint",
                "started_at": "2026-03-01T10:01:00Z",
                "completed_at": "2026-03-01T10:06:00Z",
                "labels": [],
                "steps": [],
            },
        ],
    }


@pytest.fixture
def sample_runs_payload():
    """Sample GitHub "list workflow runs" response."""
    return {
        "total_count": 42,
        "workflow_runs": [
            {
                "id": 555,
                "name": "CI",
                "run_number": 17,
                "run_attempt": 2,
                "event": "push",
                "status": "completed",
                "conclusion": "success",
                "head_branch": "main",
                "head_sha": "abc123",
                "actor": {"login": "octocat"},
                "html_url": "https://github.com/octo-org/hello-world/actions/runs/555",
                "jobs_url": "https://api.github.test/repos/octo-org/hello-world/actions/runs/555/jobs",
                "logs_url": "https://api.github.test/repos/octo-org/hello-world/actions/runs/555/logs",
                "rerun_url": "https://api.github.test/repos/octo-org/hello-world/actions/runs/555/rerun",
                "created_at": "2026-03-01T09:59:00Z",
                "updated_at": "2026-03-01T10:06:30Z",
            },
            {
                "id": 554,
                "display_title": "Nightly",
                "event": "schedule",
                "status": "queued",
                "conclusion": None,
                "head_branch": "main",
            },
        ],
    }
