"""GitHub Actions API integration for workflow runs and jobs."""

from __future__ import annotations

import logging

from .github_client import execute_request
from .github_errors import GitHubAPIError, GitHubConfigurationError
from .github_models import (
    JobsList,
    RepositoryCoordinates,
    RequestPagination,
    RunFilter,
    WorkflowRunsPage,
)
from .github_parsers import parse_jobs_payload, parse_workflow_runs_payload
from .github_queries import (
    build_jobs_request,
    build_log_request,
    build_rerun_request,
    build_runs_query,
)

logger = logging.getLogger(__name__)

__all__ = [
    "GitHubAPIError",
    "GitHubConfigurationError",
    "download_workflow_log",
    "get_workflow_run_jobs",
    "list_workflow_runs",
    "rerun_workflow",
]


async def list_workflow_runs(
    coordinates: RepositoryCoordinates,
    run_filter: RunFilter | None = None,
    pagination: RequestPagination | None = None,
) -> WorkflowRunsPage:
    """
    List workflow runs of a repository.

    Args:
        coordinates: Repository to list runs for
        run_filter: Optional event/status/branch/actor qualifiers
        pagination: Optional page cursor

    Returns:
        Page of runs in the order GitHub returned them, with the total count
    """
    data = await execute_request(build_runs_query(coordinates, run_filter, pagination))
    if not isinstance(data, dict):
        raise GitHubAPIError("search workflow runs failed: unexpected payload")

    try:
        page = parse_workflow_runs_payload(data)
    except (KeyError, TypeError, ValueError) as exc:
        raise GitHubAPIError(f"search workflow runs failed: malformed payload ({exc!r})") from exc
    logger.info(
        "Parsed workflow runs from GitHub",
        extra={
            "repository": coordinates.repository_path,
            "returned": len(page.runs),
            "total_count": page.total_count,
        },
    )
    return page


async def get_workflow_run_jobs(jobs_url: str) -> JobsList:
    """Fetch the jobs of a workflow run, sorted for display."""
    data = await execute_request(build_jobs_request(jobs_url))
    if not isinstance(data, dict):
        raise GitHubAPIError("Get workflow-run jobs failed: unexpected payload")

    try:
        jobs = parse_jobs_payload(data)
    except (KeyError, TypeError, ValueError) as exc:
        raise GitHubAPIError(f"Get workflow-run jobs failed: malformed payload ({exc!r})") from exc
    logger.info(
        "Fetched %s jobs (total_count=%s) from %s",
        len(jobs),
        jobs.total_count,
        jobs_url,
    )
    return jobs


async def rerun_workflow(rerun_url: str) -> None:
    await execute_request(build_rerun_request(rerun_url))
    logger.info("Requested workflow rerun", extra={"url": rerun_url})


async def download_workflow_log(logs_url: str) -> bytes:
    """Download the log archive of a workflow run as raw bytes."""
    content = await execute_request(build_log_request(logs_url))
    logger.info("Downloaded workflow log", extra={"url": logs_url, "size": len(content or b"")})
    return content or b""
