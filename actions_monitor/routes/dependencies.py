"""Shared FastAPI dependencies for route modules."""

from __future__ import annotations

from fastapi import HTTPException, Request, status

from ..services.github_config import get_repository_coordinates
from ..services.github_errors import GitHubConfigurationError
from ..services.github_models import RepositoryCoordinates
from ..services.live_list import JobsRefresher, LiveJobList


def get_coordinates() -> RepositoryCoordinates:
    try:
        return get_repository_coordinates()
    except GitHubConfigurationError as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(exc),
        ) from exc


def get_job_list(request: Request) -> LiveJobList:
    return request.app.state.job_list


def get_jobs_refresher(request: Request) -> JobsRefresher:
    return request.app.state.jobs_refresher
