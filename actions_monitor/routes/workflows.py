"""Workflow-run and job HTTP routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from ..schemas.workflows import (
    JobInfo,
    JobListResponse,
    JobSelectionRequest,
    ListRunsResponse,
    RerunWorkflowResponse,
    RunInfo,
    WatchResponse,
)
from ..services.github import (
    GitHubAPIError,
    GitHubConfigurationError,
    download_workflow_log,
    list_workflow_runs,
    rerun_workflow,
)
from ..services.github_models import RepositoryCoordinates, RequestPagination, RunFilter
from ..services.live_list import JobsRefresher, LiveJobList
from .dependencies import get_coordinates, get_job_list, get_jobs_refresher

router = APIRouter(tags=["workflows"])


def _job_list_response(job_list: LiveJobList) -> JobListResponse:
    snapshot = job_list.model.value
    selected = job_list.selected_job()
    return JobListResponse(
        state=job_list.state.value,
        total=snapshot.total_count if snapshot is not None else 0,
        jobs=[JobInfo.from_job(job) for job in job_list.jobs],
        selectedJobId=selected.id if selected else None,
        copyEnabled=job_list.copy_provider.is_copy_enabled(),
    )


@router.get("/runs", response_model=ListRunsResponse)
async def list_runs(
    event: str | None = Query(None, description="Filter by triggering event, e.g. push"),
    status_filter: str | None = Query(None, alias="status", description="Filter by run status or conclusion"),
    branch: str | None = Query(None, description="Filter by head branch"),
    actor: str | None = Query(None, description="Filter by the user who triggered the run"),
    page: int = Query(1, ge=1),
    per_page: int = Query(30, ge=1, le=100),
    coordinates: RepositoryCoordinates = Depends(get_coordinates),
) -> ListRunsResponse:
    """List workflow runs of the configured repository."""
    run_filter = RunFilter(event=event, status=status_filter, branch=branch, actor=actor)
    try:
        runs_page = await list_workflow_runs(
            coordinates,
            run_filter,
            RequestPagination(page=page, per_page=per_page),
        )
    except GitHubConfigurationError as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(exc),
        ) from exc
    except GitHubAPIError as exc:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=str(exc),
        ) from exc

    return ListRunsResponse(
        runs=[RunInfo.from_run(run) for run in runs_page.runs],
        total=runs_page.total_count,
        page=page,
        perPage=per_page,
    )


@router.get("/runs/{run_id}/jobs", response_model=JobListResponse)
async def list_run_jobs(
    run_id: int,
    coordinates: RepositoryCoordinates = Depends(get_coordinates),
    job_list: LiveJobList = Depends(get_job_list),
    refresher: JobsRefresher = Depends(get_jobs_refresher),
) -> JobListResponse:
    """Refresh the live job list from a run's jobs and return it."""
    try:
        result = await refresher.refresh(f"{coordinates.run_url(run_id)}/jobs")
    except GitHubConfigurationError as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(exc),
        ) from exc

    if result.error is not None:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=str(result.error),
        )
    return _job_list_response(job_list)


@router.post("/runs/{run_id}/watch", response_model=WatchResponse, status_code=status.HTTP_202_ACCEPTED)
async def watch_run_jobs(
    run_id: int,
    interval: float = Query(10.0, ge=1.0, le=3600.0, description="Seconds between refreshes"),
    coordinates: RepositoryCoordinates = Depends(get_coordinates),
    refresher: JobsRefresher = Depends(get_jobs_refresher),
) -> WatchResponse:
    """Keep the live job list refreshed from a run's jobs in the background."""
    await refresher.start_polling(f"{coordinates.run_url(run_id)}/jobs", interval)
    return WatchResponse(runId=run_id, interval=interval, polling=refresher.is_polling)


@router.delete("/watch", status_code=status.HTTP_204_NO_CONTENT)
async def stop_watching(refresher: JobsRefresher = Depends(get_jobs_refresher)) -> Response:
    await refresher.stop_polling()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/runs/{run_id}/rerun", response_model=RerunWorkflowResponse)
async def rerun_run(
    run_id: int,
    coordinates: RepositoryCoordinates = Depends(get_coordinates),
) -> RerunWorkflowResponse:
    try:
        await rerun_workflow(f"{coordinates.run_url(run_id)}/rerun")
    except GitHubConfigurationError as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc)
        ) from exc
    except GitHubAPIError as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc

    return RerunWorkflowResponse(message="Workflow rerun requested", runId=run_id)


@router.get("/runs/{run_id}/logs")
async def get_run_logs(
    run_id: int,
    coordinates: RepositoryCoordinates = Depends(get_coordinates),
) -> Response:
    """Download the log archive of a workflow run."""
    try:
        content = await download_workflow_log(f"{coordinates.run_url(run_id)}/logs")
    except GitHubConfigurationError as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc)
        ) from exc
    except GitHubAPIError as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc

    return Response(
        content=content,
        media_type="application/zip",
        headers={"Content-Disposition": f'attachment; filename="run-{run_id}-logs.zip"'},
    )


@router.get("/jobs", response_model=JobListResponse)
async def get_jobs(job_list: LiveJobList = Depends(get_job_list)) -> JobListResponse:
    """Return the live job list as last reconciled."""
    return _job_list_response(job_list)


@router.put("/jobs/selection", response_model=JobInfo)
async def select_job(
    payload: JobSelectionRequest,
    job_list: LiveJobList = Depends(get_job_list),
) -> JobInfo:
    job = job_list.select(payload.jobId)
    if job is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Job not found")
    return JobInfo.from_job(job)


@router.delete("/jobs/selection", status_code=status.HTTP_204_NO_CONTENT)
async def clear_job_selection(job_list: LiveJobList = Depends(get_job_list)) -> Response:
    job_list.clear_selection()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/jobs/selected", response_model=JobInfo | None)
async def get_selected_job(job_list: LiveJobList = Depends(get_job_list)) -> JobInfo | None:
    job = job_list.selected_job()
    return JobInfo.from_job(job) if job else None
