"""Pydantic models shared across workflow endpoints."""
from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..services.github_models import Job, JobStep, WorkflowRun
from ..services.job_utils import format_duration, job_info_line, status_label


class RunInfo(BaseModel):
    id: int
    name: Optional[str] = None
    runNumber: Optional[int] = None
    runAttempt: Optional[int] = None
    event: Optional[str] = None
    status: Optional[str] = None
    conclusion: Optional[str] = None
    branch: Optional[str] = None
    headSha: Optional[str] = None
    actor: Optional[str] = None
    htmlUrl: Optional[str] = None
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None
    jobs: str
    rerun: str
    logs: str

    @classmethod
    def from_run(cls, run: WorkflowRun) -> RunInfo:
        base = f"/api/workflows/runs/{run.id}"
        return cls(
            id=run.id,
            name=run.name,
            runNumber=run.run_number,
            runAttempt=run.run_attempt,
            event=run.event,
            status=run.status,
            conclusion=run.conclusion,
            branch=run.head_branch,
            headSha=run.head_sha,
            actor=run.actor,
            htmlUrl=run.html_url,
            createdAt=run.created_at,
            updatedAt=run.updated_at,
            jobs=f"{base}/jobs",
            rerun=f"{base}/rerun",
            logs=f"{base}/logs",
        )


class ListRunsResponse(BaseModel):
    runs: List[RunInfo]
    total: int
    page: int
    perPage: int


class JobStepInfo(BaseModel):
    number: int
    name: str
    status: str
    conclusion: Optional[str] = None
    startedAt: Optional[datetime] = None
    completedAt: Optional[datetime] = None

    @classmethod
    def from_step(cls, step: JobStep) -> JobStepInfo:
        return cls(
            number=step.number,
            name=step.name,
            status=step.status,
            conclusion=step.conclusion,
            startedAt=step.started_at,
            completedAt=step.completed_at,
        )


class JobInfo(BaseModel):
    id: int
    runId: int
    runAttempt: Optional[int] = None
    name: str
    status: str
    conclusion: Optional[str] = None
    statusLabel: str
    startedAt: Optional[datetime] = None
    completedAt: Optional[datetime] = None
    duration: Optional[str] = None
    info: str
    htmlUrl: Optional[str] = None
    labels: List[str] = Field(default_factory=list)
    runnerName: Optional[str] = None
    runnerGroupName: Optional[str] = None
    steps: List[JobStepInfo] = Field(default_factory=list)

    @classmethod
    def from_job(cls, job: Job) -> JobInfo:
        return cls(
            id=job.id,
            runId=job.run_id,
            runAttempt=job.run_attempt,
            name=job.name,
            status=job.status,
            conclusion=job.conclusion,
            statusLabel=status_label(job.status, job.conclusion),
            startedAt=job.started_at,
            completedAt=job.completed_at,
            duration=format_duration(job),
            info=job_info_line(job),
            htmlUrl=job.html_url,
            labels=list(job.labels),
            runnerName=job.runner_name,
            runnerGroupName=job.runner_group_name,
            steps=[JobStepInfo.from_step(step) for step in job.steps],
        )


class JobListResponse(BaseModel):
    state: str
    total: int
    jobs: List[JobInfo]
    selectedJobId: Optional[int] = None
    copyEnabled: bool = False


class JobSelectionRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    jobId: int = Field(..., description="Id of the job to select")


class RerunWorkflowResponse(BaseModel):
    message: str
    runId: int


class WatchResponse(BaseModel):
    """Background refresh started for a run's jobs."""

    runId: int
    interval: float
    polling: bool
