"""Shared GitHub Actions service models."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Iterator, Literal

import httpx

from .job_ordering import sort_jobs

ResponseKind = Literal["json", "bytes", "none"]


@dataclass(frozen=True)
class RepositoryCoordinates:
    """API server plus ``owner/repo`` path of a GitHub repository."""

    server_url: str
    repository_path: str

    def __post_init__(self) -> None:
        server_url = (self.server_url or "").strip().rstrip("/")
        repository_path = (self.repository_path or "").strip().strip("/")
        if not server_url:
            raise ValueError("server_url is required")
        if not repository_path:
            raise ValueError("repository_path is required")
        object.__setattr__(self, "server_url", server_url)
        object.__setattr__(self, "repository_path", repository_path)

    @property
    def repository_url(self) -> str:
        return f"{self.server_url}/repos/{self.repository_path}"

    def run_url(self, run_id: int | str) -> str:
        return f"{self.repository_url}/actions/runs/{run_id}"

    @classmethod
    def from_repo_url(cls, repo_url: str, server_url: str = "https://api.github.com") -> RepositoryCoordinates:
        """Build coordinates from a clone URL or an ``owner/repo`` string.

        Handles:
          - https://github.com/owner/repo
          - https://github.com/owner/repo.git
          - https://github.com/owner/repo/tree/main (extra path ignored)
          - git@github.com:owner/repo.git
          - owner/repo
        """
        value = repo_url.strip()
        if "://" in value:
            # Drop scheme and host, keep the path.
            value = value.split("://", 1)[1].partition("/")[2]
        elif value.startswith("git@"):
            _, _, value = value.partition(":")
        parts = [part for part in value.split("/") if part]
        if len(parts) < 2:
            raise ValueError(f"cannot parse GitHub repo URL: {repo_url!r}")
        owner, repo = parts[0], parts[1].removesuffix(".git")
        if not repo:
            raise ValueError(f"cannot parse GitHub repo URL: {repo_url!r}")
        return cls(server_url=server_url, repository_path=f"{owner}/{repo}")


@dataclass(frozen=True)
class RequestPagination:
    """Page cursor for list endpoints (``page`` is 1-based)."""

    page: int = 1
    per_page: int = 30

    def as_params(self) -> dict[str, int]:
        return {"page": self.page, "per_page": self.per_page}


@dataclass(frozen=True)
class RunFilter:
    """Optional search qualifiers for listing workflow runs."""

    event: str | None = None
    status: str | None = None
    branch: str | None = None
    actor: str | None = None

    def qualifiers(self) -> list[tuple[str, str | None]]:
        return [
            ("event", self.event),
            ("status", self.status),
            ("branch", self.branch),
            ("actor", self.actor),
        ]


@dataclass(frozen=True)
class RequestDescriptor:
    """Everything the transport needs to perform one API call."""

    method: str
    url: str
    operation_name: str
    params: dict[str, Any] = field(default_factory=dict)
    json_body: dict[str, Any] | None = None
    response_kind: ResponseKind = "json"

    @property
    def full_url(self) -> str:
        return str(httpx.URL(self.url, params=self.params or None))


@dataclass(frozen=True)
class WorkflowRun:
    """Single workflow run as listed by the Actions API."""

    id: int
    name: str | None
    status: str | None
    conclusion: str | None = None
    event: str | None = None
    run_number: int | None = None
    run_attempt: int | None = None
    head_branch: str | None = None
    head_sha: str | None = None
    actor: str | None = None
    html_url: str | None = None
    jobs_url: str | None = None
    logs_url: str | None = None
    rerun_url: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(frozen=True)
class WorkflowRunsPage:
    total_count: int
    runs: tuple[WorkflowRun, ...] = ()


@dataclass(frozen=True)
class JobStep:
    status: str
    conclusion: str | None
    name: str
    number: int
    started_at: datetime | None = None
    completed_at: datetime | None = None


@dataclass(frozen=True, eq=False)
class Job:
    """A job execution within a workflow run.

    Two jobs are equal when their ids match, whatever the state of the
    other fields: a job with the same id and a newer status is the same
    job seen in a later snapshot. Display order lives in
    :mod:`actions_monitor.services.job_ordering`.
    """

    id: int
    run_id: int
    status: str
    name: str
    conclusion: str | None = None
    started_at: datetime | None = None
    completed_at: datetime | None = None
    run_attempt: int | None = None
    run_url: str | None = None
    node_id: str | None = None
    head_sha: str | None = None
    url: str | None = None
    html_url: str | None = None
    check_run_url: str | None = None
    steps: tuple[JobStep, ...] = ()
    labels: tuple[str, ...] = ()
    runner_id: int | None = None
    runner_name: str | None = None
    runner_group_id: int | None = None
    runner_group_name: str | None = None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Job):
            return NotImplemented
        return other.id == self.id

    def __hash__(self) -> int:
        return hash(self.id)


@dataclass(frozen=True)
class JobsList:
    """Jobs of one workflow run, always held in display order."""

    total_count: int
    jobs: tuple[Job, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "jobs", tuple(sort_jobs(self.jobs)))

    @classmethod
    def of(cls, total_count: int, jobs: Iterable[Job]) -> JobsList:
        return cls(total_count=total_count, jobs=tuple(jobs))

    def __iter__(self) -> Iterator[Job]:
        return iter(self.jobs)

    def __len__(self) -> int:
        return len(self.jobs)
