"""Parsing helpers for GitHub Actions payloads."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any

from .github_models import Job, JobsList, JobStep, WorkflowRun, WorkflowRunsPage


def parse_timestamp(value: Any) -> datetime | None:
    """Parse an ISO 8601 timestamp, returning ``None`` when it is missing or invalid.

    Values without an offset are taken as UTC so every timestamp is aware
    and comparable.
    """
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _optional_int(value: Any) -> int | None:
    if value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def parse_job_step(data: Mapping[str, Any]) -> JobStep:
    return JobStep(
        status=str(data.get("status") or ""),
        conclusion=data.get("conclusion"),
        name=str(data.get("name") or ""),
        number=int(data.get("number") or 0),
        started_at=parse_timestamp(data.get("started_at")),
        completed_at=parse_timestamp(data.get("completed_at")),
    )


def parse_job(data: Mapping[str, Any]) -> Job:
    """Build a :class:`Job` from one entry of the ``jobs`` array.

    Unknown ``status``/``conclusion`` values are kept as-is.
    """
    return Job(
        id=int(data["id"]),
        run_id=int(data.get("run_id") or 0),
        status=str(data.get("status") or ""),
        name=str(data.get("name") or ""),
        conclusion=data.get("conclusion"),
        started_at=parse_timestamp(data.get("started_at")),
        completed_at=parse_timestamp(data.get("completed_at")),
        run_attempt=_optional_int(data.get("run_attempt")),
        run_url=data.get("run_url"),
        node_id=data.get("node_id"),
        head_sha=data.get("head_sha"),
        url=data.get("url"),
        html_url=data.get("html_url"),
        check_run_url=data.get("check_run_url"),
        steps=tuple(parse_job_step(step) for step in data.get("steps") or []),
        labels=tuple(str(label) for label in data.get("labels") or []),
        runner_id=_optional_int(data.get("runner_id")),
        runner_name=data.get("runner_name"),
        runner_group_id=_optional_int(data.get("runner_group_id")),
        runner_group_name=data.get("runner_group_name"),
    )


def parse_jobs_payload(data: Mapping[str, Any]) -> JobsList:
    """Normalize a "list jobs for a workflow run" response into a sorted JobsList."""
    jobs_data = data.get("jobs") or []
    jobs = [parse_job(item) for item in jobs_data if isinstance(item, Mapping)]
    total_count = data.get("total_count")
    return JobsList.of(int(total_count) if total_count is not None else len(jobs), jobs)


def parse_workflow_run(data: Mapping[str, Any]) -> WorkflowRun:
    actor = data.get("actor") or data.get("triggering_actor")
    return WorkflowRun(
        id=int(data["id"]),
        name=data.get("name") or data.get("display_title"),
        status=data.get("status"),
        conclusion=data.get("conclusion"),
        event=data.get("event"),
        run_number=_optional_int(data.get("run_number")),
        run_attempt=_optional_int(data.get("run_attempt")),
        head_branch=data.get("head_branch"),
        head_sha=data.get("head_sha"),
        actor=actor.get("login") if isinstance(actor, Mapping) else None,
        html_url=data.get("html_url"),
        jobs_url=data.get("jobs_url"),
        logs_url=data.get("logs_url"),
        rerun_url=data.get("rerun_url"),
        created_at=parse_timestamp(data.get("created_at")),
        updated_at=parse_timestamp(data.get("updated_at")),
    )


def parse_workflow_runs_payload(data: Mapping[str, Any]) -> WorkflowRunsPage:
    """Normalize a "list workflow runs" response, keeping the order GitHub returned."""
    runs_data = data.get("workflow_runs") or []
    runs = tuple(parse_workflow_run(item) for item in runs_data if isinstance(item, Mapping))
    total_count = data.get("total_count")
    return WorkflowRunsPage(
        total_count=int(total_count) if total_count is not None else len(runs),
        runs=runs,
    )
