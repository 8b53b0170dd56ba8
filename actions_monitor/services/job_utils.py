"""Helpers for presenting jobs: status labels, durations and info lines."""

from __future__ import annotations

from datetime import datetime, timezone

from .github_models import Job

_PASSTHROUGH_STATUSES = {"queued", "in_progress", "waiting", "pending", "requested"}


def status_label(status: str | None, conclusion: str | None) -> str:
    """Single label combining status and conclusion.

    A completed job is labelled by its conclusion. Unknown values are
    returned unchanged.
    """
    if status == "completed":
        return conclusion or "completed"
    if status in _PASSTHROUGH_STATUSES:
        return status
    return status or "unknown"


def format_duration(job: Job) -> str | None:
    """``M:SS`` between start and completion, ``None`` if not applicable."""
    if job.conclusion == "cancelled" or job.started_at is None or job.completed_at is None:
        return None
    seconds = max(int((job.completed_at - job.started_at).total_seconds()), 0)
    minutes, seconds = divmod(seconds, 60)
    return f"{minutes}:{seconds:02d}"


def format_started_at(value: datetime | None) -> str:
    if value is None:
        return "not started"
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return value.strftime("%Y-%m-%d %H:%M UTC")


def job_info_line(job: Job) -> str:
    attempt = job.run_attempt if job.run_attempt is not None else "-"
    info = f"Attempt #{attempt} started {format_started_at(job.started_at)}"
    took = format_duration(job)
    if took:
        info = f"{info} took {took} mins"
    return info
