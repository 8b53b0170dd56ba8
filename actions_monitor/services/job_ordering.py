"""Display order for workflow jobs: most recent first."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime
from functools import cmp_to_key
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .github_models import Job


def _descending(left: datetime | int, right: datetime | int) -> int:
    if left > right:
        return -1
    if left < right:
        return 1
    return 0


def compare_jobs(a: Job, b: Job) -> int:
    """Compare two jobs for display, negative when ``a`` comes first.

    Jobs are ordered by ``completed_at`` (newest first). When either job has
    not completed, ``started_at`` decides; when either has not started, the
    higher ``run_id`` comes first.

    This is an ordering only. Job identity is ``Job.__eq__`` (by id) and the
    two must not be mixed: two distinct jobs can compare as 0 here.
    """
    if a.completed_at is not None and b.completed_at is not None:
        return _descending(a.completed_at, b.completed_at)
    if a.started_at is not None and b.started_at is not None:
        return _descending(a.started_at, b.started_at)
    return _descending(a.run_id, b.run_id)


job_sort_key = cmp_to_key(compare_jobs)


def sort_jobs(jobs: Iterable[Job]) -> list[Job]:
    return sorted(jobs, key=job_sort_key)
