"""Request descriptors for the GitHub Actions REST endpoints.

Nothing in this module performs network I/O: each builder returns a
:class:`RequestDescriptor` that :mod:`.github_client` executes.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from .github_models import (
    RepositoryCoordinates,
    RequestDescriptor,
    RequestPagination,
    RunFilter,
)

logger = logging.getLogger(__name__)


def search_query(qualifiers: Iterable[tuple[str, str | None]]) -> str:
    """Join ``key:value`` qualifiers into one free-text search term.

    Qualifiers without a value are skipped, so an absent filter never shows
    up as ``key:``.
    """
    terms = [f"{key}:{value}" for key, value in qualifiers if value]
    return " ".join(terms)


def build_runs_query(
    coordinates: RepositoryCoordinates,
    run_filter: RunFilter | None = None,
    pagination: RequestPagination | None = None,
) -> RequestDescriptor:
    """Build the "list workflow runs" request for a repository."""
    params: dict[str, str | int] = {}
    query = search_query((run_filter or RunFilter()).qualifiers())
    if query:
        params["q"] = query
    if pagination is not None:
        params.update(pagination.as_params())

    descriptor = RequestDescriptor(
        method="GET",
        url=f"{coordinates.repository_url}/actions/runs",
        operation_name="search workflow runs",
        params=params,
    )
    logger.info("Executing url %s", descriptor.full_url)
    return descriptor


def build_jobs_request(url: str) -> RequestDescriptor:
    return RequestDescriptor(method="GET", url=url, operation_name="Get workflow-run jobs")


def build_rerun_request(url: str) -> RequestDescriptor:
    return RequestDescriptor(
        method="POST",
        url=url,
        operation_name="Rerun workflow",
        json_body={},
        response_kind="none",
    )


def build_log_request(url: str) -> RequestDescriptor:
    return RequestDescriptor(
        method="GET",
        url=url,
        operation_name="Download Workflow log",
        response_kind="bytes",
    )
