"""Low-level HTTP calls to the GitHub REST API."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from .github_config import get_access_token, get_timeout
from .github_errors import GitHubAPIError
from .github_models import RequestDescriptor

logger = logging.getLogger(__name__)

GITHUB_API_VERSION = "2022-11-28"


def _headers(token: str) -> dict[str, str]:
    return {
        "Authorization": f"Bearer {token}",
        "Accept": "application/vnd.github+json",
        "X-GitHub-Api-Version": GITHUB_API_VERSION,
    }


def _masked_headers(headers: dict[str, str]) -> dict[str, str]:
    """Mask sensitive headers before logging."""
    masked = dict(headers)
    if "Authorization" in masked:
        masked["Authorization"] = "Bearer ***"
    return masked


async def execute_request(request: RequestDescriptor) -> Any:
    """Perform ``request`` and decode the body according to its response kind.

    Returns parsed JSON, raw bytes or ``None``. Raises :class:`GitHubAPIError`
    on a non-2xx response or a body that is not valid JSON.
    """
    headers = _headers(get_access_token())
    logger.debug(
        "GitHub request: operation=%s method=%s url=%s params=%s headers=%s",
        request.operation_name,
        request.method,
        request.url,
        request.params,
        _masked_headers(headers),
    )

    async with httpx.AsyncClient(timeout=httpx.Timeout(get_timeout()), follow_redirects=True) as client:
        if request.method == "POST":
            response = await client.post(
                request.url,
                headers=headers,
                params=request.params or None,
                json=request.json_body,
            )
        else:
            response = await client.get(request.url, headers=headers, params=request.params or None)

    if response.is_error:
        body = response.text
        logger.error(
            "GitHub API error",
            extra={
                "operation": request.operation_name,
                "status": response.status_code,
                "body": body,
            },
        )
        raise GitHubAPIError(
            f"{request.operation_name} failed: {response.status_code} {body}",
            status_code=response.status_code,
        )

    if request.response_kind == "none":
        return None
    if request.response_kind == "bytes":
        return response.content
    try:
        return response.json()
    except ValueError as exc:
        raise GitHubAPIError(
            f"{request.operation_name} failed: invalid JSON response",
            status_code=response.status_code,
        ) from exc
