"""GitHub API connection settings read from the environment."""

from __future__ import annotations

import os

from .github_errors import GitHubConfigurationError
from .github_models import RepositoryCoordinates

DEFAULT_API_URL = "https://api.github.com"
DEFAULT_TIMEOUT_SECONDS = 60.0
DEFAULT_POLL_INTERVAL_SECONDS = 10.0


def _get_required_env(key: str) -> str:
    value = os.getenv(key)
    if not value:
        raise GitHubConfigurationError(f"Missing required environment variable: {key}")
    return value


def get_api_url() -> str:
    return (os.getenv("GITHUB_API_URL") or DEFAULT_API_URL).rstrip("/")


def get_access_token() -> str:
    return _get_required_env("GITHUB_TOKEN")


def get_timeout() -> float:
    raw = os.getenv("GITHUB_TIMEOUT")
    if not raw:
        return DEFAULT_TIMEOUT_SECONDS
    try:
        return float(raw)
    except ValueError as exc:
        raise GitHubConfigurationError(f"GITHUB_TIMEOUT must be a number, got {raw!r}") from exc


def get_poll_interval() -> float:
    raw = os.getenv("GITHUB_POLL_INTERVAL")
    if not raw:
        return DEFAULT_POLL_INTERVAL_SECONDS
    try:
        interval = float(raw)
    except ValueError as exc:
        raise GitHubConfigurationError(f"GITHUB_POLL_INTERVAL must be a number, got {raw!r}") from exc
    if interval <= 0:
        raise GitHubConfigurationError(f"GITHUB_POLL_INTERVAL must be positive, got {raw!r}")
    return interval


def get_repository_coordinates() -> RepositoryCoordinates:
    """Coordinates of the repository configured through ``GITHUB_REPOSITORY``."""
    repository = _get_required_env("GITHUB_REPOSITORY")
    try:
        return RepositoryCoordinates.from_repo_url(repository, server_url=get_api_url())
    except ValueError as exc:
        raise GitHubConfigurationError(str(exc)) from exc
