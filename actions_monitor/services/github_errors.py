"""Error types for GitHub Actions service operations."""

from __future__ import annotations


class GitHubConfigurationError(RuntimeError):
    """Raised when required GitHub configuration is missing."""


class GitHubAPIError(RuntimeError):
    """Raised when GitHub API calls fail."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
