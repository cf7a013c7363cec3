"""Exception types raised while loading and reading virtual file trees.

Construction-time failures (bad source URL, network errors, malformed
snapshots) propagate to the loader. Lookup misses are not errors and return
``None`` instead.
"""

from __future__ import annotations


class StudyLensesError(Exception):
    """Base class for all studylenses errors."""


class InvalidSourceURL(StudyLensesError, ValueError):
    """Repository or gist reference does not have the expected shape."""


class RemoteFetchError(StudyLensesError):
    """GitHub API request failed, returned non-2xx, or an unusable payload."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class FileTooLargeError(RemoteFetchError):
    """Remote file exceeds the per-file fetch ceiling."""

    def __init__(self, path: str, size: int) -> None:
        super().__init__(f"File too large: {path} ({size} bytes)")
        self.path = path
        self.size = size


class SnapshotError(StudyLensesError):
    """Static JSON snapshot could not be parsed into a directory tree."""


class StaleTreeError(StudyLensesError):
    """Content fetch finished after the tree it belongs to was replaced."""


__all__ = [
    "StudyLensesError",
    "InvalidSourceURL",
    "RemoteFetchError",
    "FileTooLargeError",
    "SnapshotError",
    "StaleTreeError",
]
