"""Error types raised by the directory search package."""

from typing import Optional


class DirectoryError(Exception):
    """Base error for the majstori directory."""


class FetchError(DirectoryError):
    """Raised when professional records cannot be loaded from the backend."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        self.status_code = status_code
        super().__init__(message)
