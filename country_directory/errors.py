"""Domain exceptions raised by the country directory core."""

from __future__ import annotations


class DirectoryError(Exception):
    """Base class for errors raised by the directory engine."""


class DatasetAlreadyLoadedError(DirectoryError):
    """Raised when a second provider result is offered to the dataset cache."""


class StorageError(DirectoryError):
    """Raised by key-value stores when the backing medium cannot be used."""

    def __init__(self, backend: str, message: str) -> None:
        super().__init__(message)
        self.backend = backend
        self.message = message

    def __str__(self) -> str:
        return f"[{self.backend}] {self.message}"


__all__ = ["DatasetAlreadyLoadedError", "DirectoryError", "StorageError"]
