"""Domain errors raised by services and repositories."""

from __future__ import annotations


class FilmorateError(RuntimeError):
    """Base class: `code` is a short machine-readable reason."""

    def __init__(self, code: str, message: str | None = None) -> None:
        super().__init__(message or code)
        self.code = code


class ValidationError(FilmorateError):
    """Malformed or out-of-range input."""


class NotFoundError(FilmorateError):
    """Referenced entity does not exist."""


class DuplicateError(FilmorateError):
    """Uniqueness violation or a forbidden self-relation."""


class StorageError(FilmorateError):
    """Backing store failed while applying a change."""
