"""Exceptions for the shared module."""


class StorageError(Exception):
    """Raised when the storage backend rejects a request."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class AuthError(Exception):
    """Raised when the auth provider cannot be reached or answers unexpectedly."""
    pass
