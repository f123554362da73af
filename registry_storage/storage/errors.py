"""Exceptions raised by the storage adapter."""


class RegistryStorageError(Exception):
    """Base exception for storage operations."""
    pass


class TransportError(RegistryStorageError):
    """Connection-level failure before a response was received."""
    pass


class StorageError(RegistryStorageError):
    """The object store answered with a non-success status code."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class NotFoundError(StorageError):
    """The requested object does not exist."""
    pass


class PaginationError(StorageError):
    """A listing page cannot be advanced past."""
    pass


class LocalIOError(RegistryStorageError, OSError):
    """Writing a downloaded object to the local filesystem failed."""
    pass
