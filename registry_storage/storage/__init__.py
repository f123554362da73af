"""Storage backend implementations."""

from registry_storage.storage.base import ObjectStoreClient, RegistryStorage
from registry_storage.storage.client import S3Client
from registry_storage.storage.errors import (
    LocalIOError,
    NotFoundError,
    PaginationError,
    RegistryStorageError,
    StorageError,
    TransportError,
)
from registry_storage.storage.s3 import (
    ListingState,
    S3Storage,
    UploadOptions,
    UploadResult,
)

__all__ = [
    "ObjectStoreClient",
    "RegistryStorage",
    "S3Client",
    "S3Storage",
    "ListingState",
    "UploadOptions",
    "UploadResult",
    "RegistryStorageError",
    "TransportError",
    "StorageError",
    "NotFoundError",
    "PaginationError",
    "LocalIOError",
]
