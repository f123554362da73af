"""S3 storage adapter for a package registry."""

from registry_storage.config import StorageConfig
from registry_storage.storage import S3Storage

__all__ = ["StorageConfig", "S3Storage"]
