"""Storage protocols: the registry-facing adapter and the object store client it drives."""

import os
from typing import Any, Mapping, Protocol


class ObjectStoreClient(Protocol):
    """Raw request/response client for an S3-compatible store."""

    def put_file(self, filepath: str | os.PathLike, dest: str, headers: Mapping[str, str]) -> Any:
        """Upload a local file. Returns a response with ``status_code``."""
        ...

    def put_buffer(self, content: bytes, dest: str, headers: Mapping[str, str]) -> Any:
        """Upload in-memory content. Returns a response with ``status_code``."""
        ...

    def get_file(self, path: str) -> Any:
        """Fetch an object. Returns a response with ``status_code`` and ``iter_content``."""
        ...

    def delete_file(self, path: str) -> Any:
        ...

    def list(self, params: Mapping[str, Any] | None = None) -> dict[str, Any]:
        """Fetch one listing page: ``{"Contents": [{"Key": ...}], "IsTruncated": bool}``."""
        ...


class RegistryStorage(Protocol):
    """Storage backend as seen by the package registry."""

    def upload(self, filepath: str | os.PathLike, options: Any) -> Any:
        ...

    def upload_buffer(self, content: bytes, options: Any) -> Any:
        ...

    def download(self, key: str, save_path: str | os.PathLike) -> None:
        ...

    def remove(self, key: str) -> None:
        ...

    def list(self, params: Mapping[str, Any] | None = None) -> dict[str, Any]:
        ...

    def list_all(self, params: Mapping[str, Any] | None = None) -> dict[str, str]:
        ...
