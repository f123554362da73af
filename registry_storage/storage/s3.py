"""S3 storage adapter for the package registry.

Maps registry storage calls (upload, download, remove, listing) onto an
S3-compatible object store. Keys are flattened into a single path segment
and scoped under the configured folder.
"""

import logging
import os
import posixpath
from dataclasses import dataclass
from typing import Any, Mapping

import requests

from registry_storage.config import StorageConfig
from registry_storage.fileio import save_to
from registry_storage.storage.base import ObjectStoreClient
from registry_storage.storage.client import S3Client
from registry_storage.storage.errors import (
    LocalIOError,
    NotFoundError,
    PaginationError,
    StorageError,
    TransportError,
)

logger = logging.getLogger(__name__)

TARBALL_CONTENT_TYPE = "application/x-gzip"
STORAGE_CLASS_HEADER = "x-amz-storage-class"
DOWNLOAD_CHUNK_SIZE = 64 * 1024  # 64KB chunks


@dataclass(frozen=True)
class UploadOptions:
    """Options for an upload; only ``key`` is required."""

    key: str
    size: int | None = None


@dataclass(frozen=True)
class UploadResult:
    """Result of a successful upload, carrying the caller's key."""

    key: str


@dataclass
class ListingState:
    """Cursor state carried through ``list_all``."""

    marker: str = ""
    truncated: bool = True
    pages: int = 0


def advance(state: ListingState, page: Mapping[str, Any]) -> ListingState:
    """Fold one listing page into the cursor state.

    The marker moves to the last key of the page; an empty page leaves it
    where it was.
    """
    contents = page.get("Contents") or []
    marker = contents[-1]["Key"] if contents else state.marker
    return ListingState(
        marker=marker,
        truncated=page.get("IsTruncated") is True,
        pages=state.pages + 1,
    )


def should_continue(state: ListingState) -> bool:
    """Whether another page has to be fetched."""
    return state.truncated


def escape_key(key: str) -> str:
    """Flatten a key into a single path segment: ``/`` -> ``-``, ``\\`` -> ``_``."""
    return key.replace("/", "-").replace("\\", "_")


def _option_key(options: UploadOptions | Mapping[str, Any]) -> str:
    if isinstance(options, UploadOptions):
        return options.key
    return options["key"]


class S3Storage:
    """Registry storage backed by an S3-compatible object store."""

    def __init__(self, config: StorageConfig, client: ObjectStoreClient | None = None):
        self.config = config
        if client is None:
            client = S3Client(config)
        self.client = client
        self.name = getattr(client, "name", "S3 storage")

    def get_path(self, key: str) -> str:
        """Storage path for ``key``: the escaped key joined onto the folder.

        With no folder an empty key normalizes to ``"."``.
        """
        return posixpath.normpath(posixpath.join(self.config.folder or "", escape_key(key)))

    def upload(
        self, filepath: str | os.PathLike, options: UploadOptions | Mapping[str, Any]
    ) -> UploadResult:
        """Upload a package tarball from a local file."""
        key = _option_key(options)
        dest = self.get_path(key)

        headers = {}
        if self.config.storage_class:
            headers[STORAGE_CLASS_HEADER] = self.config.storage_class

        logger.debug("Uploading %s to %s", filepath, dest)
        try:
            resp = self.client.put_file(filepath, dest, headers)
        except requests.exceptions.RequestException as e:
            logger.warning("Network error uploading %s: %s", dest, e)
            raise TransportError(f"Network error uploading {key}: {e}") from e
        except OSError as e:
            raise LocalIOError(f"Cannot read {filepath}: {e}") from e

        if resp.status_code != 200:
            logger.warning("putFile %s failed with %s", dest, resp.status_code)
            raise StorageError(f"putFile failed with {resp.status_code}", resp.status_code)

        return UploadResult(key=key)

    def upload_buffer(
        self, content: bytes, options: UploadOptions | Mapping[str, Any]
    ) -> UploadResult:
        """Upload a package tarball held in memory."""
        key = _option_key(options)
        dest = self.get_path(key)
        headers = {"Content-Type": TARBALL_CONTENT_TYPE}

        logger.debug("Uploading %d bytes to %s", len(content), dest)
        try:
            resp = self.client.put_buffer(content, dest, headers)
        except requests.exceptions.RequestException as e:
            logger.warning("Network error uploading %s: %s", dest, e)
            raise TransportError(f"Network error uploading {key}: {e}") from e

        if resp.status_code != 200:
            logger.warning("putBuffer %s failed with %s", dest, resp.status_code)
            raise StorageError(f"putBuffer failed with {resp.status_code}", resp.status_code)

        return UploadResult(key=key)

    def download(self, key: str, save_path: str | os.PathLike) -> None:
        """Download an object to ``save_path``, overwriting any existing file."""
        path = self.get_path(key)

        logger.debug("Downloading %s to %s", path, save_path)
        try:
            resp = self.client.get_file(path)
        except requests.exceptions.RequestException as e:
            logger.warning("Network error downloading %s: %s", path, e)
            raise TransportError(f"Network error downloading {key}: {e}") from e

        try:
            if resp.status_code == 404:
                raise NotFoundError(f"{key} not found", 404)
            if resp.status_code != 200:
                raise StorageError(f"getFile failed with {resp.status_code}", resp.status_code)

            try:
                save_to(resp.iter_content(chunk_size=DOWNLOAD_CHUNK_SIZE), save_path)
            # requests exceptions are OSError subclasses, so they go first
            except requests.exceptions.RequestException as e:
                raise TransportError(f"Network error downloading {key}: {e}") from e
            except OSError as e:
                raise LocalIOError(f"Cannot save {key} to {save_path}: {e}") from e
        finally:
            resp.close()

    def remove(self, key: str) -> None:
        """Delete an object. A missing object counts as removed.

        Any status other than 200, 204 or 404 raises ``StorageError``.
        """
        path = self.get_path(key)

        logger.debug("Removing %s", path)
        try:
            resp = self.client.delete_file(path)
        except requests.exceptions.RequestException as e:
            logger.warning("Network error removing %s: %s", path, e)
            raise TransportError(f"Network error removing {key}: {e}") from e

        if resp.status_code not in (200, 204, 404):
            logger.warning("deleteFile %s failed with %s", path, resp.status_code)
            raise StorageError(f"deleteFile failed with {resp.status_code}", resp.status_code)

    def list(self, params: Mapping[str, Any] | None = None) -> dict[str, Any]:
        """Fetch a single listing page, unmodified."""
        try:
            return self.client.list(dict(params or {}))
        except requests.exceptions.RequestException as e:
            logger.warning("Network error listing %s: %s", params, e)
            raise TransportError(f"Network error listing objects: {e}") from e

    def list_all(self, params: Mapping[str, Any] | None = None) -> dict[str, str]:
        """List every key, following markers until the store stops truncating.

        Returns a ``{key: key}`` mapping. Any failed page fetch aborts the
        whole listing.
        """
        params = dict(params or {})
        state = ListingState(marker=params.get("marker") or "")
        keys: dict[str, str] = {}

        while should_continue(state):
            params["marker"] = state.marker
            page = self.list(params)

            for entry in page.get("Contents") or []:
                keys[entry["Key"]] = entry["Key"]

            previous = state
            state = advance(state, page)
            logger.debug(
                "Listed page %d (%d keys so far, truncated=%s)",
                state.pages,
                len(keys),
                state.truncated,
            )

            if should_continue(state) and state.marker == previous.marker:
                raise PaginationError(
                    f"Listing page {state.pages} is truncated but did not advance "
                    f"the marker past {state.marker!r}"
                )

        return keys
