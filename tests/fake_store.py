"""In-memory object store double for adapter tests."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class FakeResponse:
    """Minimal stand-in for ``requests.Response``."""

    status_code: int = 200
    content: bytes = b""
    closed: bool = False

    def iter_content(self, chunk_size: int = 1):
        for start in range(0, len(self.content), chunk_size):
            yield self.content[start : start + chunk_size]

    def close(self) -> None:
        self.closed = True


@dataclass
class FakeObjectStoreClient:
    """In-memory mock of ObjectStoreClient.

    Listing serves ``pages`` in order when scripted (an entry that is an
    exception is raised instead); otherwise it pages through ``objects``
    with marker semantics.
    """

    objects: dict[str, bytes] = field(default_factory=dict)
    headers: dict[str, dict[str, str]] = field(default_factory=dict)
    pages: list[Any] | None = None
    put_status: int = 200
    delete_status: int = 204
    list_calls: list[dict[str, Any]] = field(default_factory=list)
    deleted: list[str] = field(default_factory=list)

    def put_file(self, filepath, dest: str, headers) -> FakeResponse:
        with open(filepath, "rb") as f:
            return self.put_buffer(f.read(), dest, headers)

    def put_buffer(self, content: bytes, dest: str, headers) -> FakeResponse:
        if self.put_status == 200:
            self.objects[dest] = bytes(content)
            self.headers[dest] = dict(headers)
        return FakeResponse(status_code=self.put_status)

    def get_file(self, path: str) -> FakeResponse:
        if path not in self.objects:
            return FakeResponse(status_code=404)
        return FakeResponse(status_code=200, content=self.objects[path])

    def delete_file(self, path: str) -> FakeResponse:
        self.deleted.append(path)
        self.objects.pop(path, None)
        return FakeResponse(status_code=self.delete_status)

    def list(self, params=None) -> dict[str, Any]:
        params = dict(params or {})
        self.list_calls.append(params)

        if self.pages is not None:
            page = self.pages[len(self.list_calls) - 1]
            if isinstance(page, BaseException):
                raise page
            return page

        prefix = params.get("prefix") or ""
        marker = params.get("marker") or ""
        max_keys = int(params.get("max_keys") or 1000)
        keys = sorted(k for k in self.objects if k.startswith(prefix) and k > marker)
        return {
            "Contents": [
                {"Key": key, "Size": len(self.objects[key])} for key in keys[:max_keys]
            ],
            "IsTruncated": len(keys) > max_keys,
        }


def page(*keys: str, truncated: bool = False) -> dict[str, Any]:
    """Build a listing page holding ``keys``."""
    return {
        "Contents": [{"Key": key, "Size": 0} for key in keys],
        "IsTruncated": truncated,
    }
