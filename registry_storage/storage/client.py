"""S3-compatible object store client using requests (works with AWS, MinIO, Storadera)."""

import logging
import mimetypes
import os
from typing import Any, Mapping
from urllib.parse import quote
from xml.etree import ElementTree

import requests
from requests.adapters import HTTPAdapter
from requests.packages.urllib3.util.retry import Retry
from requests_aws4auth import AWS4Auth

from registry_storage.config import StorageConfig
from registry_storage.storage.errors import StorageError

logger = logging.getLogger(__name__)

S3_NS = {"s3": "http://s3.amazonaws.com/doc/2006-03-01/"}

# Python-style aliases for ListObjects query parameters; other names pass through
LIST_PARAM_ALIASES = {
    "max_keys": "max-keys",
    "maxKeys": "max-keys",
    "encoding_type": "encoding-type",
}


class S3Client:
    """Object store client using requests + AWS4Auth.

    Returns raw responses for object requests; status handling is left to
    the caller. Connection errors propagate as ``requests`` exceptions.
    """

    def __init__(self, config: StorageConfig):
        config.validate()
        self.bucket = config.bucket
        self.endpoint = config.endpoint.rstrip("/")
        self.base_url = f"{self.endpoint}/{self.bucket}"
        self.timeout = config.timeout

        # AWS4Auth with empty region (works for most S3-compatible providers)
        self.auth = AWS4Auth(config.access_key, config.secret_key, config.region or "", "s3")
        self.session = requests.Session()
        self.session.auth = self.auth

        # Connection-level retries only; status codes are reported to the caller
        retry_strategy = Retry(
            total=config.max_retries,
            status_forcelist=[],
            allowed_methods=["HEAD", "GET", "PUT", "DELETE"],
        )
        adapter = HTTPAdapter(max_retries=retry_strategy)
        self.session.mount("http://", adapter)
        self.session.mount("https://", adapter)

        self.name = f"S3 bucket '{self.bucket}' at {self.endpoint}"

    def _url(self, path: str) -> str:
        return f"{self.base_url}/{quote(path.lstrip('/'))}"

    def put_file(
        self, filepath: str | os.PathLike, dest: str, headers: Mapping[str, str]
    ) -> requests.Response:
        """Upload a local file to ``dest``."""
        content_type, _ = mimetypes.guess_type(str(filepath))
        request_headers = {
            "Content-Type": content_type or "application/octet-stream",
            "Content-Length": str(os.path.getsize(filepath)),
        }
        request_headers.update(headers)

        logger.debug("PUT file %s -> %s", filepath, dest)
        with open(filepath, "rb") as f:
            return self.session.put(
                self._url(dest),
                data=f,
                headers=request_headers,
                timeout=self.timeout,
                allow_redirects=False,
            )

    def put_buffer(
        self, content: bytes, dest: str, headers: Mapping[str, str]
    ) -> requests.Response:
        """Upload in-memory content to ``dest``."""
        request_headers = {"Content-Type": "application/octet-stream"}
        request_headers.update(headers)

        logger.debug("PUT buffer (%d bytes) -> %s", len(content), dest)
        return self.session.put(
            self._url(dest),
            data=content,
            headers=request_headers,
            timeout=self.timeout,
            allow_redirects=False,
        )

    def get_file(self, path: str) -> requests.Response:
        """Fetch an object; the body is left unread for streaming."""
        logger.debug("GET %s", path)
        return self.session.get(
            self._url(path), timeout=self.timeout, allow_redirects=False, stream=True
        )

    def delete_file(self, path: str) -> requests.Response:
        logger.debug("DELETE %s", path)
        return self.session.delete(
            self._url(path), timeout=self.timeout, allow_redirects=False
        )

    def list(self, params: Mapping[str, Any] | None = None) -> dict[str, Any]:
        """Fetch a single ListObjects page.

        Returns a dict shaped like ``{"Contents": [{"Key": ...}], "IsTruncated": bool}``
        plus the page's ``Name``, ``Prefix``, ``Marker`` and ``MaxKeys``.
        """
        query = {}
        for name, value in (params or {}).items():
            if value is not None:
                query[LIST_PARAM_ALIASES.get(name, name)] = str(value)

        logger.debug("LIST %s %s", self.bucket, query)
        resp = self.session.get(
            self.base_url, params=query, timeout=self.timeout, allow_redirects=False
        )
        if resp.status_code != 200:
            raise StorageError(f"list failed with {resp.status_code}", resp.status_code)

        try:
            return parse_list_response(resp.content)
        except ElementTree.ParseError as e:
            raise StorageError(
                f"list returned an unparseable body: {e}", resp.status_code
            ) from e


def _text(elem: ElementTree.Element, tag: str) -> str | None:
    child = elem.find(f"s3:{tag}", S3_NS)
    return child.text if child is not None else None


def parse_list_response(body: bytes) -> dict[str, Any]:
    """Parse a ListObjects XML body into a listing page dict."""
    root = ElementTree.fromstring(body)

    contents = []
    for content in root.findall("s3:Contents", S3_NS):
        size = _text(content, "Size")
        contents.append(
            {
                "Key": _text(content, "Key") or "",
                "LastModified": _text(content, "LastModified"),
                "ETag": _text(content, "ETag"),
                "Size": int(size) if size is not None else 0,
                "StorageClass": _text(content, "StorageClass"),
            }
        )

    max_keys = _text(root, "MaxKeys")
    return {
        "Name": _text(root, "Name"),
        "Prefix": _text(root, "Prefix") or "",
        "Marker": _text(root, "Marker") or "",
        "MaxKeys": int(max_keys) if max_keys is not None else None,
        "IsTruncated": _text(root, "IsTruncated") == "true",
        "Contents": contents,
    }
