"""Inline images referenced from JSON-LD nodes as Base64 data URLs."""

from __future__ import annotations

import base64
import logging
from pathlib import Path
from typing import Any
from urllib.parse import urlparse
from urllib.request import url2pathname

import requests

from .config import ExtractConfig
from .content import sniff_image_mime
from .http_client import BodyTooLargeError, HttpClient
from .urls import is_absolute_url, local_name_of

log = logging.getLogger(__name__)

IMAGE_OBJECT_TYPE = "ImageObject"
IMAGE_URL_KEYS = ("contentUrl", "url")


def _matches_name(key: str, name: str) -> bool:
    return key == name or local_name_of(key) == name


def _is_image_object(discriminator: Any) -> bool:
    return isinstance(discriminator, str) and _matches_name(
        discriminator, IMAGE_OBJECT_TYPE
    )


def _url_key(node: dict[str, Any]) -> str | None:
    for wanted in IMAGE_URL_KEYS:
        for key in node:
            if _matches_name(key, wanted):
                return key
    return None


def _read_file(path: Path, *, max_bytes: int) -> bytes:
    with path.open("rb") as f:
        data = f.read(max_bytes + 1)
    if len(data) > max_bytes:
        raise BodyTooLargeError(f"{path}: file exceeds {max_bytes} bytes")
    return data


class ImageInliner:
    """Replace image URLs with ``data:`` URLs.

    Fetches are sequential and individually bounded by ``timeout_s`` and
    ``max_bytes``. Nothing here raises for bad URLs, unreachable hosts or
    unknown formats: the original value is kept instead.
    """

    def __init__(
        self,
        http: HttpClient,
        *,
        timeout_s: float = 5,
        max_bytes: int = 500_000,
        headers: dict[str, str] | None = None,
        allow_files: bool = False,
        logger: logging.Logger | None = None,
    ) -> None:
        self.http = http
        self.timeout_s = timeout_s
        self.max_bytes = max_bytes
        self.headers = headers
        self.allow_files = allow_files
        self.log = logger or log

    @classmethod
    def from_config(
        cls,
        config: ExtractConfig,
        *,
        session: requests.Session | None = None,
        logger: logging.Logger | None = None,
    ) -> ImageInliner:
        http = HttpClient(session or requests.Session(), timeout_s=config.fetch_timeout_s)
        return cls(
            http,
            timeout_s=config.fetch_timeout_s,
            max_bytes=config.fetch_size_limit_bytes,
            headers=config.request_headers(),
            allow_files=config.allow_file_images,
            logger=logger,
        )

    def inline(self, value: Any) -> Any | None:
        """Inline a URL string, an ImageObject node, or a list of images.

        Returns None only for values that are none of these.
        """

        if isinstance(value, str):
            return self.fetch_and_encode(value) or value

        if isinstance(value, dict):
            return self._inline_node(value)

        if isinstance(value, list):
            # Only the first image of a list is inlined; the rest are kept
            # as they are.
            if value:
                first = self.inline(value[0])
                if first is not None:
                    value[0] = first
            return value

        return None

    def _inline_node(self, node: dict[str, Any]) -> dict[str, Any]:
        discriminator = node.get("@type")
        if not discriminator:
            return node

        if not _is_image_object(discriminator):
            self.log.warning(
                "Unsupported image type %r; leaving image unchanged", discriminator
            )
            return node

        key = _url_key(node)
        if key is None:
            return node

        target = node[key]
        if isinstance(target, str):
            node[key] = self.fetch_and_encode(target) or target
        elif isinstance(target, list):
            node[key] = [
                (self.fetch_and_encode(u) or u) if isinstance(u, str) else u
                for u in target
            ]
        return node

    def fetch_and_encode(self, url: str) -> str | None:
        """Fetch ``url`` and return it as a data URL, or None on any failure."""

        try:
            body = self._fetch(url)
        except (
            requests.RequestException,
            BodyTooLargeError,
            OSError,
            ValueError,
        ) as e:
            self.log.debug("Image fetch failed for %s: %s", url, e)
            return None

        if not body:
            return None

        encoded = base64.b64encode(body).decode("ascii")
        mime = sniff_image_mime(encoded)
        if mime is None:
            self.log.debug("Unrecognized image format at %s", url)
            return None
        return f"data:{mime};base64,{encoded}"

    def _fetch(self, url: str) -> bytes | None:
        parsed = urlparse(url)
        scheme = parsed.scheme.lower()

        if scheme == "file":
            if not self.allow_files or not parsed.path:
                return None
            return _read_file(
                Path(url2pathname(parsed.path)), max_bytes=self.max_bytes
            )

        if not is_absolute_url(url, schemes=("http", "https")):
            return None

        res = self.http.get_bounded(
            url,
            timeout_s=self.timeout_s,
            max_bytes=self.max_bytes,
            headers=self.headers,
        )
        if not 200 <= res.status_code < 300:
            self.log.debug("Image fetch for %s returned %s", url, res.status_code)
            return None
        return res.body
