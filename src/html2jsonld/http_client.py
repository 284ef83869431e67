from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable

import requests
from requests import exceptions as req_exc

from .urls import normalize_url

TRANSIENT_HTTP_STATUSES = {429, 500, 502, 503, 504}

# Retrying cannot fix a URL requests refuses to send.
_PERMANENT_ERRORS = (req_exc.MissingSchema, req_exc.InvalidSchema, req_exc.InvalidURL)

_CHUNK_SIZE = 8192


class BodyTooLargeError(RuntimeError):
    pass


def _retry_after_seconds(headers: dict[str, str]) -> float | None:
    retry_after = headers.get("Retry-After")
    if not retry_after:
        return None
    try:
        return float(retry_after)
    except ValueError:
        return None


@dataclass(frozen=True)
class FetchResult:
    final_url: str
    status_code: int
    body: bytes


def _result(resp: requests.Response, requested: str, body: bytes) -> FetchResult:
    return FetchResult(
        final_url=str(resp.url or requested),
        status_code=int(resp.status_code),
        body=body,
    )


class HttpClient:
    def __init__(
        self,
        session: requests.Session,
        *,
        timeout_s: int = 45,
        max_retries: int = 4,
        backoff_base_s: float = 1.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._session = session
        self._timeout_s = timeout_s
        self._max_retries = max_retries
        self._backoff_base_s = backoff_base_s
        self._clock = clock

    def get(
        self,
        url: str,
        *,
        headers: dict[str, str] | None = None,
    ) -> FetchResult:
        """Fetch a page, retrying transient statuses and transport errors.

        Error pages are returned as they are; they may still carry markup.
        """

        normalized = normalize_url(url)
        last_error: Exception | None = None

        for attempt in range(self._max_retries + 1):
            try:
                resp = self._session.get(
                    normalized, timeout=self._timeout_s, headers=headers
                )
            except _PERMANENT_ERRORS as e:
                raise RuntimeError(f"Failed to fetch {normalized}: {e}") from e
            except req_exc.RequestException as e:
                last_error = e
                if attempt >= self._max_retries:
                    break
                time.sleep(self._backoff_base_s * (2**attempt))
                continue

            if (
                resp.status_code in TRANSIENT_HTTP_STATUSES
                and attempt < self._max_retries
            ):
                retry_after = _retry_after_seconds(dict(resp.headers))
                time.sleep(
                    retry_after
                    if retry_after is not None
                    else self._backoff_base_s * (2**attempt)
                )
                continue

            return _result(resp, normalized, resp.content)

        raise RuntimeError(f"Failed to fetch {normalized}: {last_error}")

    def get_bounded(
        self,
        url: str,
        *,
        timeout_s: float,
        max_bytes: int,
        headers: dict[str, str] | None = None,
    ) -> FetchResult:
        """Single-attempt GET with a time bound and a hard cap on body size.

        ``timeout_s`` bounds each socket operation and the whole streamed
        read. Raises ``BodyTooLargeError`` once more than ``max_bytes`` arrive
        and ``requests.Timeout`` when the deadline passes.
        """

        deadline = self._clock() + timeout_s
        resp = self._session.get(url, timeout=timeout_s, headers=headers, stream=True)
        try:
            chunks: list[bytes] = []
            received = 0
            for chunk in resp.iter_content(chunk_size=_CHUNK_SIZE):
                if not chunk:
                    continue
                received += len(chunk)
                if received > max_bytes:
                    raise BodyTooLargeError(
                        f"{url}: body exceeds {max_bytes} bytes"
                    )
                if self._clock() > deadline:
                    raise req_exc.Timeout(f"{url}: read exceeded {timeout_s}s")
                chunks.append(chunk)

            return _result(resp, url, b"".join(chunks))
        finally:
            resp.close()
