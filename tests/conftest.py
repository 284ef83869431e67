from __future__ import annotations

import base64

import pytest
import requests

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 24
JPEG_BYTES = b"\xff\xd8\xff\xe0" + b"\x00" * 24
GIF_BYTES = b"GIF89a" + b"\x00" * 24


def data_url(mime: str, body: bytes) -> str:
    return f"data:{mime};base64,{base64.b64encode(body).decode('ascii')}"


class FakeResponse:
    def __init__(
        self,
        body: bytes = b"",
        *,
        status_code: int = 200,
        url: str = "",
        headers: dict[str, str] | None = None,
    ) -> None:
        self.content = body
        self.status_code = status_code
        self.url = url
        self.headers = headers or {}
        self.closed = False

    def iter_content(self, chunk_size: int = 1):
        for start in range(0, len(self.content), chunk_size):
            yield self.content[start : start + chunk_size]

    def close(self) -> None:
        self.closed = True


class FakeSession:
    """Serves canned responses (or raises canned errors) by URL."""

    def __init__(self, routes: dict[str, object] | None = None) -> None:
        self.routes = dict(routes or {})
        self.calls: list[dict[str, object]] = []

    def get(self, url, *, timeout=None, headers=None, stream=False):
        self.calls.append(
            {"url": url, "timeout": timeout, "headers": headers, "stream": stream}
        )
        route = self.routes.get(url)
        if route is None:
            raise requests.ConnectionError(f"no route to {url}")
        if isinstance(route, Exception):
            raise route
        if isinstance(route, list):
            route = route.pop(0)
            if isinstance(route, Exception):
                raise route
        if isinstance(route, bytes):
            return FakeResponse(route, url=url)
        route.url = route.url or url
        return route


@pytest.fixture
def fake_session() -> FakeSession:
    return FakeSession()


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


class SlowResponse(FakeResponse):
    """Moves ``clock`` forward by ``step_s`` before every chunk."""

    def __init__(self, body: bytes, *, clock: FakeClock, step_s: float, **kwargs) -> None:
        super().__init__(body, **kwargs)
        self.clock = clock
        self.step_s = step_s

    def iter_content(self, chunk_size: int = 1):
        for chunk in super().iter_content(chunk_size):
            self.clock.now += self.step_s
            yield chunk
