from __future__ import annotations

from dataclasses import dataclass

DEFAULT_FETCH_TIMEOUT_S = 5
DEFAULT_FETCH_SIZE_LIMIT_BYTES = 500_000
DEFAULT_PAGE_TIMEOUT_S = 45


@dataclass(frozen=True)
class ExtractConfig:
    download_images: bool = True
    fetch_timeout_s: int = DEFAULT_FETCH_TIMEOUT_S
    fetch_size_limit_bytes: int = DEFAULT_FETCH_SIZE_LIMIT_BYTES
    page_timeout_s: int = DEFAULT_PAGE_TIMEOUT_S
    user_agent: str | None = None
    # Lets markup reference local files as images. Never honoured for
    # pages fetched over the network.
    allow_file_images: bool = False

    def __post_init__(self) -> None:
        if self.fetch_timeout_s <= 0:
            raise ValueError("fetch_timeout_s must be positive")
        if self.fetch_size_limit_bytes <= 0:
            raise ValueError("fetch_size_limit_bytes must be positive")
        if self.page_timeout_s <= 0:
            raise ValueError("page_timeout_s must be positive")

    def request_headers(self) -> dict[str, str] | None:
        if not self.user_agent:
            return None
        return {"User-Agent": self.user_agent}
