"""Extract structured markup from HTML sources as JSON-LD text.

The result for a page is either a single JSON object (one item), a JSON
array of objects (several items) or an empty string (no markup at all).
Every item is written on its own, so ``@context`` is decided per item.
"""

from __future__ import annotations

from dataclasses import replace
from pathlib import Path
from typing import Iterable, Sequence

import requests

from .config import ExtractConfig
from .content import has_structured_markup
from .http_client import HttpClient
from .items import Item
from .readers import read_items
from .writer import JsonLdWriter


def join_serialized(parts: Sequence[str]) -> str:
    result = ",\n".join(parts)
    if len(parts) > 1:
        result = "[\n" + result + "\n]"
    return result


def convert_items_to_jsonld(items: Iterable[Item], writer: JsonLdWriter) -> str:
    return join_serialized([writer.write([item]) for item in items])


def jsonld_from_html(
    html: str,
    url: str,
    *,
    config: ExtractConfig | None = None,
    session: requests.Session | None = None,
) -> str:
    """Extract markup from an HTML string.

    ``url`` is the page's original location; it is only used to resolve
    relative links and is never fetched.
    """

    config = config or ExtractConfig()
    if not has_structured_markup(html):
        return ""

    items = read_items(html, url)
    if not items:
        return ""

    writer = JsonLdWriter(config, session=session)
    return convert_items_to_jsonld(items, writer)


def jsonld_from_file(
    source: Path | str,
    url: str,
    *,
    config: ExtractConfig | None = None,
    session: requests.Session | None = None,
) -> str:
    html = Path(source).read_text(encoding="utf-8", errors="replace")
    return jsonld_from_html(html, url, config=config, session=session)


def jsonld_from_url(
    source: str,
    *,
    config: ExtractConfig | None = None,
    session: requests.Session | None = None,
) -> str:
    """Fetch ``source`` and extract its markup.

    Relative links resolve against the URL the page was finally served from.
    Local image files are never read for remote pages. Raises
    ``RuntimeError`` when the page cannot be retrieved.
    """

    config = replace(config or ExtractConfig(), allow_file_images=False)
    session = session or requests.Session()
    http = HttpClient(session, timeout_s=config.page_timeout_s)

    res = http.get(source, headers=config.request_headers())
    html = res.body.decode("utf-8", errors="replace")
    return jsonld_from_html(html, res.final_url, config=config, session=session)
