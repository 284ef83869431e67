from __future__ import annotations

from urllib.parse import ParseResult, urlparse


def normalize_url(raw_url: str) -> str:
    """Drop the fragment from a page URL; it never reaches the server."""

    return urlparse(raw_url)._replace(fragment="").geturl()


def _host_of(parsed: ParseResult) -> str | None:
    # Host as written: no userinfo, no port, case preserved.
    host = parsed.netloc.rpartition("@")[2]
    if host.startswith("["):
        host = host[: host.find("]") + 1]
    else:
        host = host.partition(":")[0]
    return host or None


def context_of(url: str) -> str | None:
    """Return the scheme + host of ``url``.

    ``https://schema.org/Thing`` gives ``https://schema.org``. Strings that
    cannot be parsed are returned unchanged; URLs without a scheme or host
    (relative paths, bare words) give ``None``.
    """

    try:
        parsed = urlparse(url)
        host = _host_of(parsed)
    except ValueError:
        return url

    if not parsed.scheme or host is None:
        return None
    return f"{parsed.scheme}://{host}"


def local_name_of(url: str) -> str | None:
    """Return the path of ``url`` with every ``/`` removed.

    ``http://schema.org/Person`` gives ``Person``; ``/a/b/c`` gives ``abc``,
    not ``c``. Unparsable input is returned unchanged, an empty path gives
    ``None``.
    """

    try:
        parsed = urlparse(url)
    except ValueError:
        return url

    if parsed.path == "":
        return None
    return parsed.path.replace("/", "")


def is_absolute_url(url: str, *, schemes: tuple[str, ...] | None = None) -> bool:
    try:
        parsed = urlparse(url)
        host = _host_of(parsed)
    except ValueError:
        return False
    if not parsed.scheme or host is None:
        return False
    if any(ch.isspace() for ch in url):
        return False
    if schemes is not None and parsed.scheme.lower() not in schemes:
        return False
    return True


def vocabulary_of(type_url: str) -> str | None:
    """Return the vocabulary base a type URL lives in.

    ``http://schema.org/Person`` gives ``http://schema.org/``; a hash
    namespace keeps everything up to and including the ``#``.
    """

    if not is_absolute_url(type_url):
        return None
    if "#" in type_url:
        return type_url.rsplit("#", 1)[0] + "#"
    base, sep, _ = type_url.rpartition("/")
    if not sep or base.endswith(":/"):
        return type_url.rstrip("/") + "/"
    return base + "/"


def resolve_term(term: str, vocab: str | None) -> str:
    """Expand a bare term against ``vocab``; absolute URLs pass through."""

    if vocab is None or is_absolute_url(term):
        return term
    return vocab + term
