from __future__ import annotations

from typing import Final

from bs4 import BeautifulSoup

# Base64 prefixes of the image formats we are willing to embed. Sniffing runs
# on the encoded text, so the signatures are the encoded magic bytes.
IMAGE_SIGNATURES: Final[tuple[tuple[str, str], ...]] = (
    ("iVBORw0KGgo", "image/png"),
    ("/9j/", "image/jpg"),
    ("R0lGODdh", "image/gif"),
    ("R0lGODlh", "image/gif"),
)

_MARKUP_ATTRS: Final[tuple[str, ...]] = ("itemscope", "typeof", "vocab")


def sniff_image_mime(encoded: str) -> str | None:
    """Return the MIME type for Base64 image data, or None if unrecognized."""

    for prefix, mime in IMAGE_SIGNATURES:
        if encoded.startswith(prefix):
            return mime
    return None


def has_structured_markup(html: str) -> bool:
    """Cheap check whether ``html`` may carry JSON-LD, Microdata or RDFa.

    Used to skip the reader chain on long documents without any markup.
    """

    lowered = html.lower()
    if "ld+json" not in lowered and not any(a in lowered for a in _MARKUP_ATTRS):
        return False

    soup = BeautifulSoup(html, "html.parser")
    for script in soup.find_all("script"):
        script_type = str(script.get("type") or "").split(";", 1)[0].strip()
        if script_type.lower() == "application/ld+json":
            return True
    return any(soup.find(attrs={attr: True}) is not None for attr in _MARKUP_ATTRS)
