"""html2jsonld core library.

Reads JSON-LD, Microdata and RDFa-Lite markup from HTML documents and writes
it back out as JSON-LD, optionally with images inlined as data URLs.
"""

from __future__ import annotations

import logging

from .config import ExtractConfig
from .images import ImageInliner
from .items import Item
from .markup import jsonld_from_file, jsonld_from_html, jsonld_from_url
from .writer import JsonLdWriter

__all__ = [
    "ExtractConfig",
    "ImageInliner",
    "Item",
    "JsonLdWriter",
    "__version__",
    "jsonld_from_file",
    "jsonld_from_html",
    "jsonld_from_url",
]

__version__ = "0.1.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())
