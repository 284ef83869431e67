"""Write Items as JSON-LD.

A shared ``@context`` is only emitted when every item has exactly one type
and those types agree on scheme + host (``http://schema.org/Event`` and
``http://schema.org/Person`` share ``http://schema.org``). In that case type
and property names are shortened to their local names.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Sequence, TypeVar

import requests

from .config import ExtractConfig
from .images import ImageInliner
from .items import Item, PropertyValue
from .urls import context_of, local_name_of

log = logging.getLogger(__name__)

IMAGE_PROPERTIES = frozenset({"image", "thumbnail"})

T = TypeVar("T")


def extract_if_single(values: list[T]) -> T | list[T]:
    if len(values) == 1:
        return values[0]
    return values


def resolve_context(items: Sequence[Item]) -> str | None:
    """Return the context shared by ``items``.

    - ``None``: an item does not have exactly one type, or two items disagree.
    - ``""``: no item has a type with a scheme and host.
    - otherwise the common scheme + host.
    """

    context = ""
    for item in items:
        types = list(item.types or [])
        if len(types) != 1:
            return None

        item_context = context_of(types[0])
        if not item_context:
            continue

        if context == "":
            context = item_context
        if context != item_context:
            return None

    return context


def _is_image_property(name: str) -> bool:
    return name in IMAGE_PROPERTIES or local_name_of(name) in IMAGE_PROPERTIES


def _shorten(name: str) -> str:
    # Names without a path have no local form; keep them whole.
    return local_name_of(name) or name


class JsonLdWriter:
    def __init__(
        self,
        config: ExtractConfig | None = None,
        *,
        inliner: ImageInliner | None = None,
        session: requests.Session | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.config = config or ExtractConfig()
        self.log = logger or log
        if inliner is None and self.config.download_images:
            inliner = ImageInliner.from_config(
                self.config, session=session, logger=self.log
            )
        self.inliner = inliner

    def write(self, items: Sequence[Item]) -> str:
        """Serialize ``items``; one item gives an object, anything else an array."""

        items = list(items or [])
        context = resolve_context(items)

        nodes = [self.convert_item(item, context=context) for item in items]
        if context:
            nodes = [{"@context": context, **node} for node in nodes]

        return json.dumps(extract_if_single(nodes), indent=4, ensure_ascii=False)

    def convert_item(
        self,
        item: Item,
        *,
        context: str | None = None,
        _path: set[int] | None = None,
    ) -> dict[str, Any]:
        path = _path if _path is not None else set()

        node: dict[str, Any] = {}
        types = list(item.types or [])
        if types:
            item_type = extract_if_single(types)
            if context and isinstance(item_type, str):
                item_type = _shorten(item_type)
            node["@type"] = item_type

        if item.id is not None:
            node["@id"] = item.id

        if id(item) in path:
            self.log.warning(
                "Cycle in item tree at %s; writing a reference only",
                item.id or types,
            )
            return node

        path.add(id(item))
        try:
            for name, values in (item.properties or {}).items():
                key = _shorten(name) if context else name
                converted = [
                    self._convert_value(v, context=context, path=path)
                    for v in values or []
                ]
                value = extract_if_single(converted)

                if self._inlining_enabled() and _is_image_property(name):
                    inlined = self.inliner.inline(value)
                    if inlined is not None:
                        value = inlined

                node[key] = value
        finally:
            path.discard(id(item))

        return node

    def _convert_value(
        self,
        value: PropertyValue,
        *,
        context: str | None,
        path: set[int],
    ) -> Any:
        if isinstance(value, Item):
            return self.convert_item(value, context=context, _path=path)
        return value

    def _inlining_enabled(self) -> bool:
        return self.config.download_images and self.inliner is not None
