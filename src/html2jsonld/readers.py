"""Read JSON-LD, Microdata and RDFa from HTML into Item trees.

Parsing is done by ``extruct``; this module only maps each syntax's raw
output onto :class:`~html2jsonld.items.Item`. Type and property names are
expanded to absolute URLs wherever a vocabulary is known.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Callable, Iterator

import extruct

from .items import Item, PropertyValue
from .urls import is_absolute_url, resolve_term, vocabulary_of

log = logging.getLogger(__name__)

RDFA_NS = "http://www.w3.org/ns/rdfa#"

JSON_LD = "json-ld"
MICRODATA = "microdata"
RDFA = "rdfa"


def _as_list(value: Any) -> list[Any]:
    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]


def _literal(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, (bool, int, float)):
        return json.dumps(value)
    return str(value)


# JSON-LD


def _jsonld_vocab(context: Any, inherited: str | None) -> str | None:
    if isinstance(context, str):
        if not is_absolute_url(context):
            return inherited
        return context if context.endswith(("/", "#")) else context + "/"
    if isinstance(context, dict):
        vocab = context.get("@vocab")
        return vocab if isinstance(vocab, str) and vocab else inherited
    if isinstance(context, list):
        for entry in context:
            vocab = _jsonld_vocab(entry, None)
            if vocab:
                return vocab
    return inherited


def _jsonld_values(raw: Any, vocab: str | None) -> Iterator[PropertyValue]:
    for value in _as_list(raw):
        if isinstance(value, list):
            yield from _jsonld_values(value, vocab)
        elif isinstance(value, dict):
            if "@value" in value:
                literal = _literal(value["@value"])
                if literal is not None:
                    yield literal
            elif "@list" in value or "@set" in value:
                yield from _jsonld_values(value.get("@list", value.get("@set")), vocab)
            elif set(value) == {"@id"}:
                yield str(value["@id"])
            else:
                yield _jsonld_item(value, vocab)
        else:
            literal = _literal(value)
            if literal is not None:
                yield literal


def _jsonld_item(node: dict[str, Any], vocab: str | None) -> Item:
    vocab = _jsonld_vocab(node.get("@context"), vocab)
    item = Item(
        types=[resolve_term(str(t), vocab) for t in _as_list(node.get("@type"))],
        id=node["@id"] if isinstance(node.get("@id"), str) else None,
    )
    for key, raw in node.items():
        if key.startswith("@"):
            continue
        name = resolve_term(key, vocab)
        for value in _jsonld_values(raw, vocab):
            item.add_property(name, value)
    return item


def items_from_jsonld(documents: list[Any], vocab: str | None = None) -> list[Item]:
    items: list[Item] = []
    for doc in documents:
        if isinstance(doc, list):
            items.extend(items_from_jsonld(doc, vocab))
            continue
        if not isinstance(doc, dict):
            continue

        doc_vocab = _jsonld_vocab(doc.get("@context"), vocab)
        if "@graph" in doc:
            items.extend(items_from_jsonld(_as_list(doc["@graph"]), doc_vocab))
        else:
            items.append(_jsonld_item(doc, doc_vocab))
    return items


# Microdata


def _microdata_item(raw: dict[str, Any], vocab: str | None) -> Item:
    types = [str(t) for t in _as_list(raw.get("type"))]
    if types:
        vocab = vocabulary_of(types[0]) or vocab

    item = Item(types=types, id=raw.get("id") if isinstance(raw.get("id"), str) else None)
    for name, raw_values in (raw.get("properties") or {}).items():
        prop = resolve_term(name, vocab)
        for value in _as_list(raw_values):
            if isinstance(value, dict):
                item.add_property(prop, _microdata_item(value, vocab))
            else:
                literal = _literal(value)
                if literal is not None:
                    item.add_property(prop, literal)
    return item


def items_from_microdata(raw_items: list[Any]) -> list[Item]:
    return [_microdata_item(raw, None) for raw in raw_items if isinstance(raw, dict)]


# RDFa


def _rdfa_predicates(node: dict[str, Any]) -> list[str]:
    return [k for k in node if not k.startswith("@") and not k.startswith(RDFA_NS)]


def _rdfa_is_item(node: dict[str, Any]) -> bool:
    return bool(node.get("@type")) or bool(_rdfa_predicates(node))


class _RdfaGraph:
    def __init__(self, nodes: list[dict[str, Any]]) -> None:
        self.nodes = nodes
        self.by_id = {
            n["@id"]: n for n in nodes if isinstance(n.get("@id"), str)
        }

    def _target(self, value: dict[str, Any]) -> dict[str, Any] | None:
        ref = value.get("@id")
        if "@value" in value or not isinstance(ref, str):
            return None
        target = self.by_id.get(ref)
        if target is None or not _rdfa_is_item(target):
            return None
        return target

    def referenced_ids(self) -> set[str]:
        refs: set[str] = set()
        for node in self.nodes:
            for pred in _rdfa_predicates(node):
                for value in _as_list(node[pred]):
                    if isinstance(value, dict) and self._target(value) is not None:
                        refs.add(value["@id"])
        return refs

    def roots(self) -> list[dict[str, Any]]:
        typed = [n for n in self.nodes if n.get("@type")]
        referenced = self.referenced_ids()
        roots = [n for n in typed if n.get("@id") not in referenced]
        return roots or typed[:1]

    def to_item(self, node: dict[str, Any], path: frozenset[str]) -> Item:
        node_id = node.get("@id") if isinstance(node.get("@id"), str) else None
        item = Item(
            types=[str(t) for t in _as_list(node.get("@type"))],
            id=None if node_id is None or node_id.startswith("_:") else node_id,
        )
        path = path | {node_id} if node_id else path

        for pred in _rdfa_predicates(node):
            for value in _as_list(node[pred]):
                if not isinstance(value, dict):
                    literal = _literal(value)
                    if literal is not None:
                        item.add_property(pred, literal)
                    continue

                target = self._target(value)
                if target is not None and value["@id"] not in path:
                    item.add_property(pred, self.to_item(target, path))
                    continue

                literal = _literal(value.get("@value", value.get("@id")))
                if literal is not None:
                    item.add_property(pred, literal)
        return item


def items_from_rdfa(nodes: list[Any]) -> list[Item]:
    graph = _RdfaGraph([n for n in nodes if isinstance(n, dict)])
    return [graph.to_item(root, frozenset()) for root in graph.roots()]


_CONVERTERS: dict[str, Callable[[list[Any]], list[Item]]] = {
    JSON_LD: items_from_jsonld,
    MICRODATA: items_from_microdata,
    RDFA: items_from_rdfa,
}

DEFAULT_SYNTAXES = (JSON_LD, MICRODATA, RDFA)


def read_items(
    html: str,
    base_url: str | None = None,
    *,
    syntaxes: tuple[str, ...] = DEFAULT_SYNTAXES,
) -> list[Item]:
    """Read all items from ``html`` in syntax order.

    A syntax that fails to parse is logged and skipped.
    """

    items: list[Item] = []
    for syntax in syntaxes:
        convert = _CONVERTERS[syntax]
        try:
            raw = extruct.extract(
                html,
                base_url=base_url,
                syntaxes=[syntax],
                uniform=False,
            ).get(syntax, [])
        except Exception as e:  # extruct surfaces lxml/json errors unwrapped
            log.warning("Skipping %s markup in %s: %s", syntax, base_url or "<html>", e)
            continue
        items.extend(convert(raw or []))
    return items
