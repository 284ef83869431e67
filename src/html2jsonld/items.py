from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union


@dataclass(eq=False)
class Item:
    """A typed node read from HTML markup.

    ``types`` holds absolute type URLs, ``properties`` maps a property name to
    its ordered values. Insertion order of ``properties`` is the output order.
    Items compare by identity so that trees can be walked with a visited set.
    """

    types: list[str] = field(default_factory=list)
    id: str | None = None
    properties: dict[str, list[PropertyValue]] = field(default_factory=dict)

    def add_property(self, name: str, value: PropertyValue) -> None:
        self.properties.setdefault(name, []).append(value)


PropertyValue = Union[str, Item]
