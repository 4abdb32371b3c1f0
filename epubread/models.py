from __future__ import annotations

import dataclasses
import enum
from dataclasses import dataclass, field
from typing import Any, Iterator, Optional

from .paths import normalize_href


@dataclass(frozen=True)
class MetaEntry:
    value: str
    attrs: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class ManifestItem:
    id: str
    href: str
    media_type: str
    properties: tuple[str, ...] = ()
    attrs: dict[str, str] = field(default_factory=dict)

    def has_property(self, name: str) -> bool:
        wanted = name.lower()
        return any(token.lower() == wanted for token in self.properties)


@dataclass(frozen=True)
class SpineItemRef:
    idref: str
    linear: bool = True
    attrs: dict[str, str] = field(default_factory=dict)


class TocFormat(enum.Enum):
    EPUB2 = "EPUB2"
    EPUB3 = "EPUB3"
    UNKNOWN = "UNKNOWN"


@dataclass(frozen=True)
class TocNode:
    title: str = ""
    href: str = ""
    children: tuple[TocNode, ...] = ()

    @property
    def path(self) -> str:
        return self.href.split("#", 1)[0]

    @property
    def fragment(self) -> str:
        _, _, fragment = self.href.partition("#")
        return fragment

    def iter_descendants(self) -> Iterator[TocNode]:
        stack = list(reversed(self.children))
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def flatten(self) -> list[TocNode]:
        """Every entry below this node in depth-first pre-order.

        The node itself is not included, so flattening the synthetic root
        yields exactly the real entries.
        """
        return list(self.iter_descendants())

    def find_by_href(self, href: str) -> Optional[TocNode]:
        wanted = normalize_href(href)
        if not wanted:
            return None
        for node in self.iter_descendants():
            if normalize_href(node.href) == wanted:
                return node
        return None


@dataclass(frozen=True)
class Chapter:
    id: str
    path: str
    title: str = ""
    paragraphs: tuple[str, ...] = ()
    images: tuple[str, ...] = ()

    def text(self) -> str:
        """Paragraphs joined by blank lines, suitable for plain-text readers."""
        return "\n\n".join(self.paragraphs)

    def has_images(self) -> bool:
        return bool(self.images)

    def clone(self, **changes: Any) -> Chapter:
        """Return a detached copy, optionally with some fields replaced."""
        for key in ("paragraphs", "images"):
            if key in changes:
                changes[key] = tuple(changes[key])
        return dataclasses.replace(self, **changes)
