"""Table of contents ingestion for both EPUB3 nav documents and EPUB2 NCX files.

Either format is reduced to a synthetic :class:`TocNode` root whose children
are the top-level entries.  Hrefs are resolved against the directory of the
TOC file itself, which is not necessarily the package document's directory.
"""

from __future__ import annotations

import logging
from typing import Optional

from .archive import EntrySource
from .env import max_depth as configured_max_depth
from .errors import (
    NavMapNotFound,
    StructuralParseError,
    TocNavNotFound,
    TocOlNotFound,
    TooDeeplyNested,
)
from .models import TocFormat, TocNode
from .nodes import GenericNode, parse_html, parse_xml
from .paths import parent_dir, resolve_href

NAV_TYPE_ATTRS = {"type", "epub:type"}

logger = logging.getLogger("epubread.toc")


def _decode_nav_document(raw: bytes, source: str) -> GenericNode:
    try:
        return parse_xml(raw, source=source)
    except StructuralParseError:
        logger.debug("nav document %s is not well-formed XML, retrying as HTML", source)
        return parse_html(raw, source=source)


def _is_toc_nav(node: GenericNode) -> bool:
    if not node.is_named("nav"):
        return False
    return any(
        key.lower() in NAV_TYPE_ATTRS and "toc" in value.lower()
        for key, value in node.attrs.items()
    )


class _TocBuilder:
    def __init__(self, source: str, limit: int) -> None:
        self.source = source
        self.base_dir = parent_dir(source)
        self.limit = limit

    def _check_depth(self, depth: int) -> None:
        if depth > self.limit:
            raise TooDeeplyNested(self.limit, path=self.source)

    def nav_entries(self, root: GenericNode) -> tuple[TocNode, ...]:
        nav = next((node for node in root.iter() if _is_toc_nav(node)), None)
        if nav is None:
            raise TocNavNotFound("toc <nav> not found", path=self.source)
        ol = nav.find("ol")
        if ol is None:
            raise TocOlNotFound("<ol> not found in toc nav", path=self.source)
        return self._list_items(ol, 0)

    def _list_items(self, ol: GenericNode, depth: int) -> tuple[TocNode, ...]:
        self._check_depth(depth)
        entries = []
        for li in ol.child_elements("li"):
            anchor: Optional[GenericNode] = None
            children: tuple[TocNode, ...] = ()
            for child in li.child_elements():
                if child.is_named("a") and anchor is None:
                    anchor = child
                elif child.is_named("ol"):
                    children = self._list_items(child, depth + 1)
            title = anchor.text_content().strip() if anchor is not None else ""
            if not title:
                continue
            href = resolve_href(self.base_dir, anchor.attr("href") or "")
            entries.append(TocNode(title=title, href=href, children=children))
        return tuple(entries)

    def ncx_entries(self, root: GenericNode) -> tuple[TocNode, ...]:
        nav_map = root.find("navMap")
        if nav_map is None:
            raise NavMapNotFound("no navMap found", path=self.source)
        return self._nav_points(nav_map, 0)

    def _nav_points(self, parent: GenericNode, depth: int) -> tuple[TocNode, ...]:
        self._check_depth(depth)
        entries = []
        for point in parent.child_elements("navPoint"):
            labels = point.child_elements("navLabel")
            contents = point.child_elements("content")
            children = self._nav_points(point, depth + 1)
            title = labels[0].text_content().strip() if labels else ""
            if not title:
                continue
            src = (contents[0].attr("src") or "") if contents else ""
            entries.append(
                TocNode(title=title, href=resolve_href(self.base_dir, src), children=children)
            )
        return tuple(entries)


def toc_from_bytes(
    fmt: TocFormat, raw: bytes, path: str, max_depth: Optional[int] = None
) -> TocNode:
    limit = max_depth if max_depth is not None else configured_max_depth()
    builder = _TocBuilder(path, limit)
    if fmt is TocFormat.EPUB3:
        entries = builder.nav_entries(_decode_nav_document(raw, path))
    elif fmt is TocFormat.EPUB2:
        entries = builder.ncx_entries(parse_xml(raw, source=path))
    else:
        entries = ()
    logger.debug("parsed %d top-level toc entries from %s", len(entries), path)
    return TocNode(children=entries)


def parse_toc(fmt: TocFormat, path: str, source: EntrySource) -> TocNode:
    """Read and decode the TOC file at ``path``; an unknown format gives an empty root."""
    if fmt is TocFormat.UNKNOWN or not path:
        return TocNode()
    return toc_from_bytes(fmt, source.read(path), path)
