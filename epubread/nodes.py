"""Attributed trees decoded from XML and HTML byte streams.

Both decoders produce the same :class:`GenericNode` shape so the EPUB layers
above them never touch lxml directly.  The XML decoder keeps namespaces and
is used for the container, package document and TOC files; the HTML decoder
is tag-soup tolerant and is used for chapter markup.
"""

from __future__ import annotations

import codecs
import enum
import re
from dataclasses import dataclass, field
from typing import Iterator, Optional

from lxml import etree
from lxml import html as lxml_html

from .env import max_depth as configured_max_depth
from .errors import StructuralParseError, TooDeeplyNested, UnsupportedCharset

ACCEPTED_CHARSETS = {"utf-8", "us-ascii"}
XML_DECLARATION_RE = re.compile(
    rb"^\s*<\?xml\b[^>]*?\bencoding\s*=\s*[\"']([^\"']*)[\"']",
    flags=re.IGNORECASE,
)


class NodeKind(enum.Enum):
    ELEMENT = "element"
    TEXT = "text"


@dataclass(frozen=True)
class GenericNode:
    kind: NodeKind
    name: str = ""
    namespace: str = ""
    attrs: dict[str, str] = field(default_factory=dict)
    content: str = ""
    children: tuple[GenericNode, ...] = ()

    @property
    def is_element(self) -> bool:
        return self.kind is NodeKind.ELEMENT

    @property
    def text(self) -> str:
        """Text held directly by this node, without descending into children."""
        if self.kind is NodeKind.TEXT:
            return self.content
        return "".join(child.content for child in self.children if child.kind is NodeKind.TEXT)

    def is_named(self, name: str) -> bool:
        return self.kind is NodeKind.ELEMENT and self.name.lower() == name.lower()

    def attr(self, name: str, default: Optional[str] = None) -> Optional[str]:
        if name in self.attrs:
            return self.attrs[name]
        wanted = name.lower()
        for key, value in self.attrs.items():
            if key.lower() == wanted:
                return value
        return default

    def has_attr(self, name: str) -> bool:
        return self.attr(name) is not None

    def child_elements(self, name: Optional[str] = None) -> list[GenericNode]:
        return [
            child
            for child in self.children
            if child.is_element and (name is None or child.is_named(name))
        ]

    def iter(self) -> Iterator[GenericNode]:
        """Yield this node and every descendant in depth-first pre-order."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def find(self, name: str) -> Optional[GenericNode]:
        for node in self.iter():
            if node.is_named(name):
                return node
        return None

    def find_all(self, name: str) -> list[GenericNode]:
        return [node for node in self.iter() if node.is_named(name)]

    def text_content(self) -> str:
        parts = []
        for node in self.iter():
            if node.kind is NodeKind.TEXT:
                stripped = node.content.strip()
                if stripped:
                    parts.append(stripped)
        return " ".join(parts)


def _local_name(tag: str) -> str:
    if "}" in tag:
        return tag.split("}", 1)[1]
    return tag


def _split_tag(tag: str) -> tuple[str, str]:
    if tag.startswith("{") and "}" in tag:
        namespace, local = tag[1:].split("}", 1)
        return namespace, local
    return "", tag


def _declared_charset(raw: bytes) -> Optional[str]:
    if raw.startswith((codecs.BOM_UTF16_LE, codecs.BOM_UTF16_BE)):
        return "utf-16"
    if raw.startswith(codecs.BOM_UTF8):
        raw = raw[len(codecs.BOM_UTF8):]
    match = XML_DECLARATION_RE.match(raw[:512])
    if not match:
        return None
    return match.group(1).decode("ascii", errors="replace").strip()


def _check_charset(raw: bytes, source: str) -> None:
    charset = _declared_charset(raw)
    if charset is None or charset == "":
        return
    if charset.lower() not in ACCEPTED_CHARSETS:
        raise UnsupportedCharset(charset, path=source)


def _check_utf8(raw: bytes, source: str) -> None:
    try:
        raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise StructuralParseError(
            f"invalid UTF-8 at byte {exc.start}", path=source
        ) from exc


def _empty_html_document() -> GenericNode:
    head = GenericNode(kind=NodeKind.ELEMENT, name="head")
    body = GenericNode(kind=NodeKind.ELEMENT, name="body")
    return GenericNode(kind=NodeKind.ELEMENT, name="html", children=(head, body))


def _text_node(value: Optional[str], *, trim: bool) -> Optional[GenericNode]:
    if not value or not value.strip():
        return None
    return GenericNode(kind=NodeKind.TEXT, content=value.strip() if trim else value)


def _convert(element: etree._Element, depth: int, limit: int, source: str, *, trim: bool) -> GenericNode:
    if depth > limit:
        raise TooDeeplyNested(limit, path=source)
    children: list[GenericNode] = []
    leading = _text_node(element.text, trim=trim)
    if leading is not None:
        children.append(leading)
    for child in element:
        # Comments, processing instructions and unresolved entities have a
        # non-string tag; only their tail text belongs to this element.
        if isinstance(child.tag, str):
            children.append(_convert(child, depth + 1, limit, source, trim=trim))
        tail = _text_node(child.tail, trim=trim)
        if tail is not None:
            children.append(tail)
    namespace, name = _split_tag(element.tag)
    attrs = {_local_name(str(key)): str(value) for key, value in element.attrib.items()}
    return GenericNode(
        kind=NodeKind.ELEMENT,
        name=name,
        namespace=namespace,
        attrs=attrs,
        children=tuple(children),
    )


def parse_xml(raw: bytes, source: str = "", max_depth: Optional[int] = None) -> GenericNode:
    """Decode an XML document, keeping namespaces and raw text."""
    _check_charset(raw, source)
    _check_utf8(raw, source)
    parser = etree.XMLParser(
        resolve_entities=False,
        no_network=True,
        recover=True,
        remove_comments=True,
        remove_pis=True,
    )
    try:
        root = etree.fromstring(raw, parser=parser)
    except (etree.XMLSyntaxError, ValueError) as exc:
        raise StructuralParseError(f"invalid XML: {exc}", path=source) from exc
    if root is None or not isinstance(root.tag, str):
        raise StructuralParseError("invalid XML: no root element", path=source)
    limit = max_depth if max_depth is not None else configured_max_depth()
    return _convert(root, 0, limit, source, trim=False)


def parse_html(raw: bytes, source: str = "", max_depth: Optional[int] = None) -> GenericNode:
    """Decode (X)HTML leniently; text nodes are trimmed and blank ones dropped."""
    _check_charset(raw, source)
    parser = lxml_html.HTMLParser(encoding="utf-8", remove_comments=True, remove_pis=True)
    try:
        root = lxml_html.document_fromstring(raw, parser=parser)
    except etree.ParserError:
        # lxml gives up on documents with no elements at all.
        return _empty_html_document()
    except ValueError as exc:
        raise StructuralParseError(f"invalid HTML: {exc}", path=source) from exc
    if root is None:
        raise StructuralParseError("invalid HTML: no root element", path=source)
    limit = max_depth if max_depth is not None else configured_max_depth()
    return _convert(root, 0, limit, source, trim=True)
