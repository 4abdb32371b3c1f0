from __future__ import annotations

import zipfile
import zlib
from typing import Optional

from .archive import EntrySource
from .errors import ChapterUnreadable, EpubError
from .models import Chapter
from .nodes import GenericNode, parse_html
from .paths import parent_dir, resolve_href

PARAGRAPH_TAGS = ("p", "div")


def _extract_paragraphs(node: GenericNode, out: list[str]) -> None:
    for child in node.child_elements():
        if any(child.is_named(tag) for tag in PARAGRAPH_TAGS):
            text = child.text_content().strip()
            if text:
                out.append(text)
        else:
            _extract_paragraphs(child, out)


def _extract_images(body: GenericNode, base_dir: str) -> list[str]:
    images = []
    for node in body.find_all("img"):
        src = node.attr("src")
        if src is None or not src.strip():
            continue
        images.append(resolve_href(base_dir, src))
    return images


def chapter_from_bytes(
    chapter_id: str, href: str, raw: bytes, max_depth: Optional[int] = None
) -> Chapter:
    root = parse_html(raw, source=href, max_depth=max_depth)
    title_node = root.find("title")
    body = root.find("body")
    if body is None:
        body = root

    paragraphs: list[str] = []
    _extract_paragraphs(body, paragraphs)
    return Chapter(
        id=chapter_id,
        path=href,
        title=title_node.text_content() if title_node is not None else "",
        paragraphs=tuple(paragraphs),
        images=tuple(_extract_images(body, parent_dir(href))),
    )


def parse_chapter(chapter_id: str, href: str, source: EntrySource) -> Chapter:
    """Read one spine document and split it into paragraphs and image references."""
    try:
        raw = source.read(href)
        return chapter_from_bytes(chapter_id, href, raw)
    except (EpubError, OSError, zipfile.BadZipFile, zlib.error) as exc:
        raise ChapterUnreadable(chapter_id, str(exc), path=href) from exc
