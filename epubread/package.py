"""Package document (OPF) model: metadata, manifest and spine.

The OPF tree is decoded once.  Each section is derived on first access and
independently of the others, so a document missing its spine can still
report its metadata.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from functools import cached_property
from typing import Optional

from . import metadata as metadata_views
from .errors import (
    ManifestSectionMissing,
    MetadataSectionMissing,
    SectionMissing,
    SpineSectionMissing,
)
from .models import ManifestItem, MetaEntry, SpineItemRef, TocFormat
from .nodes import GenericNode, parse_xml
from .paths import parent_dir, resolve_href

NCX_MEDIA_TYPE = "application/x-dtbncx+xml"
# OEB 1.x packages wrap their metadata in these two elements.
LEGACY_METADATA_WRAPPERS = {"dc-metadata", "x-metadata"}

logger = logging.getLogger("epubread.package")


@dataclass(frozen=True)
class Metadata:
    data: dict[str, dict[str, tuple[MetaEntry, ...]]] = field(default_factory=dict)

    def get_all(self) -> dict[str, list[str]]:
        return metadata_views.get_all(self.data)

    def normalize(self) -> dict[str, list[str]]:
        return metadata_views.normalize(self.data)

    def get(self, key: str) -> list[str]:
        return metadata_views.dublin_core_values(self.data, key)

    def first(self, key: str) -> Optional[str]:
        values = self.get(key)
        return values[0] if values else None


@dataclass(frozen=True)
class Manifest:
    items: tuple[ManifestItem, ...] = ()

    @cached_property
    def _by_id(self) -> dict[str, ManifestItem]:
        lookup: dict[str, ManifestItem] = {}
        for item in self.items:
            if item.id:
                lookup[item.id] = item
        return lookup

    def item_by_id(self, item_id: str) -> Optional[ManifestItem]:
        """Exact id match first, then the first item whose id differs only in case."""
        item = self._by_id.get(item_id)
        if item is not None:
            return item
        wanted = item_id.casefold()
        for candidate in self.items:
            if candidate.id and candidate.id.casefold() == wanted:
                return candidate
        return None

    def media_type_by_id(self, item_id: str) -> Optional[str]:
        item = self.item_by_id(item_id)
        return item.media_type if item is not None else None

    def href_lookup(self) -> dict[str, str]:
        """Map manifest ids to resolved hrefs; a repeated id keeps its last item."""
        return {item_id: item.href for item_id, item in self._by_id.items() if item.href}


@dataclass(frozen=True)
class Spine:
    itemrefs: tuple[SpineItemRef, ...] = ()
    attrs: dict[str, str] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.itemrefs)

    @property
    def toc_id(self) -> Optional[str]:
        return self.attrs.get("toc")

    def extract_chapter_ids(self) -> list[str]:
        """Idrefs of linear itemrefs, in reading order."""
        return [itemref.idref for itemref in self.itemrefs if itemref.idref and itemref.linear]


def _metadata_children(node: GenericNode) -> list[GenericNode]:
    children: list[GenericNode] = []
    for child in node.child_elements():
        if child.name.lower() in LEGACY_METADATA_WRAPPERS:
            children.extend(child.child_elements())
        else:
            children.append(child)
    return children


def _derive_metadata(root: GenericNode, source: str) -> Metadata:
    md_node = root.find("metadata")
    if md_node is None:
        raise MetadataSectionMissing(path=source)

    grouped: dict[str, dict[str, list[MetaEntry]]] = {}
    for child in _metadata_children(md_node):
        tag = child.name.strip()
        if not tag:
            continue
        namespace = child.namespace or md_node.namespace
        entry = MetaEntry(value=child.text_content().strip(), attrs=dict(child.attrs))
        grouped.setdefault(namespace, {}).setdefault(tag, []).append(entry)

    data = {
        namespace: {tag: tuple(entries) for tag, entries in tags.items()}
        for namespace, tags in grouped.items()
    }
    return Metadata(data=data)


def _derive_manifest(root: GenericNode, source: str) -> Manifest:
    manifest_node = root.find("manifest")
    if manifest_node is None:
        raise ManifestSectionMissing(path=source)

    base_dir = parent_dir(source)
    items = []
    for node in manifest_node.child_elements("item"):
        href = (node.attr("href") or "").strip()
        items.append(
            ManifestItem(
                id=(node.attr("id") or "").strip(),
                href=resolve_href(base_dir, href) if href else "",
                media_type=(node.attr("media-type") or "").strip(),
                properties=tuple((node.attr("properties") or "").split()),
                attrs=dict(node.attrs),
            )
        )
    return Manifest(items=tuple(items))


def _derive_spine(root: GenericNode, source: str) -> Spine:
    spine_node = root.find("spine")
    if spine_node is None:
        raise SpineSectionMissing(path=source)

    itemrefs = []
    for node in spine_node.child_elements("itemref"):
        linear = (node.attr("linear") or "").strip().lower()
        itemrefs.append(
            SpineItemRef(
                idref=(node.attr("idref") or "").strip(),
                linear=linear != "no",
                attrs=dict(node.attrs),
            )
        )
    return Spine(itemrefs=tuple(itemrefs), attrs=dict(spine_node.attrs))


@dataclass(frozen=True)
class PackageDocument:
    path: str
    root: GenericNode = field(repr=False)

    @property
    def base_dir(self) -> str:
        return parent_dir(self.path)

    @cached_property
    def metadata(self) -> Metadata:
        return _derive_metadata(self.root, self.path)

    @cached_property
    def manifest(self) -> Manifest:
        return _derive_manifest(self.root, self.path)

    @cached_property
    def spine(self) -> Spine:
        return _derive_spine(self.root, self.path)

    def section_errors(self) -> list[SectionMissing]:
        errors: list[SectionMissing] = []
        for section in ("metadata", "manifest", "spine"):
            try:
                getattr(self, section)
            except SectionMissing as exc:
                errors.append(exc)
        return errors

    def check(self) -> None:
        errors = self.section_errors()
        if errors:
            raise errors[0]

    def href_lookup(self) -> dict[str, str]:
        return self.manifest.href_lookup()

    def extract_chapter_ids(self) -> list[str]:
        return self.spine.extract_chapter_ids()

    def chapter_paths(self) -> list[str]:
        lookup = self.href_lookup()
        return [lookup[item_id] for item_id in self.extract_chapter_ids() if item_id in lookup]

    def find_toc_file(self) -> tuple[TocFormat, str]:
        """Locate the table of contents: EPUB3 nav first, then the EPUB2 NCX."""
        items = self.manifest.items

        for item in items:
            if item.href and item.has_property("nav"):
                return TocFormat.EPUB3, item.href

        toc_id = self.spine.toc_id
        if toc_id is not None:
            for item in items:
                if item.id == toc_id.strip() and item.href:
                    return TocFormat.EPUB2, item.href

        for item in items:
            if item.href and item.media_type.lower() == NCX_MEDIA_TYPE:
                return TocFormat.EPUB2, item.href

        logger.debug("no table of contents declared in %s", self.path)
        return TocFormat.UNKNOWN, ""


def parse_package_document(raw: bytes, path: str) -> PackageDocument:
    """Decode the OPF tree; sections are derived lazily, see :meth:`PackageDocument.check`."""
    return PackageDocument(path=path, root=parse_xml(raw, source=path))
