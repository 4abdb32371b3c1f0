"""Flattened views over the namespace -> tag -> entries metadata map.

``get_all`` keeps every element, extension ``<meta>`` tags included, while
``normalize`` keeps only the fifteen Dublin Core elements.
"""

from __future__ import annotations

import bisect
from collections.abc import Mapping, Sequence

from .models import MetaEntry

DUBLIN_CORE_ELEMENTS = tuple(
    sorted(
        (
            "title",
            "creator",
            "subject",
            "description",
            "publisher",
            "contributor",
            "date",
            "type",
            "format",
            "identifier",
            "language",
            "source",
            "relation",
            "coverage",
            "rights",
        )
    )
)

MetadataMap = Mapping[str, Mapping[str, Sequence[MetaEntry]]]


def is_dublin_core(tag: str) -> bool:
    key = (tag or "").lower()
    index = bisect.bisect_left(DUBLIN_CORE_ELEMENTS, key)
    return index < len(DUBLIN_CORE_ELEMENTS) and DUBLIN_CORE_ELEMENTS[index] == key


def _display_key(tag: str, entry: MetaEntry) -> str:
    if tag != "meta":
        return tag
    name = entry.attrs.get("name") or ""
    if name:
        return f"meta:{name}"
    prop = entry.attrs.get("property") or ""
    if prop:
        return f"meta:{prop}"
    return tag


def get_all(metadata: MetadataMap) -> dict[str, list[str]]:
    result: dict[str, list[str]] = {}
    for tags in metadata.values():
        for tag, entries in tags.items():
            for entry in entries:
                value = entry.value or (entry.attrs.get("content") or "").strip()
                if not value:
                    continue
                result.setdefault(_display_key(tag, entry), []).append(value)
    return result


def normalize(metadata: MetadataMap) -> dict[str, list[str]]:
    result: dict[str, list[str]] = {}
    for tags in metadata.values():
        for tag, entries in tags.items():
            if not is_dublin_core(tag):
                continue
            for entry in entries:
                value = entry.value.strip()
                if value:
                    result.setdefault(tag.lower(), []).append(value)
    return result


def dublin_core_values(metadata: MetadataMap, key: str) -> list[str]:
    key = (key or "").strip().lower()
    if not is_dublin_core(key):
        return []
    return list(normalize(metadata).get(key, []))
