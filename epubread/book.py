from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Optional

from .container import Container
from .errors import ChapterNotFound, MetadataUndefined
from .models import Chapter, TocFormat, TocNode
from .package import PackageDocument


def _dublin_core_accessor(key: str) -> Callable[[Book], str]:
    def accessor(self: Book) -> str:
        return self.metadata_value(key)

    accessor.__name__ = key
    accessor.__doc__ = f"First ``dc:{key}`` value; raises MetadataUndefined when absent."
    return accessor


@dataclass(frozen=True)
class Book:
    container: Container
    package: PackageDocument
    toc: TocNode = field(default_factory=TocNode)
    toc_format: TocFormat = TocFormat.UNKNOWN
    toc_path: str = ""
    chapters: tuple[Chapter, ...] = ()

    @property
    def package_path(self) -> str:
        return self.package.path

    @property
    def has_toc(self) -> bool:
        return self.toc_format is not TocFormat.UNKNOWN

    def metadata_values(self, key: str) -> list[str]:
        """All values for a Dublin Core element, in document order."""
        key = (key or "").strip().lower()
        if not key:
            raise ValueError("metadata key is empty")
        values = self.package.metadata.get(key)
        if not values:
            raise MetadataUndefined(key)
        return values

    def metadata_by_key(self, key: str) -> list[str]:
        return self.metadata_values(key)

    def metadata_value(self, key: str) -> str:
        return self.metadata_values(key)[0]

    title = _dublin_core_accessor("title")
    creator = _dublin_core_accessor("creator")
    subject = _dublin_core_accessor("subject")
    description = _dublin_core_accessor("description")
    publisher = _dublin_core_accessor("publisher")
    contributor = _dublin_core_accessor("contributor")
    date = _dublin_core_accessor("date")
    type = _dublin_core_accessor("type")
    format = _dublin_core_accessor("format")
    identifier = _dublin_core_accessor("identifier")
    language = _dublin_core_accessor("language")
    source = _dublin_core_accessor("source")
    relation = _dublin_core_accessor("relation")
    coverage = _dublin_core_accessor("coverage")
    rights = _dublin_core_accessor("rights")

    def all_metadata(self) -> dict[str, list[str]]:
        """Every metadata entry, extension ``<meta>`` fields included."""
        return self.package.metadata.get_all()

    def chapter_count(self) -> int:
        return len(self.chapters)

    def chapter_by_id(self, chapter_id: str) -> Chapter:
        for chapter in self.chapters:
            if chapter.id == chapter_id:
                return chapter
        raise ChapterNotFound(f"chapter not found: {chapter_id}")

    def chapter_by_index(self, index: int) -> Chapter:
        if index < 0 or index >= len(self.chapters):
            raise ChapterNotFound(f"chapter not found: index {index}")
        return self.chapters[index]

    def chapter_text_by_id(self, chapter_id: str) -> str:
        return self.chapter_by_id(chapter_id).text()

    def chapter_text_by_index(self, index: int) -> str:
        return self.chapter_by_index(index).text()

    def all_chapters_text(self) -> str:
        return "\n\n".join(text for text in (chapter.text() for chapter in self.chapters) if text)

    def flatten_toc(self) -> list[TocNode]:
        return self.toc.flatten()

    def find_toc_entry(self, href: str) -> Optional[TocNode]:
        return self.toc.find_by_href(href)
