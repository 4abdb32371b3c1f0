from __future__ import annotations

from typing import Optional


class EpubError(Exception):
    """Base class for every failure raised while reading an EPUB."""

    def __init__(self, message: str, *, path: Optional[str] = None) -> None:
        self.path = path or None
        super().__init__(f"{path}: {message}" if path else message)


class StructuralParseError(EpubError, ValueError):
    pass


class UnsupportedCharset(EpubError, ValueError):
    def __init__(self, charset: str, *, path: Optional[str] = None) -> None:
        self.charset = charset
        super().__init__(f"unsupported charset: {charset}", path=path)


class TooDeeplyNested(EpubError, ValueError):
    def __init__(self, limit: int, *, path: Optional[str] = None) -> None:
        self.limit = limit
        super().__init__(f"document nesting exceeds {limit} levels", path=path)


class EntryNotFound(EpubError, FileNotFoundError):
    def __init__(self, name: str) -> None:
        super().__init__("archive entry not found", path=name)


class ContainerMalformed(EpubError, ValueError):
    pass


class NoRootFileFound(EpubError, LookupError):
    pass


class SectionMissing(EpubError, ValueError):
    section = ""

    def __init__(self, *, path: Optional[str] = None) -> None:
        super().__init__(f"<{self.section}> section not found", path=path)


class MetadataSectionMissing(SectionMissing):
    section = "metadata"


class ManifestSectionMissing(SectionMissing):
    section = "manifest"


class SpineSectionMissing(SectionMissing):
    section = "spine"


class TocError(EpubError, ValueError):
    pass


class TocNavNotFound(TocError):
    pass


class TocOlNotFound(TocError):
    pass


class NavMapNotFound(TocError):
    pass


class ChapterUnreadable(EpubError):
    def __init__(self, chapter_id: str, message: str, *, path: Optional[str] = None) -> None:
        self.chapter_id = chapter_id
        super().__init__(f"chapter {chapter_id}: {message}", path=path)


class MetadataUndefined(EpubError, LookupError):
    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"metadata not defined: {key}")


class ChapterNotFound(EpubError, LookupError):
    pass
