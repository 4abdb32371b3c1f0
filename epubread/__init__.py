from .book import Book
from .errors import (
    ChapterNotFound,
    ChapterUnreadable,
    ContainerMalformed,
    EntryNotFound,
    EpubError,
    ManifestSectionMissing,
    MetadataSectionMissing,
    MetadataUndefined,
    NavMapNotFound,
    NoRootFileFound,
    SpineSectionMissing,
    StructuralParseError,
    TocNavNotFound,
    TocOlNotFound,
    TooDeeplyNested,
    UnsupportedCharset,
)
from .models import Chapter, TocFormat, TocNode
from .reader import read_book

__all__ = [
    "Book",
    "Chapter",
    "ChapterNotFound",
    "ChapterUnreadable",
    "ContainerMalformed",
    "EntryNotFound",
    "EpubError",
    "ManifestSectionMissing",
    "MetadataSectionMissing",
    "MetadataUndefined",
    "NavMapNotFound",
    "NoRootFileFound",
    "SpineSectionMissing",
    "StructuralParseError",
    "TocFormat",
    "TocNavNotFound",
    "TocNode",
    "TocOlNotFound",
    "TooDeeplyNested",
    "UnsupportedCharset",
    "read_book",
]
