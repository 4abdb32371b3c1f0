from __future__ import annotations

import logging

from .archive import CONTAINER_PATH, ArchiveSource, EpubArchive
from .book import Book
from .chapter import parse_chapter
from .container import parse_container
from .models import Chapter
from .package import PackageDocument, parse_package_document
from .paths import canonical_member
from .toc import parse_toc

logger = logging.getLogger("epubread.reader")


def _read_chapters(archive: EpubArchive, package: PackageDocument) -> list[Chapter]:
    chapters: list[Chapter] = []
    lookup = package.href_lookup()
    for chapter_id in package.extract_chapter_ids():
        href = lookup.get(chapter_id)
        if not href:
            logger.debug("spine idref %s has no manifest href, skipping", chapter_id)
            continue
        if href not in archive:
            logger.info("chapter %s (%s) is missing from the archive, skipping", chapter_id, href)
            continue
        chapters.append(parse_chapter(chapter_id, href, archive))
    return chapters


def read_archive(archive: EpubArchive) -> Book:
    container = parse_container(archive.read(CONTAINER_PATH), source=CONTAINER_PATH)
    opf_path = canonical_member(container.find_opf_file())
    package = parse_package_document(archive.read(opf_path), opf_path)
    package.check()

    chapters = _read_chapters(archive, package)

    toc_format, toc_path = package.find_toc_file()
    logger.debug("toc format %s at %r", toc_format.value, toc_path)
    toc = parse_toc(toc_format, toc_path, archive)

    return Book(
        container=container,
        package=package,
        toc=toc,
        toc_format=toc_format,
        toc_path=toc_path,
        chapters=tuple(chapters),
    )


def read_book(source: ArchiveSource) -> Book:
    """Parse the EPUB at ``source`` (a path or binary file object) into a :class:`Book`."""
    with EpubArchive.open(source) as archive:
        return read_archive(archive)
