from __future__ import annotations

from dataclasses import dataclass

from .errors import ContainerMalformed, NoRootFileFound
from .nodes import parse_xml

PACKAGE_MEDIA_TYPE = "application/oebps-package+xml"
EPUB_MEDIA_TYPE = "application/epub+zip"
ACCEPTED_ROOTFILE_MEDIA_TYPES = {PACKAGE_MEDIA_TYPE, EPUB_MEDIA_TYPE, ""}


@dataclass(frozen=True)
class Rootfile:
    full_path: str
    media_type: str = ""


@dataclass(frozen=True)
class Container:
    rootfiles: tuple[Rootfile, ...]

    def find_opf_file(self) -> str:
        """Path of the first rootfile that looks like a package document."""
        for rootfile in self.rootfiles:
            full_path = rootfile.full_path.strip()
            if not full_path:
                continue
            if rootfile.media_type.strip().lower() in ACCEPTED_ROOTFILE_MEDIA_TYPES:
                return full_path
        raise NoRootFileFound("no usable rootfile in container")


def parse_container(raw: bytes, source: str = "META-INF/container.xml") -> Container:
    root = parse_xml(raw, source=source)
    rootfiles_node = root.find("rootfiles")
    if rootfiles_node is None:
        raise ContainerMalformed("container <rootfiles> not found", path=source)

    rootfiles = tuple(
        Rootfile(
            full_path=node.attr("full-path") or "",
            media_type=node.attr("media-type") or "",
        )
        for node in rootfiles_node.child_elements("rootfile")
    )
    if not rootfiles:
        raise ContainerMalformed("no rootfile entries in container", path=source)
    return Container(rootfiles=rootfiles)
