from __future__ import annotations

import zipfile
from contextlib import contextmanager
from pathlib import Path
from typing import BinaryIO, Iterator, Protocol, Union

from .errors import EntryNotFound
from .paths import canonical_member

CONTAINER_PATH = "META-INF/container.xml"

ArchiveSource = Union[str, Path, BinaryIO]


class EntrySource(Protocol):
    def read(self, name: str) -> bytes: ...


def _zip_member_index(zf: zipfile.ZipFile) -> dict[str, str]:
    mapping: dict[str, str] = {}
    for info in zf.infolist():
        if info.is_dir():
            continue
        canonical = canonical_member(info.filename)
        if canonical and canonical not in mapping:
            mapping[canonical] = info.filename
    return mapping


class EpubArchive:
    """Read-only view of the entries of an EPUB zip file, keyed by canonical path."""

    def __init__(self, zf: zipfile.ZipFile) -> None:
        self._zf = zf
        self._index = _zip_member_index(zf)

    @classmethod
    @contextmanager
    def open(cls, source: ArchiveSource) -> Iterator[EpubArchive]:
        target = str(source) if isinstance(source, Path) else source
        with zipfile.ZipFile(target, "r") as zf:
            yield cls(zf)

    def names(self) -> list[str]:
        return list(self._index)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and canonical_member(name) in self._index

    def read(self, name: str) -> bytes:
        actual = self._index.get(canonical_member(name))
        if actual is None:
            raise EntryNotFound(name)
        with self._zf.open(actual, "r") as stream:
            return stream.read()
