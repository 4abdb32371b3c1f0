from __future__ import annotations

import posixpath
import re
from pathlib import PurePosixPath
from urllib.parse import unquote

URI_SCHEME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*:")


def canonical_member(name: str) -> str:
    normalized = posixpath.normpath((name or "").replace("\\", "/")).lstrip("/")
    while normalized.startswith("../"):
        normalized = normalized[3:]
    return "" if normalized in {"", ".", ".."} else normalized


def parent_dir(member: str) -> str:
    parent = PurePosixPath(canonical_member(member)).parent.as_posix()
    return "" if parent in {"", "."} else parent


def resolve_href(base_dir: str, href: str) -> str:
    """Resolve ``href`` against an archive directory, keeping any fragment.

    External references (anything with a URI scheme) are returned untouched.
    """
    raw = (href or "").strip()
    if not raw or URI_SCHEME_RE.match(raw):
        return raw
    path, sep, fragment = raw.partition("#")
    path = unquote(path)
    if path:
        joined = posixpath.join(base_dir, path) if base_dir else path
        path = canonical_member(joined)
    return f"{path}#{fragment}" if sep else path


def normalize_href(href: str) -> str:
    return resolve_href("", href)
