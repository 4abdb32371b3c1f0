from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

MAX_DEPTH_ENV = "EPUBREAD_MAX_DEPTH"
DEFAULT_MAX_DEPTH = 128


def read_env(name: str, default: Optional[str] = None) -> Optional[str]:
    value = os.getenv(name)
    if value not in {None, ""}:
        return value

    file_var = os.getenv(f"{name}_FILE")
    if not file_var:
        return default

    try:
        content = Path(file_var).read_text(encoding="utf-8")
    except OSError:
        return default
    return content.rstrip("\r\n")


def read_int_env(name: str, default: int) -> int:
    raw = read_env(name)
    if raw is None:
        return default
    try:
        return int(raw.strip())
    except ValueError:
        return default


def max_depth() -> int:
    """Deepest element nesting the tree decoders accept."""
    value = read_int_env(MAX_DEPTH_ENV, DEFAULT_MAX_DEPTH)
    return value if value > 0 else DEFAULT_MAX_DEPTH
