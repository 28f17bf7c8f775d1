"""Host path utilities for devswap."""

from __future__ import annotations

import os
from pathlib import Path


def resolve_home() -> str:
    """Caller's home directory, from HOME with a platform fallback."""
    return os.environ.get("HOME") or str(Path.home())


def resolve_source(path: str) -> str:
    """Absolute form of a source directory for a bind mount.

    The path does not have to exist; Docker reports missing bind sources
    when the container is created.
    """
    return str(Path(path).expanduser().absolute())
