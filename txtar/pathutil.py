from __future__ import annotations

import os

from .constants import ARCHIVE_SEP, PARENT_DIR, CURRENT_DIR


def clean_path(p: str) -> str:
    """Lexically normalize a slash-separated archive path.

    Rules (the filesystem is never consulted):
    - Collapse repeated slashes and drop trailing ones
    - Remove '.' segments
    - Let '..' cancel the preceding real segment
    - Drop '..' directly under the root of an absolute path
    - Keep leading '..' of a relative path
    An empty result is '.'.
    """
    rooted = p.startswith(ARCHIVE_SEP)
    parts: list[str] = []
    for seg in p.split(ARCHIVE_SEP):
        if seg in ("", CURRENT_DIR):
            continue
        if seg == PARENT_DIR:
            if parts and parts[-1] != PARENT_DIR:
                parts.pop()
            elif not rooted:
                parts.append(PARENT_DIR)
            continue
        parts.append(seg)
    cleaned = ARCHIVE_SEP.join(parts)
    if rooted:
        return ARCHIVE_SEP + cleaned
    return cleaned or CURRENT_DIR


def escapes_root(cleaned: str) -> bool:
    """True if a cleaned path is absolute or climbs above its base."""
    if cleaned == PARENT_DIR or cleaned.startswith(PARENT_DIR + ARCHIVE_SEP):
        return True
    return cleaned.startswith(ARCHIVE_SEP) or os.path.isabs(cleaned)


def to_native(cleaned: str) -> str:
    return os.path.join(*cleaned.split(ARCHIVE_SEP))
