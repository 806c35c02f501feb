from __future__ import annotations

import os
from typing import Iterable, List, Tuple

from .archive import Archive, File, TextLike, to_bytes
from .constants import ARCHIVE_SEP
from .errors import UnrepresentableContentError
from .splitter import has_marker_line


def _arc_name(base: str, rel: str) -> str:
    rel = rel.replace(os.sep, ARCHIVE_SEP)
    return f"{base}{ARCHIVE_SEP}{rel}" if base else rel


def collect_inputs(inputs: Iterable[str]) -> Tuple[List[Tuple[str, str]], List[str]]:
    """Expand filesystem inputs into (archive name, filesystem path) pairs.

    A file is stored under its base name. A directory is walked recursively
    and its files are stored below the directory's own name, in sorted order.
    Symlinks are not followed; their paths are returned separately.

    Returns:
        (files, skipped_symlinks)
    """
    files: List[Tuple[str, str]] = []
    skipped: List[str] = []
    for p in inputs:
        if os.path.islink(p):
            skipped.append(p)
        elif os.path.isdir(p):
            base = os.path.basename(os.path.abspath(p))
            for root, dirnames, filenames in os.walk(p):
                # prune symlink directories to avoid walking into them
                for d in sorted(dirnames):
                    if os.path.islink(os.path.join(root, d)):
                        skipped.append(os.path.join(root, d))
                dirnames[:] = sorted(d for d in dirnames if not os.path.islink(os.path.join(root, d)))
                for fn in sorted(filenames):
                    full = os.path.join(root, fn)
                    if os.path.islink(full):
                        skipped.append(full)
                        continue
                    files.append((_arc_name(base, os.path.relpath(full, start=p)), full))
        else:
            files.append((os.path.basename(p), p))
    return files, skipped


def pack_files(files: Iterable[Tuple[str, str]], *, comment: TextLike = b"") -> Archive:
    """Read (archive name, filesystem path) pairs into an Archive.

    Raises:
        ValueError: A name contains a newline or is used twice.
        UnrepresentableContentError: The comment or a file's content has a
            line that would be read back as a delimiter.
    """
    comment = to_bytes(comment)
    if has_marker_line(comment):
        raise UnrepresentableContentError("<comment>")
    entries: List[File] = []
    seen = set()
    for name, path in files:
        if "\n" in name or "\r" in name:
            raise ValueError(f"File name may not contain line breaks: {name!r}")
        if name in seen:
            raise ValueError(f"Duplicate archive name: {name!r}")
        seen.add(name)
        with open(path, "rb") as fh:
            data = fh.read()
        if has_marker_line(data):
            raise UnrepresentableContentError(name)
        entries.append(File(name, data))
    return Archive(comment, entries)


def pack_paths(inputs: Iterable[str], *, comment: TextLike = b"") -> Archive:
    files, _skipped = collect_inputs(inputs)
    return pack_files(files, comment=comment)
