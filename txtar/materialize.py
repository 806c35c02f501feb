from __future__ import annotations

import errno
import os
from typing import Callable, List, Optional, TYPE_CHECKING, Union

from .errors import DirEscapeError
from .pathutil import clean_path, escapes_root, to_native

if TYPE_CHECKING:
    from .archive import Archive, File


def materialize(
    archive: "Archive",
    root: Union[str, "os.PathLike[str]"],
    progress: Optional[Callable[["File", str], None]] = None,
) -> List[str]:
    """Write every file of ``archive`` under the directory ``root``.

    Files are written in archive order. Each name is cleaned lexically; a
    name that is absolute or climbs above ``root`` raises DirEscapeError with
    the cleaned path. Missing parent directories are created. Files are
    opened in exclusive-create mode, so an existing file raises
    FileExistsError instead of being overwritten. A name holding a NUL byte
    raises OSError (EINVAL). The first error stops the call; files written
    before it are left in place.

    Args:
        archive: Archive to write out.
        root: Destination directory.
        progress: Optional callback invoked with (file, destination path)
            after each file is written.

    Returns:
        Destination paths written, in archive order.
    """
    root = os.fspath(root)
    written: List[str] = []
    for f in archive.files:
        rel = clean_path(f.name)
        if escapes_root(rel):
            raise DirEscapeError(rel)

        dst = os.path.join(root, to_native(rel))
        # The OS cannot represent NUL in a path; report it as an I/O failure.
        if "\x00" in rel:
            raise OSError(errno.EINVAL, "file name contains a NUL byte", dst)
        parent = os.path.dirname(dst)
        if parent:
            os.makedirs(parent, exist_ok=True)

        with open(dst, "xb") as fh:
            fh.write(f.data)
        written.append(dst)
        if progress is not None:
            progress(f, dst)
    return written
