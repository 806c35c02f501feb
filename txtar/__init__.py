"""
txtar — a trivial text-based file archive format.

An archive is a comment followed by named file sections, each introduced by
a delimiter line of the form ``-- name --``:

    comment text
    -- hello.txt --
    Hello, world.
    -- sub/dir/data.txt --
    more text

Features:

- Lossless parsing of arbitrary text (malformed delimiters stay content),
  with CRLF-tolerant delimiter lines.
- Byte-exact serialization plus a lossy display form for terminals.
- Safe materialization: names are cleaned lexically, paths escaping the
  destination raise DirEscapeError, and existing files are never overwritten.
- A ``txtar`` command line tool to pack, unpack, list and show archives.

Security note: only the archive names are checked. Symlinks already present
in the destination tree are followed by the operating system as usual.
"""

from .archive import Archive, File, parse
from .errors import TxtarError, DirEscapeError, UnrepresentableContentError
from .formatter import write_archive, format_archive, display
from .materialize import materialize
from .packer import pack_paths

__version__ = "0.1"

__all__ = [
    "Archive",
    "File",
    "parse",
    "write_archive",
    "format_archive",
    "display",
    "materialize",
    "pack_paths",
    "TxtarError",
    "DirEscapeError",
    "UnrepresentableContentError",
]
