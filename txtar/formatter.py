from __future__ import annotations

import io
from typing import BinaryIO, TYPE_CHECKING

from .constants import MARKER, MARKER_END, NEWLINE, TEXT_ENCODING, DISPLAY_ERRORS
from .archive import encode_name

if TYPE_CHECKING:
    from .archive import Archive


def delimiter_line(name: str) -> bytes:
    return MARKER + encode_name(name) + MARKER_END + NEWLINE


def write_archive(archive: "Archive", sink: BinaryIO) -> None:
    """Serialize ``archive`` as txtar into a binary sink.

    Comment and file data are already newline-terminated, so the output is
    plain concatenation. Errors raised by ``sink.write`` propagate unchanged.
    """
    sink.write(archive.comment)
    for f in archive.files:
        sink.write(delimiter_line(f.name))
        sink.write(f.data)


def format_archive(archive: "Archive") -> bytes:
    buf = io.BytesIO()
    write_archive(archive, buf)
    return buf.getvalue()


def display(archive: "Archive") -> str:
    """Render ``archive`` as text, replacing invalid UTF-8 with U+FFFD."""
    return format_archive(archive).decode(TEXT_ENCODING, DISPLAY_ERRORS)
