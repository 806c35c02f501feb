from __future__ import annotations

from typing import Tuple

from .constants import MARKER, MARKER_END, NEWLINE, NEWLINE_MARKER, CARRIAGE_RETURN


_NO_SECTION = b""


def split_file_markers(data: bytes) -> Tuple[bytes, bytes, bytes]:
    """Split ``data`` around its next delimiter line.

    Returns ``(prefix, name, rest)``: the bytes before the delimiter line,
    the name between ``-- `` and `` --``, and the bytes after the line's
    newline. When there is no delimiter, or the first candidate line is not
    a well-formed delimiter, the whole input comes back as ``prefix`` with an
    empty name and rest.

    The scan has two states. While searching, a candidate is either the very
    first line (when the input starts with the marker) or the first line that
    follows a newline and starts with the marker. While validating, the
    candidate line has one trailing carriage return trimmed and must end with
    the closing marker around a non-empty name.
    """
    # searching
    if data.startswith(MARKER):
        start = 0
    else:
        offset = data.find(NEWLINE_MARKER)
        if offset < 0:
            return data, _NO_SECTION, _NO_SECTION
        start = offset + 1

    # validating
    end = data.find(NEWLINE, start)
    if end < 0:
        line, rest = data[start:], _NO_SECTION
    else:
        line, rest = data[start:end], data[end + 1:]
    if line.endswith(CARRIAGE_RETURN):
        line = line[:-1]
    if len(line) <= len(MARKER) + len(MARKER_END) or not line.endswith(MARKER_END):
        return data, _NO_SECTION, _NO_SECTION

    return data[:start], line[len(MARKER):-len(MARKER_END)], rest


def has_marker_line(data: bytes) -> bool:
    """True if any line of ``data`` starts with the delimiter marker.

    Such content cannot be stored in an archive: a valid delimiter would split
    it, and a malformed one would swallow every section after it.
    """
    return data.startswith(MARKER) or NEWLINE_MARKER in data
