from __future__ import annotations

from dataclasses import dataclass
from typing import BinaryIO, Callable, Iterator, List, Optional, Tuple, Union

from .constants import NEWLINE, TEXT_ENCODING, NAME_ERRORS, DISPLAY_ERRORS
from .splitter import split_file_markers


TextLike = Union[str, bytes, bytearray, memoryview]
FileLike = Union["File", Tuple[TextLike, TextLike]]


def to_bytes(value: TextLike) -> bytes:
    """Return ``value`` as bytes; ``str`` is encoded without loss."""
    if isinstance(value, str):
        return value.encode(TEXT_ENCODING, NAME_ERRORS)
    if isinstance(value, bytes):
        return value
    return bytes(value)


def decode_name(raw: TextLike) -> str:
    if isinstance(raw, str):
        return raw
    return to_bytes(raw).decode(TEXT_ENCODING, NAME_ERRORS)


def encode_name(name: str) -> bytes:
    return name.encode(TEXT_ENCODING, NAME_ERRORS)


def display_name(name: str) -> str:
    """Terminal-safe form of a name; undecodable bytes become U+FFFD."""
    return encode_name(name).decode(TEXT_ENCODING, DISPLAY_ERRORS)


def fix_newline(segment: bytes) -> bytes:
    """Append one newline to a non-empty segment that lacks a trailing one.

    An untouched segment is returned as the same object; a new buffer is only
    built when the newline has to be added.
    """
    if segment and not segment.endswith(NEWLINE):
        return segment + NEWLINE
    return segment


@dataclass(frozen=True)
class File:
    """One named section of an archive.

    ``data`` is newline-normalized on construction. ``name`` is kept as given;
    it is only checked when the archive is materialized.
    """

    name: str
    data: bytes = b""

    def __post_init__(self):
        object.__setattr__(self, "name", decode_name(self.name))
        object.__setattr__(self, "data", fix_newline(to_bytes(self.data)))


def _as_file(item: FileLike) -> File:
    if isinstance(item, File):
        return item
    name, data = item
    return File(name, data)


@dataclass(frozen=True)
class Archive:
    """A comment followed by an ordered sequence of files.

    Build one with :func:`parse` or directly from a comment and a list of
    ``File`` values or ``(name, content)`` pairs. Instances are immutable.
    """

    comment: bytes = b""
    files: Tuple[File, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "comment", fix_newline(to_bytes(self.comment)))
        object.__setattr__(self, "files", tuple(_as_file(f) for f in self.files))

    @classmethod
    def parse(cls, data: TextLike) -> "Archive":
        return parse(data)

    def __iter__(self) -> Iterator[File]:
        return iter(self.files)

    def names(self) -> List[str]:
        return [f.name for f in self.files]

    def get(self, name: str) -> Optional[File]:
        """Return the first file called ``name``, or None."""
        for f in self.files:
            if f.name == name:
                return f
        return None

    def to_writer(self, sink: BinaryIO) -> None:
        from .formatter import write_archive

        write_archive(self, sink)

    def __bytes__(self) -> bytes:
        from .formatter import format_archive

        return format_archive(self)

    def __str__(self) -> str:
        from .formatter import display

        return display(self)

    def materialize(self, root, progress: Optional[Callable[[File, str], None]] = None) -> List[str]:
        from .materialize import materialize

        return materialize(self, root, progress=progress)


def parse(data: TextLike) -> Archive:
    """Parse txtar text into an :class:`Archive`. Never fails.

    Text before the first delimiter line becomes the comment. Malformed
    delimiter syntax ends the section list; everything from there on is
    kept as content of the preceding section.
    """
    raw = to_bytes(data)
    comment, name, rest = split_file_markers(raw)
    files: List[File] = []
    while name:
        body, next_name, rest = split_file_markers(rest)
        files.append(File(decode_name(name), body))
        name = next_name
    return Archive(comment, files)

