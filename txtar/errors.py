class TxtarError(Exception):
    """Base class for txtar-specific errors."""


class DirEscapeError(TxtarError):
    """An archive file name resolves outside the destination directory.

    ``path`` is the lexically cleaned name that was rejected.
    """

    def __init__(self, path: str):
        super().__init__(f"path escapes destination directory: {path}")
        self.path = path


class UnrepresentableContentError(TxtarError):
    """Content holds a line the parser would read as a file delimiter."""

    def __init__(self, name: str):
        super().__init__(f"content of {name!r} contains a line starting with '-- '")
        self.name = name
