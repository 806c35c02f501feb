# Delimiter line: MARKER + name + MARKER_END, terminated by NEWLINE or end of input.
MARKER = b"-- "
MARKER_END = b" --"
NEWLINE = b"\n"
CARRIAGE_RETURN = b"\r"
NEWLINE_MARKER = NEWLINE + MARKER

# Archive text is a byte stream; names and str inputs cross into it with this codec.
TEXT_ENCODING = "utf-8"
NAME_ERRORS = "surrogateescape"
DISPLAY_ERRORS = "replace"

# Archive path separator, independent of the host OS.
ARCHIVE_SEP = "/"
PARENT_DIR = ".."
CURRENT_DIR = "."

# CLI argument meaning stdin/stdout.
STDIO_PATH = "-"
