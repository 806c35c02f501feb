from __future__ import annotations

import io
import unittest

from txtar.archive import Archive, File, parse, fix_newline, display_name
from txtar.formatter import write_archive, format_archive, display
from txtar.splitter import split_file_markers, has_marker_line


BASIC = (
    "comment1\n"
    "comment2\n"
    "-- file1 --\n"
    "File 1 text.\n"
    "-- foo --\n"
    "File 2 text.\n"
    "-- empty --\n"
    "-- noNL --\n"
    "hello world"
)


class _FailingSink:
    def __init__(self, fail_after: int):
        self.writes = 0
        self.fail_after = fail_after

    def write(self, data: bytes) -> int:
        if self.writes >= self.fail_after:
            raise OSError("sink closed")
        self.writes += 1
        return len(data)


class SplitterTests(unittest.TestCase):
    def test_no_marker(self):
        data = b"just some text\nwith lines\n"
        self.assertEqual(split_file_markers(data), (data, b"", b""))

    def test_leading_marker(self):
        self.assertEqual(
            split_file_markers(b"-- a.txt --\nbody\n"),
            (b"", b"a.txt", b"body\n"),
        )

    def test_marker_after_newline(self):
        self.assertEqual(
            split_file_markers(b"intro\n-- a.txt --\nbody\n-- b --\n"),
            (b"intro\n", b"a.txt", b"body\n-- b --\n"),
        )

    def test_marker_at_end_of_input(self):
        self.assertEqual(split_file_markers(b"x\n-- last --"), (b"x\n", b"last", b""))

    def test_crlf_delimiter(self):
        self.assertEqual(
            split_file_markers(b"blah\r\n-- hello --\r\nhello\r\n"),
            (b"blah\r\n", b"hello", b"hello\r\n"),
        )

    def test_unterminated_marker_returns_whole_input(self):
        for data in (
            b"intro\n-- missing end\nmore\n",
            b"-- missing end",
            b"intro\n-- a -- trailing\n",
            b"-- --\n",
            b"--  --\nbody\n",
        ):
            with self.subTest(data=data):
                self.assertEqual(split_file_markers(data), (data, b"", b""))

    def test_malformed_first_candidate_stops_scan(self):
        data = b"intro\n-- broken\n-- good --\nbody\n"
        self.assertEqual(split_file_markers(data), (data, b"", b""))

    def test_marker_needs_line_start(self):
        data = b"text -- not a marker --\n"
        self.assertEqual(split_file_markers(data), (data, b"", b""))

    def test_has_marker_line(self):
        self.assertTrue(has_marker_line(b"-- x --\n"))
        self.assertTrue(has_marker_line(b"a\n-- broken\n"))
        self.assertFalse(has_marker_line(b"a -- b --\n--\n"))
        self.assertFalse(has_marker_line(b""))


class NewlineTests(unittest.TestCase):
    def test_fix_newline(self):
        self.assertEqual(fix_newline(b"abc"), b"abc\n")
        self.assertEqual(fix_newline(b"abc\n"), b"abc\n")
        self.assertEqual(fix_newline(b""), b"")
        self.assertEqual(fix_newline(b"\n"), b"\n")

    def test_unchanged_segment_is_not_copied(self):
        seg = b"already terminated\n"
        self.assertIs(fix_newline(seg), seg)

    def test_file_normalizes_data(self):
        self.assertEqual(File("a", "no newline").data, b"no newline\n")
        self.assertEqual(File("a", "one\n").data, b"one\n")
        self.assertEqual(File("a", "").data, b"")
        self.assertEqual(File("a", "two\n\n").data, b"two\n\n")

    def test_archive_normalizes_comment(self):
        self.assertEqual(Archive("note").comment, b"note\n")
        self.assertEqual(Archive("").comment, b"")

    def test_comment_only_archive_is_truthy(self):
        arc = Archive("note")
        self.assertTrue(arc)
        self.assertEqual(arc.files, ())


class ParseTests(unittest.TestCase):
    def test_basic(self):
        arc = parse(BASIC)
        self.assertEqual(arc.comment, b"comment1\ncomment2\n")
        self.assertEqual(
            [(f.name, f.data) for f in arc.files],
            [
                ("file1", b"File 1 text.\n"),
                ("foo", b"File 2 text.\n"),
                ("empty", b""),
                ("noNL", b"hello world\n"),
            ],
        )

    def test_basic_format(self):
        self.assertEqual(str(parse(BASIC)), BASIC + "\n")

    def test_simplest(self):
        arc = parse("-- simplest.txt --")
        self.assertEqual(arc.comment, b"")
        self.assertEqual(arc.files, (File("simplest.txt", b""),))
        self.assertEqual(str(arc), "-- simplest.txt --\n")

    def test_crlf_input(self):
        arc = parse(b"blah\r\n-- hello --\r\nhello\r\n")
        self.assertEqual(arc, Archive(b"blah\r\n", [File("hello", b"hello\r\n")]))

    def test_crlf_matches_lf(self):
        lf = parse(b"c\n-- a --\nx\n-- b --\ny\n")
        crlf = parse(b"c\n-- a --\r\nx\n-- b --\r\ny\n")
        self.assertEqual(lf, crlf)

    def test_no_delimiter(self):
        arc = parse("plain text\nwithout sections")
        self.assertEqual(arc.comment, b"plain text\nwithout sections\n")
        self.assertEqual(arc.files, ())

    def test_empty_input(self):
        arc = parse(b"")
        self.assertEqual(arc, Archive())
        self.assertEqual(bytes(arc), b"")

    def test_malformed_delimiter_stays_content(self):
        arc = parse("-- a --\nline\n-- not closed\n-- b --\nmore\n")
        self.assertEqual(arc.names(), ["a"])
        self.assertEqual(arc.files[0].data, b"line\n-- not closed\n-- b --\nmore\n")

    def test_bytes_and_str_agree(self):
        self.assertEqual(parse(BASIC), parse(BASIC.encode("utf-8")))
        self.assertEqual(parse(bytearray(BASIC.encode("utf-8"))), parse(BASIC))

    def test_names_are_not_validated(self):
        arc = parse("-- ../up.txt --\n-- /abs --\n")
        self.assertEqual(arc.names(), ["../up.txt", "/abs"])

    def test_duplicate_names_kept_in_order(self):
        arc = parse("-- x --\n1\n-- x --\n2\n")
        self.assertEqual([f.data for f in arc], [b"1\n", b"2\n"])
        self.assertEqual(arc.get("x").data, b"1\n")
        self.assertIsNone(arc.get("y"))


class FormatTests(unittest.TestCase):
    def test_programmatic_roundtrip(self):
        arc = Archive(
            "top comment",
            [("a.txt", "alpha"), File("dir/b.txt", "beta\n"), ("empty", "")],
        )
        expected = b"top comment\n-- a.txt --\nalpha\n-- dir/b.txt --\nbeta\n-- empty --\n"
        self.assertEqual(bytes(arc), expected)
        self.assertEqual(parse(bytes(arc)), arc)
        self.assertEqual(bytes(parse(bytes(arc))), expected)

    def test_to_writer(self):
        arc = parse(BASIC)
        buf = io.BytesIO()
        arc.to_writer(buf)
        self.assertEqual(buf.getvalue(), format_archive(arc))

    def test_sink_errors_propagate(self):
        arc = parse(BASIC)
        with self.assertRaises(OSError):
            write_archive(arc, _FailingSink(fail_after=2))

    def test_display_is_lossy_on_invalid_utf8(self):
        arc = parse(b"ok\n-- bin --\n\xff\xfe\n")
        self.assertEqual(display(arc), "ok\n-- bin --\n��\n")
        self.assertEqual(bytes(arc), b"ok\n-- bin --\n\xff\xfe\n")

    def test_non_utf8_name_roundtrips(self):
        raw = b"-- caf\xe9 --\ndata\n"
        arc = parse(raw)
        self.assertEqual(bytes(arc), raw)
        self.assertEqual(str(arc), "-- caf� --\ndata\n")
        self.assertEqual(arc.files[0].name, "caf\udce9")
        self.assertEqual(display_name(arc.files[0].name), "caf�")

    def test_display_matches_bytes_for_text(self):
        arc = parse("héllo\n-- näme --\ndäta\n")
        self.assertEqual(str(arc).encode("utf-8"), bytes(arc))


if __name__ == "__main__":
    unittest.main()
