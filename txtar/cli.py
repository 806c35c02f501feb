from __future__ import annotations

import argparse
import sys
import time
from typing import List, Optional

from txtar.archive import Archive, File, parse, display_name, to_bytes
from txtar.constants import STDIO_PATH, TEXT_ENCODING, DISPLAY_ERRORS
from txtar.errors import TxtarError, DirEscapeError
from txtar.packer import collect_inputs, pack_files


def _read_archive(path: str) -> Archive:
    """Parse an archive from a file path, or from stdin for '-'."""
    if path == STDIO_PATH:
        return parse(sys.stdin.buffer.read())
    with open(path, "rb") as fh:
        return parse(fh.read())


def cmd_pack(
    output: str,
    inputs: List[str],
    *,
    comment: Optional[str] = None,
    comment_file: Optional[str] = None,
    quiet: bool = False,
) -> bool:
    """Pack files and directories into a txtar archive.

    Args:
        output: Archive path to write, or '-' for stdout.
        inputs: Files or directories to store.
        comment: Comment text placed before the first file.
        comment_file: Path of a file whose content becomes the comment.
        quiet: Limit outputs to the summary.
    """
    # Progress goes to stderr when the archive itself is streamed to stdout.
    log = sys.stderr if output == STDIO_PATH else sys.stdout

    comment_bytes = b""
    if comment_file:
        with open(comment_file, "rb") as fh:
            comment_bytes = fh.read()
    elif comment:
        comment_bytes = to_bytes(comment)

    files, skipped = collect_inputs(inputs)
    for p in skipped:
        print(f"Warning: skipping symlink {p}", file=sys.stderr)
    archive = pack_files(files, comment=comment_bytes)
    if not quiet:
        for f in archive.files:
            print(f"   packing: {display_name(f.name)}", file=log)

    if output == STDIO_PATH:
        archive.to_writer(sys.stdout.buffer)
        sys.stdout.buffer.flush()
    else:
        with open(output, "wb") as fh:
            archive.to_writer(fh)

    total = sum(len(f.data) for f in archive.files)
    print(f"Done: packed {len(archive.files)} files ({total} bytes)", file=log)
    return True


def cmd_unpack(archive: str, *, outdir: str = ".", quiet: bool = False) -> bool:
    """Unpack (materialize) an archive into a directory.

    Existing files are never overwritten; a conflict aborts the run and
    leaves already written files in place.
    """
    arc = _read_archive(archive)
    total = len(arc.files)
    count = 0

    def _progress(f: File, dst: str) -> None:
        nonlocal count
        count += 1
        if not quiet:
            print(f" unpacking: {count:>4}/{total:<4} {display_name(f.name)}")

    t0 = time.time()
    try:
        arc.materialize(outdir, progress=_progress)
    except DirEscapeError as exc:
        print(f"Error: unsafe path in archive: {exc.path}", file=sys.stderr)
        sys.exit(2)
    except OSError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        if count:
            print(f"Note: {count} file(s) were written before the failure.", file=sys.stderr)
        sys.exit(2)
    dt = max(0.000001, time.time() - t0)
    print(f"Done: unpacked {count}/{total} files in {dt:.1f}s")
    return True


def cmd_list(archive: str) -> bool:
    """List archive files as size and name."""
    arc = _read_archive(archive)
    for f in arc.files:
        print(f"{len(f.data)}\t{display_name(f.name)}")
    return True


def cmd_show(archive: str, names: Optional[List[str]] = None) -> bool:
    """Print the archive as text, or only the content of the named files."""
    arc = _read_archive(archive)
    if not names:
        sys.stdout.write(str(arc))
        return True
    for name in names:
        f = arc.get(name)
        if f is None:
            raise RuntimeError(f"No file named {name!r} in archive")
        sys.stdout.write(f.data.decode(TEXT_ENCODING, DISPLAY_ERRORS))
    return True


def main(argv: List[str] | None = None):
    ap = argparse.ArgumentParser(
        prog="txtar",
        description="txtar plain-text archive tool",
        epilog="Unpacking never overwrites existing files and refuses names that escape the output directory.",
    )
    sub = ap.add_subparsers(dest="cmd", required=True)

    ap_pack = sub.add_parser("pack", help="Pack files into an archive")
    ap_pack.add_argument("output", help="Output archive path ('-' for stdout)")
    ap_pack.add_argument("inputs", nargs="+", help="Input files/directories")
    group = ap_pack.add_mutually_exclusive_group()
    group.add_argument("--comment", help="Comment text placed before the first file")
    group.add_argument("--comment-file", help="File whose content becomes the comment")
    ap_pack.add_argument("--quiet", help="limit outputs to summaries only", action="store_true")

    ap_unpack = sub.add_parser("unpack", help="Unpack files")
    ap_unpack.add_argument("archive", help="Archive path ('-' for stdin)")
    ap_unpack.add_argument("--outdir", default=".", help="Output directory")
    ap_unpack.add_argument("--quiet", help="limit outputs to summaries only", action="store_true")

    ap_list = sub.add_parser("list", help="List archive contents")
    ap_list.add_argument("archive", help="Archive path ('-' for stdin)")

    ap_show = sub.add_parser("show", help="Print the archive, or selected files, as text")
    ap_show.add_argument("archive", help="Archive path ('-' for stdin)")
    ap_show.add_argument("names", nargs="*", help="Files to print (default: whole archive)")

    args = ap.parse_args(argv)
    try:
        if args.cmd == "pack":
            cmd_pack(args.output, args.inputs, comment=args.comment, comment_file=args.comment_file, quiet=args.quiet)
        elif args.cmd == "unpack":
            cmd_unpack(args.archive, outdir=args.outdir, quiet=args.quiet)
        elif args.cmd == "list":
            cmd_list(args.archive)
        elif args.cmd == "show":
            cmd_show(args.archive, args.names)
        else:
            raise RuntimeError("Unknown command")
    except (ValueError, RuntimeError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(2)
    except (TxtarError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(2)


if __name__ == "__main__":
    main()
