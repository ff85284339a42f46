# json_tool.py
# Command-line front end: read JSON, validate it, print it back formatted
#
# =============================================================================
#  CLI WRAPPER
# =============================================================================
#
# Reads the whole document (a file, or standard input when no file is given)
# as UTF-8, parses it and writes the rendered tree plus a newline to standard
# output. Any failure is reported on standard error as
#
#     ERROR: Invalid JSON - <message>
#
# Exit codes: 0 on success, 1 on invalid or unreadable input. argparse exits with 2 on bad
# usage.
# =============================================================================

import argparse
import logging
import sys
from typing import List, Optional

from json_parser import DEPTH_LIMIT_DEFAULT, DEPTH_LIMIT_MAX, ParseError, parse
from json_printer import COMPACT, INDENT_DEFAULT, Pretty, render

logger = logging.getLogger(__name__)

ERROR_PREFIX = "ERROR: Invalid JSON - "


def _read_input(path: Optional[str]) -> bytes:
    if path is None or path == "-":
        return sys.stdin.buffer.read()
    with open(path, "rb") as fh:
        return fh.read()


def _fail(message: str) -> int:
    sys.stderr.write(f"{ERROR_PREFIX}{message}\n")
    return 1


def _build_arg_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="jsontree", description="Parse JSON and print it formatted")
    ap.add_argument("file", nargs="?", help="JSON file to read (default: standard input)")
    layout = ap.add_mutually_exclusive_group()
    layout.add_argument("--indent", type=int, default=INDENT_DEFAULT,
                        help=f"spaces per nesting level (default: {INDENT_DEFAULT})")
    layout.add_argument("--compact", action="store_true", help="print without any whitespace")
    ap.add_argument("--max-depth", type=int, default=DEPTH_LIMIT_DEFAULT,
                    help=f"maximum nesting depth, at most {DEPTH_LIMIT_MAX} (default: {DEPTH_LIMIT_DEFAULT})")
    ap.add_argument("--debug", action="store_true", help="log parser activity to stderr")
    return ap


def _cli(argv: List[str]) -> int:
    """
    Command-line interface. Returns the process exit code.
    """
    ap = _build_arg_parser()
    args = ap.parse_args(argv)

    if args.indent < 0:
        ap.error("--indent must be non-negative")
    if not 0 <= args.max_depth <= DEPTH_LIMIT_MAX:
        ap.error(f"--max-depth must be between 0 and {DEPTH_LIMIT_MAX}")

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        raw = _read_input(args.file)
    except OSError as exc:
        sys.stderr.write(f"ERROR: cannot read {args.file}: {exc.strerror or exc}\n")
        return 1

    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        return _fail(f"input is not valid UTF-8 at byte {exc.start}")

    try:
        tree = parse(text, max_depth=args.max_depth)
    except ParseError as exc:
        return _fail(str(exc))

    mode = COMPACT if args.compact else Pretty(args.indent)
    logger.debug("rendering %s in %s mode", type(tree).__name__, type(mode).__name__)
    sys.stdout.buffer.write((render(tree, mode) + "\n").encode("utf-8"))
    sys.stdout.flush()
    return 0


def main() -> None:
    sys.exit(_cli(sys.argv[1:]))


if __name__ == "__main__":
    main()
