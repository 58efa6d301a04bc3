#!/usr/bin/env python3
"""Entry script for lsmode: prints ``ls -l`` style modes for paths, and
converts between mode integers and mode strings.

    lsmode /tmp /etc/passwd
    lsmode --encode 40755 0x8f53
    lsmode --decode -- -rw-r--r-- drwxrwxrwt
"""

import argparse
import logging
import os
import sys
from typing import Callable, Final, List, Optional

from color_logger import ColourFormatter, make_color_stream_handler
from file_attr import FileAttr
from posix_mode import decode, encode, parse_mode_int

ROOT_LOGGER: Final = logging.getLogger()
LOGGER: Final = logging.getLogger(__name__)


def make_parser():
    """Makes Parser ready to parse args passed to script."""

    parser = argparse.ArgumentParser(
        prog="lsmode",
        description="Shows file modes the way `ls -l` does, and converts "
                    "between mode integers and mode strings.",
        epilog="Mode strings start with `-` for regular files; put them after `--`.",
    )
    action = parser.add_mutually_exclusive_group()
    action.add_argument(
        "--encode", "-e", action="store_true",
        help="Treat each ARG as a mode integer (octal, or with a 0x/0o/0b prefix) "
             "and print its mode string."
    )
    action.add_argument(
        "--decode", "-d", action="store_true",
        help="Treat each ARG as a mode string, e.g. `drwxr-xr-x`, and print its "
             "integer value in octal and hex."
    )
    parser.add_argument(
        "args", nargs="+", metavar="ARG",
        help="Paths to show (the default).  Symbolic links are not followed."
    )
    parser.add_argument(
        "--stat", action="store_true",
        help="Use `lstat` rather than deriving the mode from permissions and file type; "
             "keeps special bits and device types."
    )
    parser.add_argument("--long", "-l", action="store_true", help="Print all attributes per path.")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enables DEBUG level tracing")
    parser.add_argument("--quiet", "-q", action="store_true", help="Drops to WARNING level tracing")

    return parser


def setup_loggers():
    """Setup loggers."""
    for h in list(ROOT_LOGGER.handlers):
        if isinstance(h.formatter, ColourFormatter):
            ROOT_LOGGER.removeHandler(h)
    ROOT_LOGGER.addHandler(make_color_stream_handler(stream=sys.stderr, level=logging.DEBUG))


def setup_log_levels(args: argparse.Namespace):
    """Setup logging levels per arguments."""
    log_level: Final = (
        logging.DEBUG if args.verbose
        else logging.WARNING if args.quiet
        else logging.INFO
    )
    ROOT_LOGGER.setLevel(log_level)


def show_path(path: str, use_stat: bool = False, long: bool = False) -> None:
    if use_stat:
        attr = FileAttr.from_stat_result(os.lstat(path))
    else:
        attr = FileAttr.from_filesystem(path)
    if long:
        print(f"{path}:\n{attr}")
    else:
        print(f"{encode(int(attr['st_mode']))} {path}")


def show_encoded(arg: str) -> None:
    mode = parse_mode_int(arg)
    print(f"{encode(mode)} {oct(mode)}")


def show_decoded(arg: str) -> None:
    mode = decode(arg)
    print(f"{arg} {oct(mode)} {hex(mode)}")


def run_each(items: List[str], action: Callable[[str], None]) -> int:
    """Runs ``action`` on each item; failures are logged and don't stop the rest."""
    status = 0
    for item in items:
        try:
            action(item)
        except (ValueError, OSError) as e:
            LOGGER.error("%s: %s", item, e)
            status = 1
    return status


def main(argv: Optional[List[str]] = None) -> int:
    """Main."""
    setup_loggers()
    parser = make_parser()
    args = parser.parse_args(argv)
    setup_log_levels(args)
    LOGGER.debug("args: %s", args)

    if args.encode:
        return run_each(args.args, show_encoded)
    if args.decode:
        return run_each(args.args, show_decoded)
    return run_each(args.args, lambda path: show_path(path, args.stat, args.long))


if __name__ == "__main__":
    sys.exit(main())
