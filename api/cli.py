"""
TclScript command line entry point.
"""

import argparse
import logging
import sys
from typing import List, Optional

from compiler import ASTPrinter, Parser, TclError
from .interpreter import TclInterpreter, TracingInterpreter


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="tclscript", description="TclScript interpreter")
    parser.add_argument("program", nargs="?", help="Script file to run ('-' reads stdin)")
    parser.add_argument("-c", "--command", dest="source", help="Run the given script text")
    parser.add_argument("--trace", action="store_true", help="Log every executed command")
    parser.add_argument("--ast", action="store_true", help="Print the syntax tree instead of running")
    parser.add_argument("-v", "--verbose", action="count", default=0,
                        help="More logging (-v info, -vv debug)")
    return parser


def _log_level(verbose: int, trace: bool) -> int:
    if verbose >= 2:
        return logging.DEBUG
    if verbose == 1 or trace:
        return logging.INFO
    return logging.WARNING


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=_log_level(args.verbose, args.trace),
                        format="%(name)s: %(message)s")

    if args.source is not None:
        source, filename = args.source, "<string>"
    elif args.program in (None, "-"):
        source, filename = sys.stdin.read(), "<stdin>"
    else:
        filename = args.program
        try:
            with open(filename, "r", encoding="utf-8") as handle:
                source = handle.read()
        except OSError as exc:
            print(f"Failed to read {filename}: {exc}", file=sys.stderr)
            return 1

    if args.ast:
        try:
            script = Parser.from_source(source, filename).parse()
        except TclError as error:
            print(f"{type(error).__name__}: {error}", file=sys.stderr)
            return 1
        print(ASTPrinter().print(script))
        return 0

    cls = TracingInterpreter if args.trace else TclInterpreter
    interp = cls.from_source(source, filename)
    try:
        result = interp.run()
    except TclError as error:
        sys.stdout.write(interp.output)
        print(f"{type(error).__name__}: {error}", file=sys.stderr)
        return 1

    sys.stdout.write(interp.output)
    if result.text:
        print(result.text)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
