"""
Command-line front end: render MathML from a file or stdin.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from rich.console import Console
from rich.logging import RichHandler

from .converter import mathml_to_ascii, replace_math
from .demo import render_demo
from .errors import MathMLError

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_CONVERSION_ERROR = 1


def setup_logging(level: str = "WARNING"):
    """Send the package's log records to stderr through a rich handler."""
    rich_handler = RichHandler(
        console=Console(stderr=True),
        show_time=False,
        show_path=False,
        rich_tracebacks=True,
    )
    rich_handler.setFormatter(logging.Formatter(fmt="%(message)s", datefmt="[%X]"))

    package_logger = logging.getLogger(__package__)
    package_logger.setLevel(getattr(logging, level.upper(), logging.WARNING))
    package_logger.handlers.clear()
    package_logger.addHandler(rich_handler)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mathml-to-ascii",
        description="Render MathML embedded in HTML or text as terminal-friendly text.",
    )
    parser.add_argument("input", nargs="?", default="-",
                        help="file to read, or '-' for stdin (default)")
    parser.add_argument("--ascii", action="store_true",
                        help="do not use Unicode subscript/superscript characters")
    parser.add_argument("--all", action="store_true",
                        help="render every math element in place instead of only the first")
    parser.add_argument("--placeholder", metavar="TEXT",
                        help="print TEXT instead of failing when a formula cannot be converted")
    parser.add_argument("--demo", action="store_true",
                        help="print the built-in example gallery and exit")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="enable debug logging")
    return parser


def read_input(parser: argparse.ArgumentParser, source: str) -> str:
    if source == "-":
        return sys.stdin.read()
    try:
        return Path(source).read_text(encoding="utf-8")
    except OSError as exc:
        parser.error(f"cannot read {source}: {exc.strerror or exc}")


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging("DEBUG" if args.verbose else "WARNING")
    use_unicode = not args.ascii

    if args.demo:
        print(render_demo(use_unicode))
        return EXIT_OK

    text = read_input(parser, args.input)

    try:
        if args.all:
            output = replace_math(text, use_unicode, placeholder=args.placeholder)
        else:
            output = mathml_to_ascii(text, use_unicode)
    except MathMLError as exc:
        if args.placeholder is None:
            logger.error("%s", exc)
            return EXIT_CONVERSION_ERROR
        logger.debug("Conversion failed, printing placeholder: %s", exc)
        output = args.placeholder

    print(output)
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
