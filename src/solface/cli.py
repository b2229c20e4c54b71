"""
Command-line interface for solface.

Reads a contract ABI (JSON) from a file or stdin and writes a Solidity
interface for it to stdout.

Usage:
  solface --name IERC20 [--annotations] [--license MIT] [--pragma ^0.8.17] [abi.json]
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List, Optional, Union

import structlog

from solface.abi import annotate, decode
from solface.config import SolfaceSettings
from solface.errors import InputError, SolfaceError
from solface.interface import generate_interface
from solface.logs import configure_logging
from solface.version import VERSION

logger = structlog.get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="solface",
        description="Generate a Solidity interface from a contract ABI.",
        epilog=f"solface version v{VERSION}",
    )
    parser.add_argument("--version", action="store_true", help="Print the solface version and exit.")
    parser.add_argument("-n", "--name", default="", help="Name for the Solidity interface to generate.")
    parser.add_argument(
        "--annotations",
        action="store_true",
        help="Annotate the interface with its interface ID and method selectors.",
    )
    parser.add_argument(
        "--license",
        default=None,
        help="SPDX license identifier to write at the top of the output.",
    )
    parser.add_argument(
        "--pragma",
        default=None,
        help="Solidity version constraint to write as the pragma at the top of the output.",
    )
    parser.add_argument("--log-level", default=None, help="Minimum log level written to stderr.")
    parser.add_argument("abi", nargs="?", default=None, help="Path to the ABI file. Reads stdin when omitted.")
    return parser


def read_abi(path: Optional[str]) -> Union[str, bytes]:
    """Reads raw ABI JSON from ``path``, or from stdin when ``path`` is None.

    Raises:
        InputError: If the source cannot be read.
    """
    if path is None:
        try:
            return getattr(sys.stdin, "buffer", sys.stdin).read()
        except OSError as e:
            raise InputError(f"Could not read ABI from stdin: {e}", "<stdin>") from e
    try:
        return Path(path).read_bytes()
    except OSError as e:
        raise InputError(f"Could not read ABI file {path}: {e}", path) from e


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    settings = SolfaceSettings()
    configure_logging(args.log_level or settings.log_level)

    if args.version:
        print(f"v{VERSION}")
        return 0

    if not args.name:
        parser.print_usage(sys.stderr)
        return 1

    license = settings.license if args.license is None else args.license
    pragma = settings.pragma if args.pragma is None else args.pragma
    include_annotations = args.annotations or settings.annotations

    try:
        abi = decode(read_abi(args.abi))
        annotations = annotate(abi)
        interface = generate_interface(
            args.name,
            abi,
            license=license,
            pragma=pragma,
            annotations=annotations,
            include_annotations=include_annotations,
        )
    except SolfaceError as e:
        logger.error("cli.failed", interface=args.name, source=args.abi or "<stdin>", error=str(e))
        return 1

    sys.stdout.write(interface)
    return 0


if __name__ == "__main__":
    sys.exit(main())
