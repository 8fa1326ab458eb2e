# Copyright (c) 2026 Pyry Haulos
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Command line interface.

Commands:

- ``mailto body [FILE]``: print the flattened body for free-text input
- ``mailto link --to ADDRS ...``: print a mailto URI
- ``mailto render MESSAGE.yaml``: print the trigger anchor for a message
"""

import argparse
import logging
import sys
from collections.abc import Sequence
from pathlib import Path

from mailto.body import serialize
from mailto.composer import compose_body, parse_address_list
from mailto.config import ConfigError, MessageConfig
from mailto.link import MailHeaders, build_link
from mailto.logging import AddressFilter, configure_logging


logger = logging.getLogger(__name__)


def _read_text(path: str | None) -> str:
    """Read a file, or stdin when the path is None or ``-``."""
    if path is None or path == "-":
        return sys.stdin.read()
    return Path(path).read_text()


def _cmd_body(args: argparse.Namespace) -> int:
    print(serialize(compose_body(_read_text(args.file))))
    return 0


def _cmd_link(args: argparse.Namespace) -> int:
    to = parse_address_list(args.to)
    if not to:
        logger.error("At least one recipient is required")
        return 1

    body = ""
    if args.body_file:
        body = serialize(compose_body(_read_text(args.body_file)))

    headers = MailHeaders(
        subject=args.subject,
        cc=tuple(parse_address_list(args.cc)),
        bcc=tuple(parse_address_list(args.bcc)),
        body=body or None,
    )
    logger.debug("Building link for %d recipient(s)", len(to))
    print(build_link(to, headers))
    return 0


def _cmd_render(args: argparse.Namespace) -> int:
    defaults = Path(args.defaults) if args.defaults else None
    message = MessageConfig.from_yaml(Path(args.message), defaults)

    obfuscate = True if args.obfuscate else None
    control = message.to_control(obfuscate=obfuscate)
    if control.obfuscate:
        for address in (*message.to, *message.cc, *message.bcc):
            AddressFilter.register_address(address)
    logger.debug("Rendering %s as %s", args.message, control.link())

    if args.link_only:
        print(control.link())
        return 0

    bound = control.render()
    if bound is None:
        return 1
    print(bound.to_html())
    return 0


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mailto",
        description="Build mailto links from structured message bodies",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    body = subparsers.add_parser(
        "body", help="Flatten free-text body input to plain text"
    )
    body.add_argument("file", nargs="?", help="Input file (default: stdin)")
    body.set_defaults(func=_cmd_body)

    link = subparsers.add_parser("link", help="Print a mailto URI")
    link.add_argument(
        "--to", required=True, help="Comma-separated recipient addresses"
    )
    link.add_argument("--subject", help="Subject line")
    link.add_argument("--cc", help="Comma-separated addresses to copy")
    link.add_argument("--bcc", help="Comma-separated addresses to blind copy")
    link.add_argument(
        "--body-file", help="Free-text body file ('-' for stdin)"
    )
    link.set_defaults(func=_cmd_link)

    render = subparsers.add_parser(
        "render", help="Render the trigger anchor for a message file"
    )
    render.add_argument("message", help="Message definition (YAML)")
    render.add_argument(
        "--obfuscate",
        action="store_true",
        help="Keep the mailto URI out of the rendered anchor",
    )
    render.add_argument(
        "--defaults", help="Defaults file (default: XDG config location)"
    )
    render.add_argument(
        "--link-only",
        action="store_true",
        help="Print the mailto URI instead of the anchor",
    )
    render.set_defaults(func=_cmd_render)

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point.

    Args:
        argv: Arguments without the program name.  Defaults to sys.argv.

    Returns:
        Exit code.
    """
    args = _build_parser().parse_args(argv)

    configure_logging(level=logging.DEBUG if args.debug else logging.INFO)

    try:
        return args.func(args)
    except (ConfigError, OSError) as e:
        logger.error("%s", e)
        return 1
    except Exception as e:
        logger.exception("Unexpected error: %s", e)
        return 1


def cli() -> None:
    """Console script entry point."""
    sys.exit(main())
