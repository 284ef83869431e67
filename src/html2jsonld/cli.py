from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

import requests

from .config import (
    DEFAULT_FETCH_SIZE_LIMIT_BYTES,
    DEFAULT_FETCH_TIMEOUT_S,
    DEFAULT_PAGE_TIMEOUT_S,
    ExtractConfig,
)
from .markup import jsonld_from_file, jsonld_from_url


def _add_common_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--out", type=Path, default=None)
    p.add_argument(
        "--no-images",
        action="store_true",
        help="Keep image URLs instead of inlining them as data URLs",
    )
    p.add_argument(
        "--timeout",
        type=int,
        default=DEFAULT_FETCH_TIMEOUT_S,
        help="Per-image fetch timeout in seconds",
    )
    p.add_argument(
        "--max-bytes",
        type=int,
        default=DEFAULT_FETCH_SIZE_LIMIT_BYTES,
        help="Largest image (in bytes) that will be inlined",
    )
    p.add_argument(
        "--page-timeout",
        type=int,
        default=DEFAULT_PAGE_TIMEOUT_S,
        help="HTTP timeout seconds when fetching the page itself",
    )
    p.add_argument("--user-agent", default=None)
    p.add_argument("-v", "--verbose", action="store_true")


def _config_from_args(args: argparse.Namespace) -> ExtractConfig:
    return ExtractConfig(
        download_images=not bool(args.no_images),
        fetch_timeout_s=int(args.timeout),
        fetch_size_limit_bytes=int(args.max_bytes),
        page_timeout_s=int(args.page_timeout),
        user_agent=args.user_agent,
        allow_file_images=bool(getattr(args, "allow_file_images", False)),
    )


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="html2jsonld")
    sub = parser.add_subparsers(dest="cmd", required=True)

    url_p = sub.add_parser("url", help="Fetch a page and print its markup as JSON-LD")
    url_p.add_argument("source")
    _add_common_args(url_p)

    file_p = sub.add_parser(
        "file",
        help="Read a saved HTML file and print its markup as JSON-LD",
    )
    file_p.add_argument("source", type=Path)
    file_p.add_argument(
        "--url",
        dest="base_url",
        required=True,
        help=(
            "Original URL of the file. Used to resolve relative links; "
            "never fetched."
        ),
    )
    file_p.add_argument(
        "--allow-file-images",
        action="store_true",
        help="Inline images the markup references as file:// URLs",
    )
    _add_common_args(file_p)

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if bool(args.verbose) else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        config = _config_from_args(args)
    except ValueError as e:
        print(str(e), file=sys.stderr)
        return 2

    session = requests.Session()
    try:
        if args.cmd == "url":
            result = jsonld_from_url(args.source, config=config, session=session)
        else:
            result = jsonld_from_file(
                args.source, args.base_url, config=config, session=session
            )
    except (OSError, RuntimeError) as e:
        print(str(e), file=sys.stderr)
        return 2

    if not result:
        print("No structured markup found", file=sys.stderr)
        return 1

    if args.out is not None:
        args.out.parent.mkdir(parents=True, exist_ok=True)
        args.out.write_text(result + "\n", encoding="utf-8", newline="\n")
        print(str(args.out))
    else:
        print(result)
    return 0
