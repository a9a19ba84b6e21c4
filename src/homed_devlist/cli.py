from __future__ import annotations

import argparse
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, NoReturn, TextIO

from homed_devlist import __version__
from homed_devlist.aliases import AliasTable
from homed_devlist.collector import DeviceCatalogCollector
from homed_devlist.errors import FetchError
from homed_devlist.http import HttpClient
from homed_devlist.render import render_markdown
from homed_devlist.sources import LISTING_URL, SourceItem, collect_all, iter_directory, iter_remote

EXIT_OK = 0
EXIT_FILES_FAILED = 1
EXIT_SETUP_FAILED = 2
EXIT_USAGE = 3


@dataclass(frozen=True)
class RunOptions:
    out_path: str | None = None
    directory: str | None = None
    listing_url: str = LISTING_URL
    timeout_s: float = 30.0
    strict: bool = False
    fail_fast: bool = False


class _ArgumentParser(argparse.ArgumentParser):
    def error(self, message: str) -> NoReturn:
        print("Invalid option(s)", file=sys.stderr)
        print(f"{self.prog}: {message}", file=sys.stderr)
        self.print_help()
        raise SystemExit(EXIT_USAGE)


def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog="hddl",
        description="HOMEd supported device list",
        allow_abbrev=False,
    )
    parser.add_argument("--version", action="version", version=f"hddl {__version__}")
    parser.add_argument(
        "-f",
        dest="out",
        nargs="?",
        metavar="FILE",
        help="Write the list to FILE instead of stdout",
    )
    parser.add_argument(
        "-d",
        dest="directory",
        nargs="?",
        metavar="DIR",
        help="Collect device library files from DIR instead of GitHub",
    )
    parser.add_argument("--listing-url", default=LISTING_URL, help="GitHub contents API URL of the device library")
    parser.add_argument("--timeout", type=float, default=30.0, help="HTTP timeout in seconds")
    parser.add_argument("--strict", action="store_true", help="Reject data after the top-level JSON value")
    parser.add_argument("--fail-fast", action="store_true", help="Stop at the first file that fails")
    return parser


_SHORT_VALUE_FLAGS = frozenset("fd")


def expand_short_flags(argv: Iterable[str]) -> list[str]:
    """
    Split clustered short flags so each letter is its own option.

    Value-taking letters consume the following arguments in order, so
    `-fd out.md lib` becomes `-f out.md -d lib`. An unknown letter stays a
    separate option and is rejected by the parser.
    """

    args = list(argv)
    out: list[str] = []
    i = 0
    while i < len(args):
        arg = args[i]
        i += 1
        if len(arg) <= 2 or not arg.startswith("-") or arg.startswith("--") or not arg[1:].isalpha():
            out.append(arg)
            continue
        for letter in arg[1:]:
            out.append(f"-{letter}")
            if letter in _SHORT_VALUE_FLAGS and i < len(args) and not args[i].startswith("-"):
                out.append(args[i])
                i += 1
    return out


def _open_source(options: RunOptions) -> tuple[Iterable[SourceItem] | None, int]:
    if options.directory is not None:
        root = Path(options.directory)
        if not root.is_dir():
            print(f"Directory not found: {root}", file=sys.stderr)
            return None, EXIT_SETUP_FAILED
        return iter_directory(root), EXIT_OK

    client = HttpClient(timeout=options.timeout_s)
    try:
        return iter_remote(client, options.listing_url), EXIT_OK
    except FetchError as exc:
        print(str(exc), file=sys.stderr)
        return None, EXIT_SETUP_FAILED


def _generate(options: RunOptions, items: Iterable[SourceItem], out: TextIO) -> int:
    aliases = AliasTable()
    collector = DeviceCatalogCollector(aliases, strict=options.strict)
    ok = collect_all(items, collector, fail_fast=options.fail_fast)
    render_markdown(collector.catalog, aliases, out)
    if options.out_path is not None:
        sys.stdout.write(
            f"Wrote device list: {options.out_path} "
            f"({collector.collected} file(s) collected, {collector.failed} failed)\n"
        )
    return EXIT_OK if ok else EXIT_FILES_FAILED


def run(options: RunOptions) -> int:
    items, code = _open_source(options)
    if items is None:
        return code

    if options.out_path is None:
        return _generate(options, items, sys.stdout)

    try:
        out = open(options.out_path, "w", encoding="utf-8")
    except OSError as exc:
        print(f"Couldn't create file {options.out_path}: {exc}", file=sys.stderr)
        return EXIT_SETUP_FAILED
    with out:
        return _generate(options, items, out)


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(expand_short_flags(sys.argv[1:] if argv is None else argv))
    options = RunOptions(
        out_path=args.out,
        directory=args.directory,
        listing_url=args.listing_url,
        timeout_s=args.timeout,
        strict=args.strict,
        fail_fast=args.fail_fast,
    )
    return run(options)


if __name__ == "__main__":
    raise SystemExit(main())
