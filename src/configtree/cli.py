"""Command-line entrypoint: inspect config trees and resolve locations."""

from __future__ import annotations

import argparse
import sys
from typing import TYPE_CHECKING

from configtree.bindings import ServiceBindingSource
from configtree.config import Config
from configtree.config_tree import ConfigTreeSource
from configtree.errors import ConfigTreeError
from configtree.loader import Resolvers
from configtree.options import Option, OptionSet

if TYPE_CHECKING:
    from collections.abc import Sequence

    from configtree.types import PropertySource


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser("configtree")
    sub = parser.add_subparsers(dest="cmd", required=True)

    def _add_source_args(p: argparse.ArgumentParser) -> None:
        p.add_argument("root")
        p.add_argument(
            "--bindings", action="store_true", help="treat ROOT as a bindings root"
        )
        p.add_argument("--lowercase", action="store_true", help="lowercase names")

    show = sub.add_parser("list", help="list names and origins (never values)")
    _add_source_args(show)
    get = sub.add_parser("get", help="print a single value")
    _add_source_args(get)
    get.add_argument("name")
    resolve = sub.add_parser("resolve", help="resolve a location expression")
    resolve.add_argument("location")
    return parser


def _open_source(args: argparse.Namespace) -> PropertySource:
    options = {Option.AUTO_TRIM_TRAILING_NEWLINE}
    if args.lowercase:
        options.add(Option.USE_LOWERCASE_NAMES)
    option_set = OptionSet(frozenset(options))
    if args.bindings:
        return ServiceBindingSource("cli", args.root, option_set)
    return ConfigTreeSource("cli", args.root, option_set)


def main(argv: Sequence[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    try:
        if args.cmd == "list":
            source = _open_source(args)
            for name in source.list_names():
                sys.stdout.write(f"{name}: {source.get_origin(name)}\n")
        elif args.cmd == "get":
            source = _open_source(args)
            value = source.get_value(args.name)
            if value is None:
                sys.stderr.write(f"{args.name}: not found\n")
                return 1
            sys.stdout.write(value.as_text() + "\n")
        elif args.cmd == "resolve":
            resolvers = Resolvers.from_config(Config.from_env())
            for resource in resolvers.resolve(args.location):
                state = "present" if resource.exists() else "absent"
                sys.stdout.write(f"{resource} ({state})\n")
    except ConfigTreeError as e:
        msg = f"{e}. {e.hint}" if e.hint else str(e)
        sys.stderr.write(f"error: {msg}\n")
        return 2
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
