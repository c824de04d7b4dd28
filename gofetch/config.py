"""Command-line flag parsing and validation."""

from __future__ import annotations

import argparse
import sys
from dataclasses import dataclass, field
from typing import Sequence

from gofetch.utils import display_help

_STRING_FLAGS = {
    "O": ("-O",),
    "P": ("-P",),
    "i": ("-i",),
    "rate-limit": ("--rate-limit", "-rate-limit"),
    "R": ("-R",),
    "reject": ("--reject", "-reject"),
    "X": ("-X",),
    "exclude": ("--exclude", "-exclude"),
}

_CONFLICTS = (
    ("i", "O"), ("i", "P"), ("i", "B"), ("i", "rate-limit"),
    ("R", "reject"), ("X", "exclude"), ("mirror", "O"),
    ("mirror", "i"), ("mirror", "P"), ("mirror", "B"),
    ("mirror", "rate-limit"),
)


class ConfigError(ValueError):
    """Raised when the given flags cannot be used together."""


@dataclass
class ParsedArgs:
    """Result of parsing the command line."""

    flags: dict[str, str] = field(default_factory=dict)
    flag_provided: bool = False
    start_web: bool = False
    url: str = ""


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="gofetch", add_help=False, allow_abbrev=False)
    for key, names in _STRING_FLAGS.items():
        parser.add_argument(*names, dest=key, default="")
    parser.add_argument("-B", dest="B", action="store_true")
    parser.add_argument("--mirror", "-mirror", dest="mirror", action="store_true")
    parser.add_argument("--help", "-help", "-h", dest="help", action="store_true")
    parser.add_argument("--web", "-web", dest="web", action="store_true")
    parser.add_argument(
        "--convert-links", "-convert-links", dest="convert_links", action="store_true"
    )
    parser.add_argument("args", nargs="*")
    return parser


def parse_flags(argv: Sequence[str] | None = None) -> ParsedArgs:
    """Parse ``argv`` into the flags that were set.

    Prints help and exits when help is asked for; raises ConfigError for
    flags that cannot be combined.
    """
    if argv is None:
        argv = sys.argv[1:]
    namespace = _build_parser().parse_args(list(argv))

    if namespace.help:
        display_help()
        raise SystemExit(0)

    flags: dict[str, str] = {
        key: getattr(namespace, key)
        for key in _STRING_FLAGS
        if getattr(namespace, key)
    }
    if namespace.B:
        flags["B"] = "wget-log"
    if namespace.mirror:
        flags["mirror"] = "mirror"
    if namespace.convert_links:
        flags["convertLinks"] = "true"

    for first, second in _CONFLICTS:
        if flags.get(first) and flags.get(second):
            raise ConfigError(f"cannot specify both -{first} and -{second}")

    if (
        (flags.get("R") or flags.get("reject"))
        and (flags.get("X") or flags.get("exclude"))
        and not flags.get("mirror")
    ):
        raise ConfigError("cannot use -reject or -exclude without -mirror")

    url = namespace.args[0] if namespace.args else ""
    return ParsedArgs(
        flags=flags,
        flag_provided=bool(flags),
        start_web=namespace.web,
        url=url,
    )