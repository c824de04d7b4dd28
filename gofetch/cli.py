"""Command-line entry point."""

from __future__ import annotations

from typing import Sequence

from gofetch.config import ConfigError, parse_flags
from gofetch.downloader import DownloadError, download_file, download_with_flags
from gofetch.mirror import parse_mirror_flags
from gofetch.utils import ensure_scheme, make_a_name
from gofetch.web import start_web_server


def main(argv: Sequence[str] | None = None) -> int:
    """Run the downloader with the given arguments and return the exit status."""
    try:
        parsed = parse_flags(argv)
    except ConfigError as exc:
        print("Error parsing flags:", exc)
        return 1

    if parsed.start_web:
        start_web_server()
        return 0

    if parsed.flag_provided:
        if parsed.flags.get("mirror"):
            parse_mirror_flags(parsed.flags, parsed.url)
            return 0
        try:
            download_with_flags(parsed.url, parsed.flags)
        except DownloadError:
            return 1
        return 0

    url = parsed.url
    try:
        make_a_name(url)
    except ValueError as exc:
        print("Error making a name for the download:", exc)
        return 1

    try:
        download_file(ensure_scheme(url), False)
    except DownloadError as exc:
        print("Error downloading the file:", exc)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())