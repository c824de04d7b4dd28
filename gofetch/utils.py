"""Small helpers shared by the command-line tools."""

from __future__ import annotations

from urllib.parse import urlsplit

DEFAULT_FILE_NAME = "index.html"

_USAGE = "Usage: gofetch [options] <URL>"

_OPTIONS: tuple[tuple[str, str], ...] = (
    ("-B", "Run download in background and output to 'wget-log'."),
    ("-O <filename>", "Download as a different filename."),
    ("-P <path>", "Path where the file will be saved."),
    ("--rate-limit <rate>", "Limit the download rate (e.g., 500k, 2M)."),
    ("-i <file>", "Download multiple files listed in a file."),
    ("--mirror", "Download an entire website for offline viewing."),
    ("-R <types>", "Reject files of specified types (e.g., jpg, gif), used with --mirror."),
    ("-X <paths>", "Exclude certain paths from being downloaded, used with --mirror."),
    ("--convert-links", "Convert links for offline viewing, used with --mirror."),
    ("--web", "Start the web server interface."),
)

_EXAMPLES: tuple[str, ...] = (
    "gofetch https://example.com/file.zip",
    "gofetch -O myfile.zip https://example.com/file.zip",
    "gofetch --rate-limit=1M https://example.com/bigfile.zip",
    "gofetch --mirror --convert-links https://example.com",
)

_FOOTER = "Use 'man wget' for more information on wget features."

_FLAG_WIDTH = 19


def _format_help() -> str:
    """Assemble the usage text from the option and example tables."""
    lines = [_USAGE, "Options:"]
    lines.extend(f"  {flag:<{_FLAG_WIDTH}} {text}" for flag, text in _OPTIONS)
    lines.extend(["", "Examples:"])
    lines.extend(f"  {example}" for example in _EXAMPLES)
    lines.extend(["", _FOOTER])
    return "\n".join(lines)


HELP_TEXT = _format_help()


def _base(path: str) -> str:
    """Return the last element of a slash-separated path, ignoring trailing slashes."""
    if not path:
        return "."
    stripped = path.rstrip("/")
    if not stripped:
        return "/"
    return stripped.rsplit("/", 1)[-1]


def make_a_name(url: str) -> str:
    """Derive a local file name from the path of ``url``.

    Falls back to ``index.html`` when the last path element has no extension.
    Raises ValueError when the URL cannot be parsed.
    """
    parsed = urlsplit(url)
    name = _base(parsed.path)
    if not name or name == "." or "." not in name:
        return DEFAULT_FILE_NAME
    return name


def ensure_scheme(url: str) -> str:
    """Prefix ``https://`` when the URL carries no scheme."""
    if "://" not in url:
        return "https://" + url
    return url


def display_help() -> str:
    """Print the usage text and return it."""
    text = _format_help()
    print(text)
    return text