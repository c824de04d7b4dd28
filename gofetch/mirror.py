"""Website mirroring: fetch a page, its linked resources, and optionally rewrite links."""

from __future__ import annotations

import os
import posixpath
import re
import sys
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Iterable
from urllib.parse import SplitResult, unquote, urlsplit

from bs4 import BeautifulSoup

from gofetch.downloader import DownloadError, download_file

_CSS_URL = re.compile(r"""url\(['"]?(.*?)['"]?\)""")
_TARGETS = (("a", "href"), ("img", "src"), ("link", "href"), ("script", "src"))


def _clean(path: str) -> str:
    if not path:
        return "."
    cleaned = posixpath.normpath(path)
    if cleaned.startswith("//"):
        cleaned = "/" + cleaned.lstrip("/")
    return cleaned


def _join(*parts: str) -> str:
    """Join slash-separated elements and clean the result; empty when all are empty."""
    joined = "/".join(part for part in parts if part)
    return _clean(joined) if joined else ""


def _fetch(url: str) -> Path | None:
    try:
        return download_file(url, True)
    except DownloadError as exc:
        print(f"Error downloading file: {exc}")
        return None


def _relative(page: Path, target: Path) -> str | None:
    try:
        return os.path.relpath(str(target), os.path.dirname(str(page)) or ".")
    except ValueError:
        return None


class Mirrorer:
    """Mirrors one page and the resources it references."""

    def __init__(
        self,
        exclude_exts: Iterable[str] | None = None,
        exclude_dirs: Iterable[str] | None = None,
        convert_links: bool = False,
    ) -> None:
        self.exclude_exts = list(exclude_exts or [])
        self.exclude_dirs = list(exclude_dirs or [])
        self.convert_links = convert_links
        self.base_url: SplitResult | None = None

    def mirror(self, url: str) -> Path | None:
        """Download ``url``, then fetch and patch the resources it links to."""
        self.base_url = urlsplit(url)
        page = _fetch(url)
        if page is None:
            return None
        self.patch_links(page)
        print()
        return page

    def process_url(self, url: str) -> str:
        """Resolve a relative link against the page being mirrored."""
        if self.base_url is None or not url:
            return url
        try:
            parsed = urlsplit(url)
        except ValueError:
            return url
        if parsed.scheme:
            return url

        base = self.base_url
        host = base.netloc.rpartition("@")[2]
        base_path = unquote(base.path)
        if url.startswith("/") or url.startswith("./"):
            return f"{base.scheme}://{host}{_join(base_path, url)}"
        if base_path == "/":
            return f"{base.scheme}://{host}/{url}"
        return f"{base.scheme}://{host}{base_path}/{url}"

    def link_allowed(self, link: str) -> bool:
        """Tell whether ``link`` passes the extension and directory exclusions."""
        if any(link.endswith("." + ext) for ext in self.exclude_exts):
            return False
        trimmed = link[1:] if link.startswith(".") else link
        return not any(trimmed.startswith(directory) for directory in self.exclude_dirs)

    def _replace_css_url(self, page: Path, match: re.Match[str]) -> str:
        whole = match.group(0)
        link = match.group(1)
        if not self.link_allowed(link):
            return whole
        saved = _fetch(self.process_url(link))
        if saved is None or not self.convert_links:
            return whole
        relative = _relative(page, saved)
        if relative is None:
            return whole
        return whole.replace(link, relative, 1)

    def patch_links(self, path: str | os.PathLike[str]) -> None:
        """Download the resources referenced by the HTML at ``path`` and rewrite it."""
        page = Path(path)
        try:
            soup = BeautifulSoup(page.read_bytes(), "html.parser")
        except OSError:
            return

        jobs = []
        for name, attr in _TARGETS:
            for tag in soup.find_all(name):
                link = tag.get(attr)
                if isinstance(link, str) and self.link_allowed(link):
                    jobs.append((tag, attr, link))

        with ThreadPoolExecutor(max_workers=max(1, len(jobs))) as pool:
            pending = [
                (tag, attr, pool.submit(_fetch, self.process_url(link)))
                for tag, attr, link in jobs
            ]
            for style in soup.find_all("style"):
                css = style.get_text()
                style.string = _CSS_URL.sub(
                    lambda match: self._replace_css_url(page, match), css
                )
            results = [(tag, attr, future.result()) for tag, attr, future in pending]

        if self.convert_links:
            for tag, attr, saved in results:
                if saved is None:
                    continue
                relative = _relative(page, saved)
                tag[attr] = relative if relative is not None else str(saved)

        page.write_text(str(soup), encoding="utf-8")


def parse_mirror_flags(flags: dict[str, str], url: str) -> Mirrorer:
    """Configure a Mirrorer from command-line flags and mirror ``url`` with it."""
    options = dict(flags)
    if options.get("reject"):
        options["R"] = options["reject"]
    if options.get("exclude"):
        options["X"] = options["exclude"]

    mirrorer = Mirrorer(
        exclude_exts=options["R"].split(",") if options.get("R") else None,
        exclude_dirs=options["X"].split(",") if options.get("X") else None,
        convert_links=bool(options.get("convertLinks")),
    )

    if not url:
        print("Missing URL")
        raise SystemExit(1)

    print("Mirroring URL:", url, file=sys.stderr)
    mirrorer.mirror(url)
    return mirrorer