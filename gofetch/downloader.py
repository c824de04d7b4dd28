"""Fetching files over HTTP: single downloads, flag-driven downloads and URL lists."""

from __future__ import annotations

import os
import sys
from concurrent.futures import ThreadPoolExecutor
from contextlib import ExitStack
from datetime import datetime
from pathlib import Path
from typing import BinaryIO, Iterable, Iterator, TextIO
from urllib.parse import unquote, urlsplit

import requests
from tqdm import tqdm

from gofetch.limiter import RateLimitedReader, RateLimiter, parse_rate_limit
from gofetch.utils import make_a_name

_CHUNK_SIZE = 32 * 1024
_BURST = 64 * 1024
_MEGABYTE = 1024 * 1024
_LOG_FILE = "wget-log"


class DownloadError(Exception):
    """Raised when a download cannot be completed."""


def _now() -> str:
    return datetime.now().strftime("%Y-%m-%d %H:%M:%S")


def _content_length(resp: requests.Response) -> int:
    try:
        return int(resp.headers.get("Content-Length", -1))
    except ValueError:
        return -1


def _body_chunks(resp: requests.Response, limiter: RateLimiter | None) -> Iterator[bytes]:
    if limiter is None:
        yield from resp.iter_content(_CHUNK_SIZE)
        return
    resp.raw.decode_content = True
    reader = RateLimitedReader(resp.raw, limiter)
    yield from iter(lambda: reader.read(_CHUNK_SIZE), b"")


def _write_body(chunks: Iterable[bytes], destination: BinaryIO, bar: tqdm | None) -> None:
    for chunk in chunks:
        destination.write(chunk)
        if bar is not None:
            bar.update(len(chunk))


def _progress_bar(size: int) -> tqdm:
    return tqdm(
        total=size if size >= 0 else None,
        desc="Downloading",
        unit="B",
        unit_scale=True,
        unit_divisor=1024,
    )


def _mirror_directory(url: str) -> str:
    try:
        parsed = urlsplit(url)
    except ValueError as exc:
        raise DownloadError(f"error parsing URL: {exc}") from exc
    host = parsed.netloc.rpartition("@")[2]
    path = unquote(parsed.path)
    if not path:
        return host + os.sep
    combined = host + path
    return combined[: combined.rfind("/") + 1]


def download_file(url: str, mirror_mode: bool = False) -> Path | None:
    """Download ``url`` into the working directory and return the saved path.

    In mirror mode the host and directories of the URL are recreated locally.
    Returns None when the server does not answer 200 OK.
    """
    print(f"Start at {_now()}")
    try:
        resp = requests.get(url, stream=True)
    except requests.RequestException as exc:
        raise DownloadError(f"sending request failed: {exc}") from exc

    with resp:
        if resp.status_code != 200:
            return None
        print("Sending request, awaiting response... status 200 OK")

        size = _content_length(resp)
        print(f"Content size: {size} [~{size / _MEGABYTE:.2f}MB]")

        directory = ""
        if mirror_mode:
            directory = _mirror_directory(url)
            try:
                os.makedirs(directory, exist_ok=True)
            except OSError as exc:
                raise DownloadError(
                    f"failed to create directory: {directory}, error: {exc}"
                ) from exc

        try:
            name = make_a_name(url)
        except ValueError as exc:
            raise DownloadError(f"error generating file name: {exc}") from exc
        if mirror_mode:
            name = os.path.join(directory, name)

        try:
            handle = open(name, "wb")
        except OSError as exc:
            raise DownloadError(f"error creating file: {exc}") from exc

        with handle:
            print(f"Saving file to: {os.path.abspath(os.path.dirname(name))}")
            print("File name:", name)
            try:
                with _progress_bar(size) as bar:
                    _write_body(_body_chunks(resp, None), handle, bar)
            except (requests.RequestException, OSError) as exc:
                raise DownloadError(f"error writing to file: {exc}") from exc

        print(f"\nDownloaded [{url}]\nFinished at {_now()}")
    return Path(name)


class _StampedLog:
    """Writes lines prefixed with date and time, and raises on fatal messages."""

    def __init__(self, stream: TextIO) -> None:
        self.stream = stream

    def write(self, message: str) -> None:
        stamp = datetime.now().strftime("%Y/%m/%d %H:%M:%S")
        self.stream.write(f"{stamp} {message}\n")
        self.stream.flush()

    def fail(self, message: str, cause: BaseException | None = None) -> None:
        self.write(message)
        raise DownloadError(message) from cause


def expand_path(path: str) -> str:
    """Replace a leading ``~/`` with the user's home directory."""
    if path.startswith("~/"):
        return os.path.join(str(Path.home()), path[2:])
    return path


def download_with_flags(url: str, flags: dict[str, str]) -> Path | list[Path | None]:
    """Download ``url`` honouring the command-line flags.

    ``-i`` hands over to :func:`download_list`; otherwise the saved path is returned.
    """
    if flags.get("i"):
        return download_list(flags["i"])

    log_to_file = bool(flags.get("B"))
    file_name = flags.get("O", "")
    directory = ""
    if flags.get("P"):
        try:
            directory = expand_path(flags["P"])
        except RuntimeError as exc:
            raise DownloadError(f"Error expanding path: {exc}") from exc

    limiter = None
    if flags.get("rate-limit"):
        try:
            rate = parse_rate_limit(flags["rate-limit"])
        except ValueError as exc:
            raise DownloadError(f"Error adjusting rate limit: {exc}") from exc
        if rate > 0:
            limiter = RateLimiter(rate, _BURST)

    with ExitStack() as stack:
        if log_to_file:
            try:
                stream = stack.enter_context(open(_LOG_FILE, "w", encoding="utf-8"))
            except OSError as exc:
                raise DownloadError(f"Error opening log file: {exc}") from exc
        else:
            stream = sys.stdout
        log = _StampedLog(stream)
        log.write(f"start at {_now()}")

        try:
            resp = stack.enter_context(requests.get(url, stream=True))
        except requests.RequestException as exc:
            log.fail(f"Error downloading: {exc}", exc)

        if resp.status_code != 200:
            log.fail(f"Status: {resp.status_code} {resp.reason}")
        log.write("Request successful - status 200 OK")

        size = _content_length(resp)
        log.write(f"Content size: {size} bytes (~{size / _MEGABYTE:.2f} MB)")

        if not file_name:
            try:
                file_name = make_a_name(url)
            except ValueError as exc:
                log.fail(f"Error creating filename: {exc}", exc)

        if directory:
            try:
                os.makedirs(directory, exist_ok=True)
            except OSError as exc:
                log.fail(f"Failed to create directory {directory}: {exc}", exc)
            target = os.path.join(os.path.abspath(directory), file_name)
        else:
            target = os.path.join(os.getcwd(), file_name)

        try:
            handle = stack.enter_context(open(target, "wb"))
        except OSError as exc:
            log.fail(f"Error creating file: {exc}", exc)
        log.write(f"Saving file to: {target}")

        try:
            if log_to_file:
                print("Output will be written to \u2018wget-log\u2019.")
                _write_body(_body_chunks(resp, limiter), handle, None)
            else:
                with _progress_bar(size) as bar:
                    _write_body(_body_chunks(resp, limiter), handle, bar)
        except (requests.RequestException, OSError) as exc:
            log.fail(f"Error writing to file: {exc}", exc)

        log.write(f"Downloaded [{url}] finished at {_now()}")
    return Path(target)


def _fetch_listed(link: str) -> Path | None:
    print(f"Testing link: {link}", file=sys.stderr)
    try:
        return download_file(link, False)
    except DownloadError:
        return None


def download_list(input_file: str | os.PathLike[str]) -> list[Path | None]:
    """Download every URL listed in ``input_file`` concurrently.

    Results follow the order of the file; failed downloads give None.
    """
    try:
        with open(input_file, encoding="utf-8") as handle:
            links = [line.rstrip("\r\n") for line in handle]
    except OSError as exc:
        raise DownloadError(f"Failed to open file: {exc}") from exc

    if not links:
        return []
    with ThreadPoolExecutor(max_workers=len(links)) as pool:
        return list(pool.map(_fetch_listed, links))