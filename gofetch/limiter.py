"""Download speed limiting."""

from __future__ import annotations

import re
import threading
import time
from typing import BinaryIO

_INTEGER = re.compile(r"[+-]?\d+")
_MULTIPLIERS = {"k": 1_000, "M": 1_000_000, "G": 1_000_000_000}


def _atoi(text: str) -> int:
    if not _INTEGER.fullmatch(text):
        raise ValueError(f"invalid number: {text!r}")
    return int(text)


def parse_rate_limit(rate_limit: str) -> int:
    """Convert a rate such as ``500``, ``200k`` or ``2M`` to bytes per second.

    Plain numbers are used as given; values with a unit get a 90% factor
    to leave room for protocol overhead.
    """
    try:
        return _atoi(rate_limit)
    except ValueError:
        pass
    if not rate_limit:
        raise ValueError("invalid rate limit format")
    multiplier = _MULTIPLIERS.get(rate_limit[-1])
    if multiplier is None:
        raise ValueError("invalid rate limit format")
    value = _atoi(rate_limit[:-1]) * multiplier * 9
    quotient = abs(value) // 10
    return quotient if value >= 0 else -quotient


class RateLimiter:
    """Token bucket refilled at ``rate`` tokens per second, holding at most ``burst``."""

    def __init__(self, rate: float, burst: int) -> None:
        if rate <= 0:
            raise ValueError("rate must be positive")
        if burst <= 0:
            raise ValueError("burst must be positive")
        self.rate = float(rate)
        self.burst = int(burst)
        self._tokens = float(burst)
        self._last = time.monotonic()
        self._lock = threading.Lock()

    def wait(self, n: int) -> None:
        """Block until ``n`` tokens are available, then consume them."""
        if n <= 0:
            return
        if n > self.burst:
            raise ValueError(f"wait({n}) exceeds limiter's burst {self.burst}")
        with self._lock:
            now = time.monotonic()
            elapsed = max(0.0, now - self._last)
            self._tokens = min(float(self.burst), self._tokens + elapsed * self.rate)
            self._last = now
            self._tokens -= n
            delay = -self._tokens / self.rate if self._tokens < 0 else 0.0
        if delay > 0:
            time.sleep(delay)


class RateLimitedReader:
    """Binary stream wrapper that throttles reads through a RateLimiter."""

    def __init__(self, stream: BinaryIO, limiter: RateLimiter) -> None:
        self.stream = stream
        self.limiter = limiter

    def read(self, size: int = -1) -> bytes:
        data = self.stream.read(size)
        remaining = len(data)
        while remaining > 0:
            chunk = min(remaining, self.limiter.burst)
            self.limiter.wait(chunk)
            remaining -= chunk
        return data

    def close(self) -> None:
        self.stream.close()

    def __enter__(self) -> "RateLimitedReader":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()