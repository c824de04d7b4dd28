import io
from unittest.mock import patch

import pytest

from gofetch.limiter import RateLimitedReader, RateLimiter, parse_rate_limit


class FakeTime:
    def __init__(self):
        self.now = 1000.0
        self.sleeps = []

    def monotonic(self):
        return self.now

    def sleep(self, seconds):
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture
def fake_time():
    fake = FakeTime()
    with patch("gofetch.limiter.time", fake):
        yield fake


def test_plain_number_used_as_is():
    assert parse_rate_limit("500") == 500


def test_units_scale_consistently():
    assert parse_rate_limit("2M") == parse_rate_limit("2000k")
    assert parse_rate_limit("1G") == parse_rate_limit("1000M")


def test_unit_applies_overhead_factor():
    assert parse_rate_limit("10k") == 9000
    assert parse_rate_limit("10k") < 10_000


@pytest.mark.parametrize("text", ["12x", ""])
def test_invalid_format(text):
    with pytest.raises(ValueError, match="invalid rate limit format"):
        parse_rate_limit(text)


def test_invalid_number_before_unit():
    with pytest.raises(ValueError):
        parse_rate_limit("abck")


def test_burst_passes_without_sleeping(fake_time):
    payload = b"x" * 100
    reader = RateLimitedReader(io.BytesIO(payload), RateLimiter(100, 100))
    assert reader.read(100) == payload
    assert fake_time.sleeps == []


def test_wait_sleeps_when_bucket_empty(fake_time):
    payload = bytes(range(150))
    reader = RateLimitedReader(io.BytesIO(payload), RateLimiter(100, 100))
    assert reader.read(100) == payload[:100]
    assert reader.read(50) == payload[100:]
    assert fake_time.sleeps == [pytest.approx(0.5)]


def test_total_sleep_matches_rate(fake_time):
    payload = bytes(range(250)) + bytes(range(50))
    reader = RateLimitedReader(io.BytesIO(payload), RateLimiter(100, 100))
    chunks = [reader.read(50) for _ in range(6)]
    assert b"".join(chunks) == payload
    assert sum(fake_time.sleeps) == pytest.approx((6 * 50 - 100) / 100)


def test_bucket_refills_over_time(fake_time):
    payload = b"a" * 100 + b"b" * 100
    reader = RateLimitedReader(io.BytesIO(payload), RateLimiter(100, 100))
    assert reader.read(100) == b"a" * 100
    fake_time.now += 10
    assert reader.read(100) == b"b" * 100
    assert fake_time.sleeps == []


def test_wait_above_burst_rejected(fake_time):
    limiter = RateLimiter(100, 10)
    with pytest.raises(ValueError, match="burst"):
        limiter.wait(11)


@pytest.mark.parametrize("rate,burst", [(0, 10), (10, 0)])
def test_invalid_limiter_settings(rate, burst):
    with pytest.raises(ValueError):
        RateLimiter(rate, burst)


def test_reader_returns_all_data(fake_time):
    payload = b"abc" * 100
    reader = RateLimitedReader(io.BytesIO(payload), RateLimiter(100, 64))
    assert reader.read() == payload
    assert reader.read() == b""
    assert sum(fake_time.sleeps) == pytest.approx((len(payload) - 64) / 100)


def test_reader_chunked_reads(fake_time):
    payload = bytes(range(200))
    reader = RateLimitedReader(io.BytesIO(payload), RateLimiter(1000, 64))
    chunks = []
    while chunk := reader.read(30):
        chunks.append(chunk)
    assert b"".join(chunks) == payload


def test_reader_context_closes_stream(fake_time):
    stream = io.BytesIO(b"data")
    with RateLimitedReader(stream, RateLimiter(10, 10)) as reader:
        assert reader.read() == b"data"
    assert stream.closed