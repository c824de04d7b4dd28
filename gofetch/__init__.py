"""A wget-style downloader with rate limiting, URL lists, page mirroring and a Flask web front end."""

__version__ = "0.1.0"