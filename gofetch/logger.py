"""Message logging to the console or to a log file."""

from __future__ import annotations

import sys
from pathlib import Path


class Logger:
    """Writes messages to stdout, or keeps them and rewrites a log file."""

    def __init__(self, to_file: bool = False, path: str | Path = "wget-log") -> None:
        self.to_file = to_file
        self.path = Path(path)
        self.entries: list[str] = []

    def log(self, pattern: str, *args: object) -> None:
        """Format ``pattern`` with ``args`` and emit it."""
        message = pattern % args if args else pattern
        if not self.to_file:
            sys.stdout.write(message)
            return
        self.entries.append(message)
        self.path.write_text("".join(self.entries), encoding="utf-8")