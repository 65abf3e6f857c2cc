"""
fltk-check Reporter — Colour-coded result lines on standard output.

Library checks run on worker threads, so every write takes the reporter's
lock; a line is always emitted whole, never interleaved with another.
"""

import threading
from typing import Optional

from rich.console import Console
from rich.text import Text

from fltkcheck.results import CheckStatus

STATUS_STYLES: dict[CheckStatus, str] = {
    CheckStatus.PASS: "green",
    CheckStatus.WARN: "yellow",
    CheckStatus.FAIL: "red",
}


class ConsoleReporter:
    """Thread-safe writer for check results."""

    def __init__(self, console: Optional[Console] = None, color: bool = True):
        self.console = console or Console(
            no_color=None if color else True,
            highlight=False,
            soft_wrap=True,
        )
        self._lock = threading.Lock()

    def _write(self, text: str, style: str = "") -> None:
        with self._lock:
            self.console.print(Text(text, style=style), soft_wrap=True)

    def info(self, text: str) -> None:
        """Uncoloured informational line (banners, notes)."""
        self._write(text)

    def report(self, status: CheckStatus, text: str) -> None:
        self._write(text, STATUS_STYLES[status])

    def good(self, text: str) -> None:
        self.report(CheckStatus.PASS, text)

    def warn(self, text: str) -> None:
        self.report(CheckStatus.WARN, text)

    def bad(self, text: str) -> None:
        self.report(CheckStatus.FAIL, text)
