"""Shared utility functions for CLI commands."""

import json
import sys
import textwrap
import threading
import time
from collections.abc import Mapping, Sequence
from datetime import datetime
from typing import Any

import click

WRAP_WIDTH = 82


def format_timestamp(ts: str, short: bool = False) -> str:
    """Format ISO timestamp to readable local time.

    Args:
        ts: ISO 8601 timestamp string.
        short: If True, omit seconds (for list views).

    Returns:
        Formatted local time string.
    """
    if not ts:
        return ""
    try:
        utc = datetime.fromisoformat(ts.replace("Z", "+00:00"))
        local = utc.astimezone()
        if short:
            return local.strftime("%b %d %H:%M")
        return local.strftime("%Y-%m-%d %H:%M:%S")
    except ValueError:
        return ts[:16]


def wrap_value(value: str, width: int = WRAP_WIDTH) -> str:
    """Hard-wrap a value for display, breaking long words if needed."""
    lines = []
    for line in value.splitlines() or [""]:
        lines.extend(
            textwrap.wrap(line, width=width, break_long_words=True) or [""]
        )
    return "\n".join(lines)


def echo_properties(info: Mapping[str, str], as_json: bool = False) -> None:
    """Print a label/value mapping as aligned rows, or as a JSON object.

    Values are word-wrapped unless the output is machine readable.
    """
    if as_json:
        click.echo(json.dumps(dict(info), indent=2))
        return

    width = max((len(label) for label in info), default=0) + 2
    for label, value in info.items():
        wrapped = wrap_value(value).split("\n")
        click.echo(f"{label + ':':<{width}}{wrapped[0]}")
        for line in wrapped[1:]:
            click.echo(f"{'':<{width}}{line}")


def echo_table(headers: Sequence[str], rows: Sequence[Sequence[Any]]) -> None:
    """Print rows under a header line, columns sized to fit."""
    widths = [len(h) for h in headers]
    for row in rows:
        for i, cell in enumerate(row):
            widths[i] = max(widths[i], len(str(cell)))

    click.echo("  ".join(h.upper().ljust(w) for h, w in zip(headers, widths)).rstrip())
    click.echo("-" * (sum(widths) + 2 * (len(widths) - 1)))
    for row in rows:
        click.echo("  ".join(str(c).ljust(w) for c, w in zip(row, widths)).rstrip())


class Spinner:
    """Animated terminal spinner for long-running operations.

    Displays a Braille-character spinner on stderr with a status message.

    Args:
        indent: Number of leading spaces before the spinner character.
    """

    _FRAMES = "⠋⠙⠹⠸⠼⠴⠦⠧⠇⠏"
    _INTERVAL = 0.08  # seconds between frames

    def __init__(self, indent: int = 0):
        self._text = ""
        self._running = False
        self._thread: threading.Thread | None = None
        self._lock = threading.Lock()
        self._prefix = " " * indent
        self._enabled = sys.stderr.isatty()

    def start(self, text: str = "") -> None:
        """Start the spinner with the given status text."""
        with self._lock:
            self._text = text
            if self._running or not self._enabled:
                return
            self._running = True
        self._thread = threading.Thread(target=self._animate, daemon=True)
        self._thread.start()

    def _stop_thread(self) -> None:
        with self._lock:
            if not self._running:
                return
            self._running = False
        if self._thread:
            self._thread.join(timeout=0.2)
            self._thread = None

    def done(self, symbol: str = "✓", suffix: str = "") -> None:
        """Stop the spinner and persist the line with a symbol."""
        self._stop_thread()
        text = f"{self._prefix}{symbol} {self._text}"
        if suffix:
            text += f" {suffix}"
        if self._enabled:
            text = "\r\033[K" + text
        sys.stderr.write(text + "\n")
        sys.stderr.flush()

    def fail(self, suffix: str = "") -> None:
        """Stop the spinner and persist the line with a failure symbol."""
        self.done(symbol="✗", suffix=suffix)

    def _animate(self) -> None:
        idx = 0
        while True:
            with self._lock:
                if not self._running:
                    break
                text = self._text
            frame = self._FRAMES[idx % len(self._FRAMES)]
            sys.stderr.write(f"\r\033[K{self._prefix}{frame} {text}")
            sys.stderr.flush()
            idx += 1
            time.sleep(self._INTERVAL)
