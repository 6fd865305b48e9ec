"""
Logging utility with timestamps and timing support.
Provides structured, colourful console output for each scoring stage.
Optionally writes a session's logs to a timestamped file when
``WRITE_TO_FILE`` is set.  Debug lines are dropped in production.

All mutable per-session state (timers and the log-file handle)
is stored in ``contextvars.ContextVar`` so that concurrent batch
sessions do not interfere with each other.
"""

from __future__ import annotations

import contextvars
import io
import pathlib
import re
import sys
import time
from collections.abc import Mapping
from datetime import UTC, datetime

import pydantic

from opal import config

# ============================================================================
# Per-session state (isolated via contextvars)
# ============================================================================

_timers_var: contextvars.ContextVar[dict[str, float]] = contextvars.ContextVar("_timers_var")
_log_file_stream_var: contextvars.ContextVar[io.TextIOWrapper | None] = contextvars.ContextVar(
    "_log_file_stream_var", default=None
)

_ANSI_RE = re.compile(r"\033\[[0-9;]*m")


def _state(var: contextvars.ContextVar, factory: type) -> object:
    """Return the per-context value of *var*, creating it on first access."""
    try:
        return var.get()
    except LookupError:
        value = factory()
        var.set(value)
        return value


def _timers() -> dict[str, float]:
    return _state(_timers_var, dict)  # type: ignore[return-value]


def reset_timers() -> None:
    """Drop any timers left over before a new upload session."""
    _timers().clear()


# ============================================================================
# File Logging
# ============================================================================


def start_log_file(session_id: str) -> pathlib.Path | None:
    """Start a log file for one upload session.

    Returns the file path, or ``None`` when file logging is off
    or the file could not be opened.
    """
    if not config.get_settings().write_to_file:
        return None

    end_log_file()

    logs_dir = pathlib.Path.cwd() / ".logs"
    logs_dir.mkdir(parents=True, exist_ok=True)

    safe_id = re.sub(r"[^A-Za-z0-9_-]", "_", session_id)[:50]
    opened_at = datetime.now(UTC)
    path = logs_dir / f"{safe_id}_{opened_at:%Y-%m-%d_%H-%M-%S}.log"

    try:
        stream = open(path, "a", encoding="utf-8")  # noqa: SIM115
    except OSError as exc:
        print(f"{_RED}✗ [Logger] Cannot open session log {path.name}: {exc}{_RESET}", file=sys.stderr)
        return None

    _log_file_stream_var.set(stream)
    rule = "=" * 80
    stream.write(f"\n{rule}\n  Session Log - {session_id}\n  Opened: {opened_at.isoformat()}\n{rule}\n")
    return path


def end_log_file() -> None:
    """Flush and close the current session's log file, if one is open."""
    stream = _log_file_stream_var.get(None)
    if stream is None:
        return
    _log_file_stream_var.set(None)
    try:
        stream.close()
    except OSError as exc:
        print(f"{_YELLOW}⚠ [Logger] Session log not closed cleanly: {exc}{_RESET}", file=sys.stderr)


# ============================================================================
# ANSI Styling
# ============================================================================

_RESET = "\033[0m"
_BOLD = "\033[1m"
_DIM = "\033[2m"
_RED = "\033[31m"
_GREEN = "\033[32m"
_YELLOW = "\033[33m"
_BLUE = "\033[34m"
_MAGENTA = "\033[35m"
_CYAN = "\033[36m"
_GRAY = "\033[90m"

# level -> (colour, symbol)
_LEVELS: dict[str, tuple[str, str]] = {
    "info": (_CYAN, "ℹ"),
    "success": (_GREEN, "✓"),
    "warn": (_YELLOW, "⚠"),
    "error": (_RED, "✗"),
    "debug": (_GRAY, "•"),
    "timing": (_MAGENTA, "⏱"),
}

_MAX_STRING = 200
_MAX_INLINE_ITEMS = 6


def _timestamp() -> str:
    """Current UTC time as HH:MM:SS.mmm."""
    now = datetime.now(UTC)
    return f"{now:%H:%M:%S}.{now.microsecond // 1000:03d}"


def _duration(ms: float) -> str:
    return f"{int(ms)}ms" if ms < 1000 else f"{ms / 1000:.2f}s"


def _render(value: object) -> str:
    """ANSI-coloured, length-bounded rendering of a logged value."""
    if value is None or isinstance(value, bool):
        colour = _DIM if value is None else (_GREEN if value else _RED)
        return f"{colour}{value}{_RESET}"
    if isinstance(value, (int, float)):
        return f"{_YELLOW}{value}{_RESET}"
    if isinstance(value, str):
        shown = value if len(value) <= _MAX_STRING else value[: _MAX_STRING - 3] + "..."
        return f'{_GREEN}"{shown}"{_RESET}'
    if isinstance(value, pydantic.BaseModel):
        return f"{_CYAN}<{type(value).__name__}>{_RESET}"
    if isinstance(value, (list, tuple, set, frozenset)):
        items = sorted(value) if isinstance(value, (set, frozenset)) else list(value)
        if len(items) <= _MAX_INLINE_ITEMS and all(isinstance(v, (str, int, float)) for v in items):
            return f"{_CYAN}[{', '.join(str(v) for v in items)}]{_RESET}"
        return f"{_CYAN}[{len(items)} items]{_RESET}"
    if isinstance(value, Mapping):
        return f"{_CYAN}{{{len(value)} keys}}{_RESET}"
    return str(value)


# ============================================================================
# Logger Class
# ============================================================================


class Logger:
    """Structured logger with context prefix and timing support."""

    def __init__(self, context: str = "Engine") -> None:
        self._context = context

    def _emit(self, line: str) -> None:
        print(line, file=sys.stderr)
        stream = _log_file_stream_var.get(None)
        if stream is not None:
            stream.write(_ANSI_RE.sub("", line) + "\n")
            stream.flush()

    def _log(self, level: str, message: str, data: Mapping[str, object] | None = None) -> None:
        colour, symbol = _LEVELS[level]
        line = f"{_GRAY}[{_timestamp()}]{_RESET} {colour}{symbol}{_RESET} {_BOLD}[{self._context}]{_RESET} {message}"
        if data:
            line += " " + " ".join(f"{_DIM}{key}={_RESET}{_render(value)}" for key, value in data.items())
        self._emit(line)

    def info(self, message: str, data: Mapping[str, object] | None = None) -> None:
        self._log("info", message, data)

    def success(self, message: str, data: Mapping[str, object] | None = None) -> None:
        self._log("success", message, data)

    def warn(self, message: str, data: Mapping[str, object] | None = None) -> None:
        self._log("warn", message, data)

    def error(self, message: str, data: Mapping[str, object] | None = None) -> None:
        self._log("error", message, data)

    def debug(self, message: str, data: Mapping[str, object] | None = None) -> None:
        """Log a debug line; suppressed when running in production."""
        if config.get_settings().is_production:
            return
        self._log("debug", message, data)

    def start_timer(self, label: str) -> None:
        """Start a named timer, scoped to this logger's context."""
        _timers()[f"{self._context}:{label}"] = time.monotonic() * 1000

    def end_timer(self, label: str, message: str | None = None) -> float:
        """Stop a named timer, log the elapsed time and return it in ms."""
        started = _timers().pop(f"{self._context}:{label}", None)
        if started is None:
            self.warn(f'Timer "{label}" was not started')
            return 0.0

        elapsed = time.monotonic() * 1000 - started
        text = message or f"Completed: {label}"
        self._log("timing", f"{text} {_DIM}took{_RESET} {_MAGENTA}{_duration(elapsed)}{_RESET}")
        return elapsed

    def section(self, title: str) -> None:
        """Print a prominent divider, e.g. at server start."""
        rule = f"{_BLUE}{'─' * 60}{_RESET}"
        for line in ("", rule, f"{_BLUE}{_BOLD}  {title}{_RESET}", rule, ""):
            self._emit(line)


def create_logger(context: str) -> Logger:
    """Create a logger for a specific module."""
    return Logger(context)
