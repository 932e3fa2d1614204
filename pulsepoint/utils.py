"""File, duration, pattern and status helpers."""

from __future__ import annotations

import hashlib
import os
import re
import shutil
import time
from datetime import datetime, timedelta
from enum import Enum

_CHUNK = 1 << 16


def _hash_file(path: str | os.PathLike, algorithm: str) -> str:
    digest = hashlib.new(algorithm)
    with open(path, "rb") as fh:
        for chunk in iter(lambda: fh.read(_CHUNK), b""):
            digest.update(chunk)
    return digest.hexdigest()


def file_hash(path: str | os.PathLike) -> str:
    """Hex MD5 digest of a file."""
    return _hash_file(path, "md5")


def file_sha256(path: str | os.PathLike) -> str:
    """Hex SHA-256 digest of a file."""
    return _hash_file(path, "sha256")


def format_bytes(size: int) -> str:
    """Format a byte count with binary units, e.g. ``1.5 KB``."""
    unit = 1024
    if size < unit:
        return f"{size} B"
    div, exp = unit, 0
    n = size // unit
    while n >= unit:
        div *= unit
        exp += 1
        n //= unit
    return f"{size / div:.1f} {'KMGTPE'[exp]}B"


def _base(path: str) -> str:
    if path == "":
        return "."
    stripped = path.rstrip("/" + os.sep)
    if stripped == "":
        return os.sep
    return os.path.basename(stripped)


def is_hidden(path: str) -> bool:
    """True when the last path element starts with a dot."""
    return _base(str(path)).startswith(".")


def ensure_dir(path: str | os.PathLike) -> None:
    """Create a directory and its parents if missing."""
    os.makedirs(path, mode=0o755, exist_ok=True)


def path_exists(path: str | os.PathLike) -> bool:
    return os.path.exists(path)


def is_directory(path: str | os.PathLike) -> bool:
    return os.path.isdir(path)


def clean_path(path: str) -> str:
    """Expand a leading ``~/`` and normalise the path."""
    if path.startswith("~/"):
        path = os.path.join(os.path.expanduser("~"), path[2:])
    return os.path.normpath(path)


def relative_path(base: str, target: str) -> str:
    """Path of ``target`` relative to ``base``."""
    if os.path.isabs(base) != os.path.isabs(target):
        raise ValueError(f"can't make {target} relative to {base}")
    return os.path.relpath(target, base)


def copy_file(src: str | os.PathLike, dst: str | os.PathLike) -> None:
    """Copy a file's content and permission bits, creating the destination directory."""
    if not os.path.isfile(src):
        raise FileNotFoundError(src)
    ensure_dir(os.path.dirname(os.path.abspath(dst)))
    shutil.copyfile(src, dst)
    shutil.copymode(src, dst)


def pulse_id() -> str:
    return f"pulse-{time.time_ns()}"


def pulse_session_id() -> str:
    return f"session-{datetime.now():%Y%m%d-%H%M%S}-{time.time_ns() % 1000}"


_UNIT_US = {
    "ns": 0.001,
    "us": 1.0,
    "µs": 1.0,
    "μs": 1.0,
    "ms": 1000.0,
    "s": 1_000_000.0,
    "m": 60_000_000.0,
    "h": 3_600_000_000.0,
}
_COMPONENT = re.compile(r"(\d+\.?\d*|\.\d+)(ns|us|µs|μs|ms|s|m|h)")
_DAYS = re.compile(r"\s*([+-]?\d+)")


def parse_duration(text: str) -> timedelta:
    """Parse ``1h30m``-style durations; a ``d`` suffix means whole days."""
    if text.endswith("d"):
        match = _DAYS.match(text[:-1])
        if not match:
            raise ValueError(f"invalid day count: {text!r}")
        return timedelta(days=int(match.group(1)))

    body = text
    sign = 1
    if body[:1] in "+-" and body:
        sign = -1 if body[0] == "-" else 1
        body = body[1:]
    if body == "0":
        return timedelta(0)
    if not body:
        raise ValueError(f"invalid duration {text!r}")
    total_us = 0.0
    pos = 0
    while pos < len(body):
        match = _COMPONENT.match(body, pos)
        if not match:
            raise ValueError(f"invalid duration {text!r}")
        total_us += float(match.group(1)) * _UNIT_US[match.group(2)]
        pos = match.end()
    return timedelta(microseconds=sign * total_us)


def format_duration(duration: timedelta) -> str:
    """Format a duration as e.g. ``1d 2h 3m 4s``."""
    us = duration // timedelta(microseconds=1)
    sign = -1 if us < 0 else 1
    rest = abs(us)
    day_us, hour_us, min_us, sec_us = 86_400_000_000, 3_600_000_000, 60_000_000, 1_000_000
    days, rest = divmod(rest, day_us)
    hours, rest = divmod(rest, hour_us)
    minutes, rest = divmod(rest, min_us)
    seconds = rest // sec_us
    days, hours, minutes, seconds = (sign * v for v in (days, hours, minutes, seconds))

    parts = []
    if days > 0:
        parts.append(f"{days}d")
    if hours > 0:
        parts.append(f"{hours}h")
    if minutes > 0:
        parts.append(f"{minutes}m")
    if seconds > 0 or not parts:
        parts.append(f"{seconds}s")
    return " ".join(parts)


def match_pattern(pattern: str, path: str) -> bool:
    """Match a path against a simplified gitignore-style pattern."""
    regex = pattern.replace(".", "\\.").replace("*", ".*").replace("?", ".")
    if pattern.endswith("/"):
        regex = "^" + regex + ".*"
    elif "/" in pattern:
        regex = "^" + regex + "$"
    else:
        regex = "(^|/)" + regex + "($|/)"
    return re.search(regex, path) is not None


def should_ignore(path: str, patterns: list[str]) -> bool:
    """True when any valid pattern matches the path."""
    for pattern in patterns:
        try:
            if match_pattern(pattern, path):
                return True
        except re.error:
            continue
    return False


def truncate_string(text: str, max_len: int) -> str:
    """Shorten text to ``max_len`` characters, ending with ``...`` when room allows."""
    if len(text) <= max_len:
        return text
    if max_len <= 3:
        return text[:max_len]
    return text[: max_len - 3] + "..."


class PulseStatus(str, Enum):
    IDLE = "idle"
    ACTIVE = "active"
    SYNCING = "syncing"
    PAUSED = "paused"
    ERROR = "error"
    STOPPED = "stopped"


_ICONS = {
    PulseStatus.IDLE: "⏸️",
    PulseStatus.ACTIVE: "💓",
    PulseStatus.SYNCING: "🔄",
    PulseStatus.PAUSED: "⏸️",
    PulseStatus.ERROR: "❌",
    PulseStatus.STOPPED: "⏹️",
}

_COLORS = {
    PulseStatus.ACTIVE: "\033[32m",
    PulseStatus.SYNCING: "\033[32m",
    PulseStatus.IDLE: "\033[33m",
    PulseStatus.PAUSED: "\033[33m",
    PulseStatus.ERROR: "\033[31m",
    PulseStatus.STOPPED: "\033[90m",
}


def _as_status(status: object) -> PulseStatus | None:
    try:
        return PulseStatus(status)
    except ValueError:
        return None


def status_icon(status: PulseStatus | str) -> str:
    return _ICONS.get(_as_status(status), "❓")


def status_color(status: PulseStatus | str) -> str:
    return _COLORS.get(_as_status(status), "\033[0m")