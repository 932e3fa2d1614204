"""Gitignore-style path matching."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Iterable

_DEFAULT_IGNORES = (
    ".DS_Store",
    "Thumbs.db",
    "desktop.ini",
    ".git",
    ".svn",
    ".hg",
    ".idea",
    ".vscode",
    "node_modules",
    "__pycache__",
    "*.pyc",
    "*.pyo",
    "*.swp",
    "*.swo",
    "*~",
    "#*#",
    ".#*",
)


class _BadPattern(ValueError):
    pass


def _escaped(pattern: str, i: int) -> tuple[str, int]:
    """Read one possibly escaped character of a class at ``i``."""
    if i >= len(pattern) or pattern[i] in "-]":
        raise _BadPattern(pattern)
    if pattern[i] == "\\":
        i += 1
        if i >= len(pattern):
            raise _BadPattern(pattern)
    return pattern[i], i + 1


@lru_cache(maxsize=512)
def _compile(pattern: str) -> re.Pattern[str]:
    out: list[str] = []
    i = 0
    n = len(pattern)
    while i < n:
        ch = pattern[i]
        if ch == "*":
            out.append("[^/]*")
            i += 1
        elif ch == "?":
            out.append("[^/]")
            i += 1
        elif ch == "\\":
            if i + 1 >= n:
                raise _BadPattern(pattern)
            out.append(re.escape(pattern[i + 1]))
            i += 2
        elif ch == "[":
            i += 1
            negated = i < n and pattern[i] == "^"
            if negated:
                i += 1
            ranges: list[str] = []
            count = 0
            while True:
                if i < n and pattern[i] == "]" and count > 0:
                    i += 1
                    break
                lo, i = _escaped(pattern, i)
                hi = lo
                if i < n and pattern[i] == "-":
                    hi, i = _escaped(pattern, i + 1)
                count += 1
                if lo <= hi:
                    ranges.append(f"{re.escape(lo)}-{re.escape(hi)}")
            if ranges:
                out.append(("[^" if negated else "[") + "".join(ranges) + "]")
            else:
                out.append("." if negated else "(?!)")
        else:
            out.append(re.escape(ch))
            i += 1
    return re.compile("".join(out), re.DOTALL)


def _glob_match(pattern: str, name: str) -> bool:
    """Shell-style match where ``*`` and ``?`` never cross a ``/``; bad patterns match nothing."""
    try:
        return _compile(pattern).fullmatch(name) is not None
    except _BadPattern:
        return False


def _base(path: str) -> str:
    if path == "":
        return "."
    stripped = path.rstrip("/")
    if stripped == "":
        return "/"
    return stripped.rsplit("/", 1)[-1]


def _to_slash(path: str) -> str:
    return path.replace(os.sep, "/") if os.sep != "/" else path


@dataclass(frozen=True)
class Pattern:
    """One ignore rule."""

    pattern: str
    is_negation: bool = False  # written with a leading "!"
    is_dir: bool = False  # written with a trailing "/"

    def __str__(self) -> str:
        text = self.pattern
        if self.is_negation:
            text = "!" + text
        if self.is_dir:
            text += "/"
        return text


class IgnoreMatcher:
    """Decides whether paths are ignored by a list of gitignore-style rules."""

    def __init__(self, patterns: Iterable[str] = ()) -> None:
        self._patterns: list[Pattern] = []
        self.add_patterns(patterns)

    def load_from_file(self, path: str | os.PathLike) -> None:
        """Add rules from a file; a missing file is not an error."""
        try:
            with open(path, encoding="utf-8") as fh:
                lines = [line.strip() for line in fh]
        except FileNotFoundError:
            return
        self.add_patterns(line for line in lines if line and not line.startswith("#"))

    def add_patterns(self, patterns: Iterable[str]) -> None:
        for pattern in patterns:
            self.add_pattern(pattern)

    def add_pattern(self, pattern: str) -> None:
        """Add one rule; blank lines and comments are skipped."""
        pattern = pattern.strip()
        if not pattern or pattern.startswith("#"):
            return
        negation = pattern.startswith("!")
        if negation:
            pattern = pattern[1:]
        is_dir = pattern.endswith("/")
        if is_dir:
            pattern = pattern[:-1]
        self._patterns.append(Pattern(pattern, negation, is_dir))

    def should_ignore(self, path: str, is_dir: bool = False) -> bool:
        """True when the path is ignored by default or by the last matching rule."""
        path = _to_slash(str(path))
        if self._is_default_ignored(_base(path)):
            return True
        ignored = False
        for rule in self._patterns:
            if rule.is_dir and not is_dir:
                continue
            if self._matches(path, rule.pattern):
                ignored = not rule.is_negation
        return ignored

    def patterns(self) -> list[str]:
        """The rules in their written form."""
        return [str(rule) for rule in self._patterns]

    @staticmethod
    def _matches(path: str, pattern: str) -> bool:
        pattern = _to_slash(pattern)
        base = _base(path)
        if ("*" in pattern or "?" in pattern) and (
            _glob_match(pattern, base) or _glob_match(pattern, path)
        ):
            return True
        if pattern in path or base == pattern:
            return True
        return any(part == pattern or _glob_match(pattern, part) for part in path.split("/"))

    @staticmethod
    def _is_default_ignored(name: str) -> bool:
        if any(_glob_match(pattern, name) for pattern in _DEFAULT_IGNORES):
            return True
        return name.startswith(".") and name.endswith(".tmp")