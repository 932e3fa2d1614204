"""Synchronisation conflicts, their resolutions and resolution policies."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any

from pulsepoint.models.file import File

_HISTORY_LIMIT = 50
_AUTO_RESOLVE_GAP = timedelta(hours=24)


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _rfc3339_now() -> str:
    text = datetime.now().astimezone().isoformat(timespec="seconds")
    if text.endswith("+00:00"):
        text = text[:-6] + "Z"
    return text


def generate_conflict_id(path: str) -> str:
    """Unique identifier for a conflict on ``path``."""
    return f"conflict_{path}_{time.time_ns()}"


class ConflictType(str, Enum):
    """Kind of conflict between local and remote copies."""

    BOTH_MODIFIED = "both_modified"
    DELETE_MODIFY = "delete_modify"
    NAMING = "naming"
    PERMISSION = "permission"
    TYPE = "type"
    SIZE = "size"
    ENCODING = "encoding"
    VERSION = "version"

    def __str__(self) -> str:
        return self.value


class ConflictSeverity(str, Enum):
    """How serious a conflict is."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    def __str__(self) -> str:
        return self.value


class ResolutionStrategy(str, Enum):
    """How a conflict is to be resolved."""

    KEEP_LOCAL = "keep_local"
    KEEP_REMOTE = "keep_remote"
    KEEP_BOTH = "keep_both"
    KEEP_NEWER = "keep_newer"
    KEEP_LARGER = "keep_larger"
    MERGE = "merge"
    RENAME = "rename"
    SKIP = "skip"
    INTERACTIVE = "interactive"
    CUSTOM = "custom"

    def __str__(self) -> str:
        return self.value


class ResolutionStatus(str, Enum):
    """Progress of a conflict's resolution."""

    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    RESOLVED = "resolved"
    FAILED = "failed"
    DEFERRED = "deferred"

    def __str__(self) -> str:
        return self.value


@dataclass
class ConflictResolution:
    """How a conflict was, or should be, resolved."""

    strategy: ResolutionStrategy
    description: str = ""

    winner: str = ""  # "local", "remote" or "merged"
    resolved_path: str = ""
    backup_path: str = ""
    merged_path: str = ""

    resolved_at: datetime = field(default_factory=_now)
    resolved_by: str = ""  # user, auto, policy
    manual: bool = False

    merge_base: str = ""
    merge_conflicts: list[str] = field(default_factory=list)

    actions: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.strategy = ResolutionStrategy(self.strategy)


@dataclass
class Conflict:
    """A synchronisation conflict between a local and a remote file."""

    path: str
    type: ConflictType
    local_file: File | None = None
    remote_file: File | None = None
    id: str = ""

    description: str = ""
    severity: ConflictSeverity | None = None

    base_file: File | None = None

    detected_at: datetime = field(default_factory=_now)
    resolved_at: datetime | None = None
    last_attempt: datetime | None = None

    resolution: ConflictResolution | None = None
    resolution_status: ResolutionStatus = ResolutionStatus.PENDING
    auto_resolvable: bool = False
    user_required: bool = False

    attempt_count: int = 0
    max_attempts: int = 3
    history: list[str] = field(default_factory=list)

    metadata: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.type = ConflictType(self.type)
        self.resolution_status = ResolutionStatus(self.resolution_status)
        if self.severity is not None:
            self.severity = ConflictSeverity(self.severity)
        if not self.id:
            self.id = generate_conflict_id(self.path)

    def can_auto_resolve(self) -> bool:
        """True when the conflict may be resolved without the user."""
        if self.user_required or self.resolution_status is ResolutionStatus.RESOLVED:
            return False
        if self.severity is ConflictSeverity.LOW:
            return True
        if self.type is ConflictType.NAMING:
            return True
        if (
            self.type is ConflictType.BOTH_MODIFIED
            and self.local_file is not None
            and self.remote_file is not None
        ):
            gap = self.local_file.modified_time - self.remote_file.modified_time
            if abs(gap) > _AUTO_RESOLVE_GAP:
                return True
        return self.auto_resolvable

    def set_resolution(self, resolution: ConflictResolution) -> None:
        """Record the resolution and mark the conflict resolved."""
        self.resolution = resolution
        self.resolved_at = resolution.resolved_at
        self.resolution_status = ResolutionStatus.RESOLVED

    def mark_attempted(self) -> None:
        """Count a resolution attempt; too many attempts require the user."""
        self.attempt_count += 1
        self.last_attempt = _now()
        if self.attempt_count >= self.max_attempts:
            self.user_required = True

    def add_history(self, entry: str) -> None:
        """Append a timestamped history entry, keeping the most recent 50."""
        self.history.append(f"[{_rfc3339_now()}] {entry}")
        if len(self.history) > _HISTORY_LIMIT:
            del self.history[:-_HISTORY_LIMIT]

    def is_resolved(self) -> bool:
        return self.resolution_status is ResolutionStatus.RESOLVED


def _default_strategies() -> dict[ConflictType, ResolutionStrategy]:
    return {
        ConflictType.BOTH_MODIFIED: ResolutionStrategy.KEEP_NEWER,
        ConflictType.DELETE_MODIFY: ResolutionStrategy.KEEP_LOCAL,
        ConflictType.NAMING: ResolutionStrategy.RENAME,
        ConflictType.PERMISSION: ResolutionStrategy.KEEP_LOCAL,
        ConflictType.TYPE: ResolutionStrategy.SKIP,
        ConflictType.SIZE: ResolutionStrategy.SKIP,
        ConflictType.ENCODING: ResolutionStrategy.KEEP_LOCAL,
        ConflictType.VERSION: ResolutionStrategy.KEEP_NEWER,
    }


@dataclass
class ConflictPolicy:
    """Rules for resolving conflicts automatically."""

    default_strategies: dict[ConflictType, ResolutionStrategy] = field(
        default_factory=_default_strategies
    )

    auto_resolve: bool = False
    prefer_local: bool = False
    prefer_remote: bool = False
    prefer_newer: bool = True
    create_backups: bool = True

    max_auto_resolve_size: int = 100 * 1024 * 1024

    text_file_merge: bool = False
    binary_file_strategy: ResolutionStrategy = ResolutionStrategy.KEEP_NEWER

    require_confirmation: bool = True
    interactive_mode: bool = False

    def get_strategy(self, conflict_type: ConflictType) -> ResolutionStrategy:
        """Strategy for a conflict type, falling back on the preferences."""
        strategy = self.default_strategies.get(ConflictType(conflict_type))
        if strategy is not None:
            return strategy
        if self.prefer_local:
            return ResolutionStrategy.KEEP_LOCAL
        if self.prefer_remote:
            return ResolutionStrategy.KEEP_REMOTE
        if self.prefer_newer:
            return ResolutionStrategy.KEEP_NEWER
        return ResolutionStrategy.INTERACTIVE