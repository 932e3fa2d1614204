"""Overall synchronisation state and per-file sync state."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pulsepoint.models.file import generate_file_id

_HISTORY_LIMIT = 100


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class SyncState:
    """Progress, counters and recent problems of the synchronisation engine."""

    version: str = "1.0.0"
    schema_version: int = 1

    last_sync_time: datetime | None = None
    last_success_time: datetime | None = None
    next_scheduled_sync: datetime | None = None

    total_files: int = 0
    synced_files: int = 0
    pending_files: int = 0
    failed_files: int = 0
    ignored_files: int = 0
    conflict_files: int = 0

    total_bytes: int = 0
    synced_bytes: int = 0
    pending_bytes: int = 0

    current_operation: str = ""
    operation_progress: float = 0.0  # 0-100
    operation_started: datetime | None = None

    is_running: bool = False
    is_paused: bool = False
    is_initialized: bool = True
    last_error: str = ""
    consecutive_errors: int = 0

    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    config_hash: str = ""
    provider: str = ""
    strategy: str = ""

    metadata: dict[str, Any] = field(default_factory=dict)

    def update_progress(self, progress: float) -> None:
        """Set the operation progress, clamped to 0-100."""
        self.operation_progress = min(max(progress, 0), 100)

    def start_operation(self, operation: str) -> None:
        self.current_operation = operation
        self.operation_started = _now()
        self.operation_progress = 0
        self.is_running = True
        self.is_paused = False

    def end_operation(self, success: bool) -> None:
        """Finish the current operation and record its outcome."""
        now = _now()
        self.current_operation = ""
        self.operation_progress = 100
        self.is_running = False
        if success:
            self.last_success_time = now
            self.consecutive_errors = 0
        else:
            self.consecutive_errors += 1
        self.last_sync_time = now

    def add_error(self, err: str) -> None:
        """Record an error, keeping the most recent 100."""
        self.last_error = err
        self.errors.append(err)
        self.consecutive_errors += 1
        if len(self.errors) > _HISTORY_LIMIT:
            del self.errors[:-_HISTORY_LIMIT]

    def add_warning(self, warning: str) -> None:
        """Record a warning, keeping the most recent 100."""
        self.warnings.append(warning)
        if len(self.warnings) > _HISTORY_LIMIT:
            del self.warnings[:-_HISTORY_LIMIT]


class FileSyncStatus(str, Enum):
    """Synchronisation status of one file."""

    PENDING = "pending"
    SYNCED = "synced"
    MODIFIED = "modified"
    CONFLICT = "conflict"
    ERROR = "error"
    DELETED = "deleted"
    IGNORED = "ignored"
    UPLOADING = "uploading"
    DOWNLOADING = "downloading"

    def __str__(self) -> str:
        return self.value


@dataclass
class FileState:
    """Local and remote view of a single file."""

    path: str
    file_id: str = ""
    remote_id: str = ""

    local_hash: str = ""
    remote_hash: str = ""
    hash_algo: str = ""

    local_mod_time: datetime | None = None
    remote_mod_time: datetime | None = None
    last_sync_time: datetime | None = None
    last_check_time: datetime = field(default_factory=_now)

    size: int = 0
    local_size: int = 0
    remote_size: int = 0

    status: FileSyncStatus = FileSyncStatus.PENDING
    last_error: str = ""
    retry_count: int = 0
    max_retries: int = 3

    version: int = 1
    local_version: int = 0
    remote_version: int = 0

    has_conflict: bool = False
    conflict_type: str = ""
    conflict_detected: datetime | None = None

    is_folder: bool = False
    mime_type: str = ""
    metadata: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.status = FileSyncStatus(self.status)
        if not self.file_id:
            self.file_id = generate_file_id(self.path)

    def needs_sync(self) -> bool:
        return self.status is not FileSyncStatus.SYNCED or self.local_hash != self.remote_hash

    def can_retry(self) -> bool:
        return self.retry_count < self.max_retries

    def increment_retry(self) -> None:
        self.retry_count += 1

    def reset_retry(self) -> None:
        self.retry_count = 0
        self.last_error = ""

    def set_error(self, err: str) -> None:
        """Mark the file failed and count a retry."""
        self.status = FileSyncStatus.ERROR
        self.last_error = str(err)
        self.increment_retry()

    def set_conflict(self, conflict_type: str) -> None:
        self.status = FileSyncStatus.CONFLICT
        self.has_conflict = True
        self.conflict_type = str(conflict_type)
        self.conflict_detected = _now()

    def resolve_conflict(self) -> None:
        self.has_conflict = False
        self.conflict_type = ""
        self.status = FileSyncStatus.SYNCED

    def update_local_info(self, hash: str, mod_time: datetime, size: int) -> None:
        """Record the local copy's details; a hash mismatch marks the file modified."""
        self.local_hash = hash
        self.local_mod_time = mod_time
        self.local_size = size
        self.local_version += 1
        self.last_check_time = _now()
        if self.local_hash != self.remote_hash:
            self.status = FileSyncStatus.MODIFIED

    def update_remote_info(self, hash: str, mod_time: datetime, size: int, remote_id: str) -> None:
        """Record the remote copy's details; matching hashes mark the file synced."""
        self.remote_hash = hash
        self.remote_mod_time = mod_time
        self.remote_size = size
        self.remote_id = remote_id
        self.remote_version += 1
        self.last_sync_time = _now()
        if self.local_hash == self.remote_hash:
            self.status = FileSyncStatus.SYNCED