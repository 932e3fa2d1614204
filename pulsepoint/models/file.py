"""File records and the filters and sort options used to query them."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, BinaryIO

SORT_BY_NAME = "name"
SORT_BY_SIZE = "size"
SORT_BY_MODIFIED = "modified_time"
SORT_BY_CREATED = "created_time"
SORT_BY_PATH = "path"


def _now() -> datetime:
    return datetime.now(timezone.utc)


def generate_file_id(path: str) -> str:
    """Identifier of a file; currently the path itself."""
    return path


@dataclass
class File:
    """A file or directory known to PulsePoint."""

    path: str
    name: str = ""
    id: str = ""
    remote_id: str = ""
    parent_id: str = ""

    size: int = 0
    hash: str = ""
    mime_type: str = ""
    is_folder: bool = False

    modified_time: datetime = field(default_factory=_now)
    created_time: datetime = field(default_factory=_now)
    accessed_time: datetime | None = None

    local_path: str = ""
    permissions: str = ""
    owner: str = ""
    group: str = ""

    content: BinaryIO | None = field(default=None, repr=False, compare=False)

    metadata: dict[str, Any] = field(default_factory=dict)

    sync_status: str = ""
    last_sync_time: datetime | None = None
    version: int = 1

    def __post_init__(self) -> None:
        if not self.id:
            self.id = generate_file_id(self.path)

    def needs_sync(self) -> bool:
        """True unless the file is synced and unchanged since the last sync."""
        if self.sync_status != "synced":
            return True
        if self.last_sync_time is None:
            return True
        return self.modified_time > self.last_sync_time

    def update_hash(self, hash: str) -> None:
        """Store a new content hash and bump the version."""
        self.hash = hash
        self.version += 1


@dataclass
class FileList:
    """One page of files from a listing."""

    files: list[File] = field(default_factory=list)
    total_count: int = 0
    page_token: str = ""
    has_more: bool = False


@dataclass
class FileFilter:
    """Criteria for selecting files."""

    path: str = ""
    parent_id: str = ""
    is_folder: bool | None = None
    min_size: int = 0
    max_size: int = 0
    modified_after: datetime | None = None
    modified_before: datetime | None = None
    mime_types: list[str] = field(default_factory=list)
    sync_status: str = ""


@dataclass
class FileSort:
    """Sort order for file queries."""

    field: str = SORT_BY_NAME
    ascending: bool = True