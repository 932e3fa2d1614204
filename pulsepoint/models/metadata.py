"""Detailed metadata for files and directories."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any


def _now() -> datetime:
    return datetime.now(timezone.utc)


def generate_metadata_id(path: str) -> str:
    """Identifier of a metadata record for ``path``."""
    return "meta_" + path


@dataclass
class Metadata:
    """Metadata describing one file, directory or symlink."""

    path: str
    is_folder: bool = False
    id: str = ""
    type: str = ""

    size: int = 0
    hash: str = ""
    hash_algo: str = ""
    content_hash: str = ""

    modified_time: datetime = field(default_factory=_now)
    created_time: datetime = field(default_factory=_now)
    accessed_time: datetime | None = None
    changed_time: datetime | None = None

    mime_type: str = ""
    extension: str = ""
    is_symlink: bool = False
    is_hidden: bool = False

    owner: str = ""
    group: str = ""
    permissions: str = ""

    version: str = ""
    etag: str = ""
    last_sync_time: datetime | None = None
    sync_version: int = 1

    cloud_id: str = ""
    cloud_version: str = ""
    web_url: str = ""
    download_url: str = ""

    attributes: dict[str, Any] = field(default_factory=dict)
    tags: list[str] = field(default_factory=list)
    labels: dict[str, str] = field(default_factory=dict)

    parent_id: str = ""
    child_ids: list[str] = field(default_factory=list)
    link_target: str = ""

    def __post_init__(self) -> None:
        if not self.id:
            self.id = generate_metadata_id(self.path)

    def is_file(self) -> bool:
        return not self.is_folder and not self.is_symlink

    def is_directory(self) -> bool:
        return self.is_folder

    def age(self) -> timedelta:
        """Time elapsed since creation."""
        return _now() - self.created_time

    def time_since_modified(self) -> timedelta:
        """Time elapsed since the last modification."""
        return _now() - self.modified_time

    def set_attribute(self, key: str, value: Any) -> None:
        self.attributes[key] = value

    def get_attribute(self, key: str, default: Any = None) -> Any:
        return self.attributes.get(key, default)

    def add_tag(self, tag: str) -> None:
        """Add a tag unless it is already present."""
        if tag not in self.tags:
            self.tags.append(tag)

    def remove_tag(self, tag: str) -> None:
        """Remove a tag if present."""
        if tag in self.tags:
            self.tags.remove(tag)

    def has_tag(self, tag: str) -> bool:
        return tag in self.tags

    def set_label(self, key: str, value: str) -> None:
        self.labels[key] = value

    def get_label(self, key: str, default: str | None = None) -> str | None:
        return self.labels.get(key, default)


@dataclass
class MetadataFilter:
    """Criteria for selecting metadata records."""

    path: str = ""
    type: str = ""
    is_folder: bool | None = None
    min_size: int = 0
    max_size: int = 0
    modified_after: datetime | None = None
    modified_before: datetime | None = None
    tags: list[str] = field(default_factory=list)
    labels: dict[str, str] = field(default_factory=dict)