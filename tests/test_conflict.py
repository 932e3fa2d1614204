from datetime import datetime, timedelta, timezone

import pytest

from pulsepoint.models.conflict import (
    Conflict,
    ConflictPolicy,
    ConflictResolution,
    ConflictSeverity,
    ConflictType,
    ResolutionStatus,
    ResolutionStrategy,
    generate_conflict_id,
)
from pulsepoint.models.file import File


def _files(gap: timedelta) -> tuple[File, File]:
    base = datetime(2024, 1, 1, tzinfo=timezone.utc)
    local = File(path="/a.txt", name="a.txt", modified_time=base + gap)
    remote = File(path="/a.txt", name="a.txt", modified_time=base)
    return local, remote


def test_new_conflict_defaults():
    conflict = Conflict("/docs/a.txt", ConflictType.BOTH_MODIFIED)
    assert conflict.resolution_status is ResolutionStatus.PENDING
    assert conflict.max_attempts == 3
    assert conflict.history == []
    assert conflict.id.startswith("conflict_/docs/a.txt_")
    assert conflict.is_resolved() is False


def test_generate_conflict_id_prefix():
    assert generate_conflict_id("x").startswith("conflict_x_")


def test_type_accepts_string_value():
    conflict = Conflict("p", "naming")
    assert conflict.type is ConflictType.NAMING


def test_low_severity_auto_resolves():
    conflict = Conflict("p", ConflictType.TYPE, severity=ConflictSeverity.LOW)
    assert conflict.can_auto_resolve()


def test_user_required_blocks_auto_resolve():
    conflict = Conflict("p", ConflictType.NAMING, severity=ConflictSeverity.LOW)
    conflict.user_required = True
    assert not conflict.can_auto_resolve()


def test_resolved_conflict_not_auto_resolvable():
    conflict = Conflict("p", ConflictType.NAMING)
    conflict.set_resolution(ConflictResolution(ResolutionStrategy.RENAME))
    assert not conflict.can_auto_resolve()


def test_naming_conflict_auto_resolves():
    assert Conflict("p", ConflictType.NAMING).can_auto_resolve()


@pytest.mark.parametrize("gap", [timedelta(days=2), timedelta(days=-2)])
def test_both_modified_far_apart_auto_resolves(gap):
    local, remote = _files(gap)
    conflict = Conflict("p", ConflictType.BOTH_MODIFIED, local, remote)
    assert conflict.can_auto_resolve()


def test_both_modified_close_falls_back_to_flag():
    local, remote = _files(timedelta(hours=1))
    conflict = Conflict("p", ConflictType.BOTH_MODIFIED, local, remote)
    assert not conflict.can_auto_resolve()
    conflict.auto_resolvable = True
    assert conflict.can_auto_resolve()


def test_set_resolution():
    conflict = Conflict("p", ConflictType.VERSION)
    resolution = ConflictResolution(ResolutionStrategy.KEEP_LOCAL)
    conflict.set_resolution(resolution)
    assert conflict.resolution is resolution
    assert conflict.resolved_at == resolution.resolved_at
    assert conflict.resolution_status is ResolutionStatus.RESOLVED
    assert conflict.is_resolved()


def test_mark_attempted_requires_user_after_max():
    conflict = Conflict("p", ConflictType.VERSION)
    conflict.mark_attempted()
    conflict.mark_attempted()
    assert conflict.user_required is False
    assert conflict.last_attempt is not None and conflict.attempt_count == 2
    conflict.mark_attempted()
    assert conflict.user_required is True
    assert conflict.attempt_count == conflict.max_attempts


def test_history_is_bounded():
    conflict = Conflict("p", ConflictType.VERSION)
    for i in range(60):
        conflict.add_history(f"entry {i}")
    assert len(conflict.history) == 50
    assert conflict.history[-1].endswith("] entry 59")
    assert conflict.history[0].endswith("] entry 10")
    assert all(item.startswith("[") for item in conflict.history)


def test_resolution_defaults():
    resolution = ConflictResolution("merge")
    assert resolution.strategy is ResolutionStrategy.MERGE
    assert resolution.actions == []
    assert resolution.manual is False


def test_policy_defaults():
    policy = ConflictPolicy()
    assert policy.max_auto_resolve_size == 100 * 1024 * 1024
    assert policy.prefer_newer is True
    assert policy.create_backups is True
    assert policy.binary_file_strategy is ResolutionStrategy.KEEP_NEWER
    assert len(policy.default_strategies) == len(ConflictType)


@pytest.mark.parametrize(
    "conflict_type, expected",
    [
        (ConflictType.BOTH_MODIFIED, ResolutionStrategy.KEEP_NEWER),
        (ConflictType.DELETE_MODIFY, ResolutionStrategy.KEEP_LOCAL),
        (ConflictType.NAMING, ResolutionStrategy.RENAME),
        (ConflictType.TYPE, ResolutionStrategy.SKIP),
        (ConflictType.SIZE, ResolutionStrategy.SKIP),
    ],
)
def test_policy_default_strategies(conflict_type, expected):
    assert ConflictPolicy().get_strategy(conflict_type) is expected


def test_policy_fallbacks():
    policy = ConflictPolicy(default_strategies={}, prefer_newer=False)
    assert policy.get_strategy(ConflictType.VERSION) is ResolutionStrategy.INTERACTIVE
    policy.prefer_newer = True
    assert policy.get_strategy(ConflictType.VERSION) is ResolutionStrategy.KEEP_NEWER
    policy.prefer_remote = True
    assert policy.get_strategy(ConflictType.VERSION) is ResolutionStrategy.KEEP_REMOTE
    policy.prefer_local = True
    assert policy.get_strategy(ConflictType.VERSION) is ResolutionStrategy.KEEP_LOCAL


def test_policy_rejects_unknown_type():
    with pytest.raises(ValueError):
        ConflictPolicy().get_strategy("no-such-type")