from datetime import datetime, timezone

import pytest

from pulsepoint.models.state import FileState, FileSyncStatus, SyncState

T0 = datetime(2024, 1, 1, tzinfo=timezone.utc)


def test_sync_state_defaults():
    state = SyncState()
    assert state.version == "1.0.0"
    assert state.schema_version == 1
    assert state.is_initialized is True
    assert state.errors == []
    assert state.warnings == []


@pytest.mark.parametrize("given, expected", [(-5, 0), (150, 100), (42.5, 42.5)])
def test_update_progress_clamps(given, expected):
    state = SyncState()
    state.update_progress(given)
    assert state.operation_progress == expected


def test_start_operation():
    state = SyncState(is_paused=True, operation_progress=30)
    state.start_operation("upload")
    assert state.current_operation == "upload"
    assert state.operation_progress == 0
    assert state.is_running is True
    assert state.is_paused is False
    assert state.operation_started is not None and state.operation_started.tzinfo is not None


def test_end_operation_success_resets_errors():
    state = SyncState(consecutive_errors=4)
    state.start_operation("scan")
    state.end_operation(True)
    assert state.current_operation == ""
    assert state.operation_progress == 100
    assert state.is_running is False
    assert state.consecutive_errors == 0
    assert state.last_success_time == state.last_sync_time


def test_end_operation_failure_counts_error():
    state = SyncState(consecutive_errors=2)
    state.end_operation(False)
    assert state.consecutive_errors == 3
    assert state.last_success_time is None
    assert state.last_sync_time is not None


def test_add_error_keeps_last_hundred():
    state = SyncState()
    for i in range(105):
        state.add_error(f"e{i}")
    assert len(state.errors) == 100
    assert state.errors == [f"e{i}" for i in range(5, 105)]
    assert state.last_error == "e104"
    assert state.consecutive_errors == 105


def test_add_warning_keeps_last_hundred():
    state = SyncState()
    for i in range(101):
        state.add_warning(f"w{i}")
    assert state.warnings == [f"w{i}" for i in range(1, 101)]


def test_file_state_defaults():
    fs = FileState("/a/b.txt")
    assert fs.file_id == "/a/b.txt"
    assert fs.status is FileSyncStatus.PENDING
    assert fs.max_retries == 3
    assert fs.version == 1
    assert fs.needs_sync() is True


def test_local_update_marks_modified():
    fs = FileState("/f", remote_hash="aaa")
    fs.update_local_info("bbb", T0, 10)
    assert fs.status is FileSyncStatus.MODIFIED
    assert fs.local_hash == "bbb"
    assert fs.local_mod_time == T0
    assert fs.local_size == 10
    assert fs.local_version == 1


def test_remote_update_with_matching_hash_marks_synced():
    fs = FileState("/f")
    fs.update_local_info("abc", T0, 7)
    fs.update_remote_info("abc", T0, 7, "rid-1")
    assert fs.status is FileSyncStatus.SYNCED
    assert fs.remote_id == "rid-1"
    assert fs.remote_version == 1
    assert fs.needs_sync() is False


def test_remote_update_with_other_hash_keeps_status():
    fs = FileState("/f", local_hash="abc")
    fs.update_remote_info("xyz", T0, 7, "rid-1")
    assert fs.status is FileSyncStatus.PENDING
    assert fs.needs_sync() is True


def test_errors_and_retries():
    fs = FileState("/f")
    for _ in range(3):
        assert fs.can_retry() is True
        fs.set_error("boom")
    assert fs.status is FileSyncStatus.ERROR
    assert fs.last_error == "boom"
    assert fs.retry_count == 3
    assert fs.can_retry() is False
    fs.reset_retry()
    assert fs.retry_count == 0
    assert fs.last_error == ""


def test_conflict_cycle():
    fs = FileState("/f")
    fs.set_conflict("both_modified")
    assert fs.status is FileSyncStatus.CONFLICT
    assert fs.has_conflict is True
    assert fs.conflict_type == "both_modified"
    assert fs.conflict_detected is not None
    fs.resolve_conflict()
    assert fs.status is FileSyncStatus.SYNCED
    assert fs.has_conflict is False
    assert fs.conflict_type == ""


def test_needs_sync_when_synced_but_hashes_differ():
    fs = FileState("/f", status=FileSyncStatus.SYNCED, local_hash="a", remote_hash="b")
    assert fs.needs_sync() is True