# pulsepoint

Building blocks for keeping a local directory tree in step with a remote copy:

- **`pulsepoint.watchers.ignore.IgnoreMatcher`**: gitignore-style rules, loaded
  from a file or added one by one. It supports negation (`!keep.log`) and
  directory-only patterns (`build/`). It always ignores common junk such as
  `.DS_Store`, `.git`, `node_modules`, `__pycache__`, `*.pyc`, `*.swp` and `*~`.
- **`pulsepoint.models`**: dataclasses for files (`file.File`, `FileList`,
  `FileFilter`, `FileSort`), metadata (`metadata.Metadata`, `MetadataFilter`),
  conflicts (`conflict.Conflict`, `ConflictResolution`, `ConflictPolicy`) and
  sync state (`state.SyncState`, `FileState`, `FileSyncStatus`).
- **`pulsepoint.logger`**: a process-wide logger that writes to a rotating log
  file and can also write to the console or emit JSON lines.
- **`pulsepoint.utils`**: file hashing, size and duration formatting, path
  helpers, simple pattern matching and status icons and colours.

## Installation

```
pip install pulsepoint
```

Python 3.10 or later is required. The package has no third-party dependencies.

## Ignore rules

```python
from pulsepoint.watchers.ignore import IgnoreMatcher

matcher = IgnoreMatcher()
matcher.add_patterns(["*.log", "!keep.log", "build/"])
matcher.should_ignore("src/app.log", False)    # True
matcher.should_ignore("src/keep.log", False)   # False
matcher.should_ignore("build", True)           # True
matcher.patterns()                             # ['*.log', '!keep.log', 'build/']
```

`load_from_file(path)` adds the rules of an ignore file. Blank lines and lines
starting with `#` are skipped. A missing file is not an error. The last rule
that matches a path decides whether it is ignored.

## Conflicts and policies

```python
from pulsepoint.models.conflict import (
    Conflict, ConflictPolicy, ConflictResolution, ConflictType, ResolutionStrategy,
)

policy = ConflictPolicy()
policy.get_strategy(ConflictType.NAMING)       # ResolutionStrategy.RENAME

conflict = Conflict("docs/report.txt", ConflictType.BOTH_MODIFIED)
conflict.mark_attempted()
conflict.add_history("first attempt")
conflict.set_resolution(ConflictResolution(ResolutionStrategy.KEEP_LOCAL))
conflict.is_resolved()                         # True
```

After `max_attempts` calls to `mark_attempted()` (3 by default), a conflict
needs the user and `can_auto_resolve()` returns `False`. The history keeps the
50 most recent entries.

## Sync state

```python
from pulsepoint.models.state import FileState, SyncState

state = SyncState()
state.start_operation("upload")
state.update_progress(150)     # clamped to 100
state.end_operation(success=True)

file_state = FileState("docs/report.txt")
file_state.needs_sync()        # True while pending or while hashes differ
```

`SyncState` keeps the 100 most recent errors and warnings.

## Logging

```python
from pulsepoint import logger

logger.initialize(logger.LogConfig(level="debug", output_path="pulsepoint.log"))
logger.info("sync started", files=12)
logger.with_correlation_id("run-1").warning("slow upload")
logger.sync()
```

If `initialize` is never called, the first log call sets things up with
`default_config()`. The default writes to `~/.pulsepoint/logs/pulsepoint.log`,
rotates at 100 MB, keeps 5 gzip-compressed backups and logs at `info`.
`development=True` also writes to standard output, and `enable_json=True`
writes JSON lines. `logger.fatal` logs and then exits with status 1.

## Utilities

```python
from pulsepoint.utils import format_bytes, format_duration, parse_duration, truncate_string

format_bytes(1536)                           # "1.5 KB"
format_duration(parse_duration("2d"))        # "2d"
format_duration(parse_duration("1h30m"))     # "1h 30m"
truncate_string("abcdefgh", 6)               # "abc..."
```

## What this package does not do

The package does not watch the file system. It has no change queue, no sync
engine, no cloud provider client, no command-line program and no database.
It gives you the ignore rules, data models, logging and helpers, and you
supply the watching, storage and transfer.

## Running the tests

```
pip install -e .[test]
pytest
```