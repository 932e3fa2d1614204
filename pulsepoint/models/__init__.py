"""Data records for files, metadata, conflicts and sync state."""