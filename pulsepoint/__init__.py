"""Ignore rules, sync-state and conflict models, logging and file utilities."""

__version__ = "0.1.0"