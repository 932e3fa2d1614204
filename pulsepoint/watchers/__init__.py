"""Gitignore-style ignore matching for watched paths."""