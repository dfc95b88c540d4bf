"""Bundled data files (theme and application descriptors)."""
