"""Duplicate block detection.

This package contains:
- lines: LoadedFile and line normalization for files being scanned
- finder: seeding, maximal extension and aggregation of duplicate blocks
"""
