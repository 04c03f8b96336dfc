"""Enumerate the regular files matched by compiled glob patterns."""

import logging
import os
from pathlib import Path
from typing import Callable, Iterator

from .pattern import CompiledPattern
from ..utils.walker import walk_files

logger = logging.getLogger(__name__)


def iter_pattern_files(compiled: CompiledPattern, observer: Callable[[str], None] | None = None) -> Iterator[Path]:
    """Yield the regular files matched by one compiled pattern.

    A missing base yields nothing. A base that is itself a regular file is yielded when its
    file name matches. Otherwise the base is walked recursively, following directory
    symlinks, and each file's path relative to the base must match in full.

    Raises:
        OSError: The base directory, or a directory below it, cannot be listed
    """
    notify = observer or logger.debug
    base = compiled.base_dir

    if not base.exists():
        notify("  base does not exist, skipping")
        return

    if base.is_file():
        if compiled.matches(base.name):
            yield base
        return

    if not base.is_dir():
        notify("  base is neither a file nor a directory, skipping")
        return

    for file_path, context in walk_files(base):
        if compiled.matches(context.relative_path):
            yield file_path


def expand_patterns(patterns: list[CompiledPattern], observer: Callable[[str], None] | None = None) -> list[str]:
    """Expand compiled patterns into a sorted, deduplicated list of file paths.

    A file matched by several patterns, or reachable through several symlinked paths, is
    listed once under the first path it was found by. Paths are '/'-separated strings and
    the list is sorted lexicographically so that file order is reproducible.
    """
    notify = observer or logger.debug
    seen: set[str] = set()
    results: list[str] = []

    for compiled in patterns:
        notify(f"glob pattern: {compiled.pattern} | base={compiled.base_dir.as_posix()}")
        added = 0
        for path in iter_pattern_files(compiled, notify):
            canonical = os.path.realpath(path)
            if canonical in seen:
                continue
            seen.add(canonical)
            results.append(path.as_posix())
            added += 1
        notify(f"  matched files: {added}")

    results.sort()
    return results
