import functools
import logging
import os
import stat
from pathlib import Path
from typing import Iterator

logger = logging.getLogger(__name__)


class FileContext:
    """Context object for a file or directory during traversal.

    Symlinks are followed when stat information is loaded, so a symlink to a directory
    is reported as a directory and a symlink to a regular file as a regular file. Entries
    whose stat fails (broken symlinks, entries removed during the walk) are neither.
    """
    def __init__(self, parent, name: str | None, path: Path | None = None, st: os.stat_result | None = None):
        self._parent: FileContext | None = parent
        self._name: str | None = name
        self._path: Path | None = path
        self._stat: os.stat_result | None = st
        self._stat_loaded: bool = st is not None

    @property
    def name(self) -> str | None:
        return self._name

    @property
    def parent(self) -> 'FileContext':
        if self._parent is None:
            raise LookupError("no parent")

        return self._parent

    @property
    def stat(self) -> os.stat_result | None:
        if not self._stat_loaded:
            if self._path is None:
                raise LookupError("stat not available and path not provided")
            try:
                self._stat = self._path.stat()
            except OSError as e:
                logger.debug(f"Cannot stat {self._path}: {e}")
                self._stat = None
            self._stat_loaded = True
        return self._stat

    @functools.cached_property
    def relative_path(self) -> str | None:
        """'/'-separated path from the root context, or None for the root itself."""
        if self._name is None:
            return None

        if self._parent is None:
            return self._name

        parent_path = self._parent.relative_path
        if parent_path is None:
            return self._name

        return f"{parent_path}/{self._name}"

    def is_file(self) -> bool:
        st = self.stat
        return st is not None and stat.S_ISREG(st.st_mode)

    def is_dir(self) -> bool:
        st = self.stat
        return st is not None and stat.S_ISDIR(st.st_mode)

    def is_revisit(self) -> bool:
        """Whether this directory is already being walked by one of its ancestors, i.e. a symlink loop."""
        st = self.stat
        if st is None:
            return False

        ancestor = self._parent
        while ancestor is not None:
            ancestor_st = ancestor.stat
            if ancestor_st is not None and (ancestor_st.st_dev, ancestor_st.st_ino) == (st.st_dev, st.st_ino):
                return True
            ancestor = ancestor._parent
        return False


def walk(path: Path, parent: FileContext) -> Iterator[tuple[Path, FileContext]]:
    """Recursively traverse a directory, following directory symlinks.

    Children are visited in name order. A directory that would re-enter one of its own
    ancestors is yielded but not descended into.

    Raises:
        OSError: A directory cannot be listed
    """
    child: Path
    for child in sorted(path.iterdir()):
        context = FileContext(parent, child.name, path=child)
        yield child, context

        if context.is_dir():
            if context.is_revisit():
                logger.debug(f"Not descending into {child}: directory loop")
                continue
            yield from walk(child, context)


def walk_files(root: Path) -> Iterator[tuple[Path, FileContext]]:
    """Yield (path, context) for every regular file below root.

    The root context has no name, so each context's relative_path is relative to root.
    """
    context = FileContext(None, None, root)
    for file_path, file_context in walk(root, context):
        if file_context.is_file():
            yield file_path, file_context
