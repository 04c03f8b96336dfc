"""Compile glob patterns into a literal base directory plus an anchored relative-path regex."""

import os
import re
from pathlib import Path
from typing import NamedTuple

from ..settings import ConfigurationError

GLOB_CHARACTERS = '*?'


class PatternError(ConfigurationError):
    """Raised when a glob pattern cannot be turned into a matcher."""

    def __init__(self, pattern: str, reason: str):
        super().__init__(f"Invalid pattern {pattern!r}: {reason}")
        self.pattern = pattern
        self.reason = reason


class CompiledPattern(NamedTuple):
    """A glob pattern split into the directory to walk and the matcher for paths below it.

    Attributes:
        pattern: The pattern as given by the user
        base_dir: Longest glob-free directory prefix of the pattern. When the pattern has no
                  glob characters at all, this is the whole pattern, which may name a single file.
        regex: Expression matched in full against '/'-separated paths relative to base_dir
    """
    pattern: str
    base_dir: Path
    regex: re.Pattern

    def matches(self, relative_path: str) -> bool:
        return self.regex.fullmatch(relative_path) is not None


def normalize_pattern(pattern: str) -> str:
    """Convert to '/' separators and drop leading './' and '/' so the pattern is always relative."""
    for separator in (os.sep, os.altsep):
        if separator and separator != '/':
            pattern = pattern.replace(separator, '/')

    while True:
        if pattern.startswith('./'):
            pattern = pattern[2:]
        elif pattern.startswith('/'):
            pattern = pattern[1:]
        else:
            return pattern


def split_base(pattern: str) -> tuple[str, str]:
    """Split a normalized pattern into (base directory, suffix).

    The base ends before the path segment holding the first glob character. A pattern
    without glob characters is entirely base and has an empty suffix.

    Examples:
        >>> split_base('src/**/*.py')
        ('src', '**/*.py')
        >>> split_base('*.c')
        ('.', '*.c')
        >>> split_base('docs/index.md')
        ('docs/index.md', '')
    """
    first = min((i for i in (pattern.find(c) for c in GLOB_CHARACTERS) if i >= 0), default=-1)
    if first < 0:
        return pattern or '.', ''

    slash = pattern.rfind('/', 0, first)
    if slash < 0:
        return '.', pattern

    return pattern[:slash] or '.', pattern[slash + 1:]


def translate_suffix(suffix: str) -> str:
    """Translate a glob suffix into a regular expression source.

    '**' matches across separators. A '**/' that forms a whole path segment may also match
    no directory at all.
    '*' and '?' never match '/'. Every other character is matched literally.
    """
    if not suffix:
        suffix = '**'

    out = []
    i = 0
    n = len(suffix)
    while i < n:
        c = suffix[i]
        if c == '*':
            j = i
            while j < n and suffix[j] == '*':
                j += 1
            if j - i == 1:
                out.append('[^/]*')
            elif j < n and suffix[j] == '/' and (i == 0 or suffix[i - 1] == '/'):
                out.append('(?:.*/)?')
                j += 1
            else:
                out.append('.*')
            i = j
        elif c == '?':
            out.append('[^/]')
            i += 1
        else:
            out.append(re.escape(c))
            i += 1

    return ''.join(out)


def compile_pattern(pattern: str) -> CompiledPattern:
    """Compile a glob pattern. Performs no I/O.

    Raises:
        PatternError: The pattern is empty or does not yield a valid expression
    """
    if not pattern:
        raise PatternError(pattern, "empty pattern")

    base, suffix = split_base(normalize_pattern(pattern))

    try:
        regex = re.compile(translate_suffix(suffix), re.DOTALL)
    except re.error as e:
        raise PatternError(pattern, str(e)) from e

    return CompiledPattern(pattern, Path(base), regex)


def compile_patterns(patterns: list[str]) -> list[CompiledPattern]:
    return [compile_pattern(pattern) for pattern in patterns]
