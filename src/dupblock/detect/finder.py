"""Find maximal blocks of lines repeated across loaded files.

Detection runs in four phases:

1. Seeding: every window of exactly min_lines consecutive lines is keyed by its joined
   (optionally indentation-stripped) text. Keys are the text itself, so equal keys mean
   equal windows; there is no approximate hashing.
2. Extension: the occurrences of every key seen at least twice are grown backward and
   then forward for as long as all of them keep agreeing line by line.
3. Aggregation: a long duplicate is rediscovered from each of its interior windows, so
   extended blocks are merged by their normalized content and their hits deduplicated.
4. Filtering: only content seen at two or more distinct locations is reported.
"""

import logging
from collections import defaultdict
from typing import Callable, NamedTuple, Sequence

from .lines import LoadedFile
from ..report.duplicate_block import DuplicateBlock, Hit, sort_blocks
from ..settings import ConfigurationError

logger = logging.getLogger(__name__)

INDENTATION_CHARACTERS = ' \t'


class Occurrence(NamedTuple):
    """A window start: index into the loaded files and 0-based line offset."""
    file_index: int
    start: int


def normalize_lines(lines: Sequence[str], ignore_indentation: bool) -> list[str]:
    """Lines in the form used for comparison: leading spaces and tabs removed if ignoring indentation."""
    if not ignore_indentation:
        return list(lines)
    return [line.lstrip(INDENTATION_CHARACTERS) for line in lines]


def content_key(lines: Sequence[str], ignore_indentation: bool) -> str:
    return '\n'.join(normalize_lines(lines, ignore_indentation))


def validate_min_lines(min_lines) -> int:
    if isinstance(min_lines, bool) or not isinstance(min_lines, int) or min_lines < 1:
        raise ConfigurationError(f"min_lines must be a positive integer, got {min_lines!r}")
    return min_lines


def collect_seeds(keyed_lines: list[list[str]], min_lines: int) -> dict[str, list[Occurrence]]:
    """Map the text of every min_lines window to the places it starts, in file and line order."""
    seeds: dict[str, list[Occurrence]] = defaultdict(list)
    for file_index, lines in enumerate(keyed_lines):
        for start in range(len(lines) - min_lines + 1):
            seeds['\n'.join(lines[start:start + min_lines])].append(Occurrence(file_index, start))
    return seeds


def build_maximal_block(files: Sequence[LoadedFile], keyed_lines: list[list[str]],
                        occurrences: Sequence[Occurrence], seed_length: int) -> DuplicateBlock:
    """Grow a shared window in both directions until any occurrence stops agreeing.

    Lines are compared in their normalized form, with the first occurrence as reference.
    The block text is taken verbatim from the first occurrence.
    """
    file_indices = [occurrence.file_index for occurrence in occurrences]
    starts = [occurrence.start for occurrence in occurrences]
    reference_lines = keyed_lines[file_indices[0]]

    while all(start > 0 for start in starts):
        reference = reference_lines[starts[0] - 1]
        if any(keyed_lines[f][s - 1] != reference for f, s in zip(file_indices[1:], starts[1:])):
            break
        starts = [start - 1 for start in starts]

    length = seed_length
    while starts[0] + length < len(reference_lines):
        reference = reference_lines[starts[0] + length]
        if any(s + length >= len(keyed_lines[f]) or keyed_lines[f][s + length] != reference
               for f, s in zip(file_indices[1:], starts[1:])):
            break
        length += 1

    first = files[file_indices[0]]
    return DuplicateBlock(
        first.lines[starts[0]:starts[0] + length],
        [Hit(files[f].path, s + 1, s + length) for f, s in zip(file_indices, starts)]
    )


def find_duplicate_blocks(files: Sequence[LoadedFile], min_lines: int, ignore_indentation: bool = False,
                          observer: Callable[[str], None] | None = None) -> list[DuplicateBlock]:
    """Find every maximal block of at least min_lines lines that occurs at two or more locations.

    Args:
        files: Loaded files; their order fixes the order of discovery
        min_lines: Shortest block reported
        ignore_indentation: Compare lines without their leading spaces and tabs
        observer: Receives diagnostic messages; defaults to this module's debug log

    Returns:
        Duplicate blocks sorted by DuplicateBlock.sort_key, each with sorted unique hits.
        Blocks whose lines differ only in indentation are merged when ignoring indentation;
        the merged block shows the lexicographically smallest of the raw texts.

    Raises:
        ConfigurationError: min_lines is not a positive integer
    """
    notify = observer or logger.debug
    validate_min_lines(min_lines)

    keyed_lines = [normalize_lines(loaded.lines, ignore_indentation) for loaded in files]
    notify(f"total files loaded: {len(files)}")

    seeds = collect_seeds(keyed_lines, min_lines)
    candidates = [occurrences for occurrences in seeds.values() if len(occurrences) >= 2]
    notify(f"seed windows: {len(seeds)} | candidate seeds (>=2 hits): {len(candidates)}")

    merged: dict[str, tuple[tuple[str, ...], set[Hit]]] = {}
    for occurrences in candidates:
        block = build_maximal_block(files, keyed_lines, occurrences, min_lines)
        _, hits = merged.setdefault(content_key(block.lines, ignore_indentation), (block.lines, set()))
        hits.update(block.hits)
    notify(f"maximal groups built: {len(candidates)}")

    lines_by_path = {loaded.path: loaded.lines for loaded in files}
    blocks = []
    for lines, hits in merged.values():
        if len(hits) < 2:
            continue
        if ignore_indentation:
            lines = min(tuple(lines_by_path[hit.file][hit.start_line - 1:hit.end_line]) for hit in hits)
        blocks.append(DuplicateBlock(lines, hits))
    notify(f"final duplicate blocks: {len(blocks)}")

    return sort_blocks(blocks)
