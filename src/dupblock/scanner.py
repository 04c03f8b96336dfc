import asyncio
import logging
from dataclasses import dataclass, field
from typing import Callable

from .detect.finder import find_duplicate_blocks, validate_min_lines
from .detect.lines import LoadedFile
from .glob.expand import expand_patterns
from .glob.pattern import compile_patterns
from .report.duplicate_block import DuplicateBlock
from .settings import ConfigurationError
from .utils.processor import Processor

logger = logging.getLogger(__name__)


@dataclass
class ScanResult:
    """Outcome of one scan.

    Attributes:
        files: Matched files in scan order, including skipped ones
        blocks: Duplicate blocks in report order
        skipped: Matched files that could not be read and contributed no lines
    """
    files: list[str]
    blocks: list[DuplicateBlock]
    skipped: list[str] = field(default_factory=list)


class Scanner:
    """Workflow for one duplicate scan: compile patterns, enumerate files, load lines, detect blocks.

    Line loading is dispatched to the processor's worker pool; everything else runs in the
    calling process. Results are gathered in file order, so the output does not depend on
    worker scheduling.
    """

    def __init__(self, processor: Processor, min_lines: int, ignore_indentation: bool = False,
                 observer: Callable[[str], None] | None = None):
        """
        Args:
            processor: Worker pool used to read files
            min_lines: Shortest block reported
            ignore_indentation: Compare lines without leading spaces and tabs
            observer: Receives diagnostic messages; defaults to this module's debug log

        Raises:
            ConfigurationError: min_lines is not a positive integer
        """
        self._processor = processor
        self._min_lines = validate_min_lines(min_lines)
        self._ignore_indentation = ignore_indentation
        self._notify = observer or logger.debug

    @property
    def min_lines(self) -> int:
        return self._min_lines

    @property
    def ignore_indentation(self) -> bool:
        return self._ignore_indentation

    def scan(self, patterns: list[str]) -> ScanResult:
        """Scan the files selected by patterns for duplicate blocks.

        Raises:
            ConfigurationError: No patterns were given or a pattern is invalid. Raised before
                                any file system access.
            OSError: A base directory exists but cannot be listed
        """
        if not patterns:
            raise ConfigurationError("No patterns given")

        compiled = compile_patterns(patterns)

        self._notify(f"min_lines={self._min_lines}")
        self._notify(f"ignore_indentation={'true' if self._ignore_indentation else 'false'}")
        self._notify("patterns: " + ' '.join(patterns))

        paths = expand_patterns(compiled, self._notify)
        self._notify(f"files matched: {len(paths)}")
        for index, path in enumerate(paths[:5]):
            self._notify(f"  file[{index}]: {path}")

        loaded, skipped = asyncio.run(self._load(paths))

        blocks = find_duplicate_blocks(loaded, self._min_lines, self._ignore_indentation, self._notify)
        return ScanResult(paths, blocks, skipped)

    async def _load(self, paths: list[str]) -> tuple[list[LoadedFile], list[str]]:
        results = await asyncio.gather(*(self._processor.read_lines(path) for path in paths),
                                       return_exceptions=True)

        loaded: list[LoadedFile] = []
        skipped: list[str] = []
        for path, result in zip(paths, results):
            if isinstance(result, OSError):
                logger.warning(f"Skipping unreadable file {path}: {result}")
                skipped.append(path)
                result = []
            elif isinstance(result, BaseException):
                raise result
            loaded.append(LoadedFile(path, result))

        return loaded, skipped
