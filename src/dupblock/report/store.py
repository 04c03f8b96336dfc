"""Persistent storage for scan reports."""

import json
from dataclasses import dataclass, asdict, field
from pathlib import Path
from typing import Any, Iterable, Iterator

import mmh3
import msgpack
import plyvel

from .duplicate_block import DuplicateBlock
from ..utils.varint import encode_varint, decode_varint

BLOCK_PREFIX = b'b'
FILE_PREFIX = b'f'


@dataclass
class ReportManifest:
    """Description of a stored scan, persisted as manifest.json in the report directory."""
    version: str = "1.0"
    """Report format version"""

    timestamp: str = ""
    """ISO format timestamp when the scan was performed"""

    patterns: list[str] = field(default_factory=list)
    """Glob patterns that selected the scanned files"""

    min_lines: int = 0
    """Shortest block reported"""

    ignore_indentation: bool = False
    """Whether leading whitespace was ignored when comparing lines"""

    files_scanned: int = 0
    """Number of files loaded"""

    files_skipped: list[str] = field(default_factory=list)
    """Files that matched but could not be read"""

    block_count: int = 0
    """Number of duplicate blocks stored"""

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ReportManifest":
        return cls(**data)


class ReportStore:
    """Reads and writes scan reports in a report directory with LevelDB storage.

    Layout:
    - manifest.json: the ReportManifest
    - database/: LevelDB holding
      - b<varint rank>: msgpack-encoded DuplicateBlock, in report order
      - f<16-byte path hash><varint sequence number>: msgpack([file, [rank, ...]]), the blocks
        having a hit in file. Paths whose hashes collide get distinct sequence numbers.
    """

    def __init__(self, report_dir: Path) -> None:
        self.report_dir: Path = report_dir
        self.manifest_path: Path = report_dir / 'manifest.json'
        self.database_path: Path = report_dir / 'database'
        self._database: plyvel.DB | None = None

    def create_report_directory(self) -> None:
        """Create the report directory if it doesn't exist."""
        self.report_dir.mkdir(parents=True, exist_ok=True)

    def open_database(self, *, create_if_missing: bool = False) -> None:
        """Open the LevelDB database.

        Args:
            create_if_missing: If True, create the database if it doesn't exist.
                              If False, raise FileNotFoundError if database doesn't exist.
        """
        if create_if_missing:
            self.database_path.mkdir(parents=True, exist_ok=True)
        elif not self.database_path.exists():
            raise FileNotFoundError(f"Database directory not found: {self.database_path}")
        self._database = plyvel.DB(str(self.database_path), create_if_missing=create_if_missing)

    def close_database(self) -> None:
        if self._database is not None:
            self._database.close()
            self._database = None

    def __enter__(self) -> "ReportStore":
        self.open_database()
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close_database()

    def _require_database(self) -> plyvel.DB:
        if self._database is None:
            raise RuntimeError("Database not opened. Use context manager or call open_database().")
        return self._database

    def write_blocks(self, blocks: Iterable[DuplicateBlock]) -> int:
        """Replace the stored blocks with blocks, keeping their order.

        Returns:
            Number of blocks written
        """
        database = self._require_database()

        ranks_by_file: dict[str, list[int]] = {}
        count = 0
        with database.write_batch() as batch:
            for key in database.iterator(include_value=False):
                batch.delete(key)

            for rank, block in enumerate(blocks):
                batch.put(BLOCK_PREFIX + encode_varint(rank), block.to_msgpack())
                for file in dict.fromkeys(hit.file for hit in block.hits):
                    ranks_by_file.setdefault(file, []).append(rank)
                count += 1

            sequence_numbers: dict[bytes, int] = {}
            for file, ranks in ranks_by_file.items():
                path_hash = self._compute_path_hash(file)
                seq_num = sequence_numbers.get(path_hash, 0)
                sequence_numbers[path_hash] = seq_num + 1
                batch.put(FILE_PREFIX + path_hash + encode_varint(seq_num),
                          msgpack.dumps([file, ranks], unicode_errors='surrogateescape'))

        return count

    def write_report(self, manifest: ReportManifest, blocks: Iterable[DuplicateBlock]) -> None:
        """Create the report directory and store manifest and blocks, replacing any previous report."""
        self.create_report_directory()
        self.open_database(create_if_missing=True)
        try:
            manifest.block_count = self.write_blocks(blocks)
        finally:
            self.close_database()
        self.write_manifest(manifest)

    def read_block(self, rank: int) -> DuplicateBlock | None:
        data = self._require_database().get(BLOCK_PREFIX + encode_varint(rank))
        if data is None:
            return None
        return DuplicateBlock.from_msgpack(data)

    def iter_ranked_blocks(self) -> Iterator[tuple[int, DuplicateBlock]]:
        """Yield (rank, block) for stored blocks in report order."""
        for key, value in self._require_database().prefixed_db(BLOCK_PREFIX).iterator():
            rank, _ = decode_varint(key, 0)
            yield rank, DuplicateBlock.from_msgpack(value)

    def iter_blocks(self) -> Iterator[DuplicateBlock]:
        for _, block in self.iter_ranked_blocks():
            yield block

    def blocks_for_file(self, file: str) -> list[DuplicateBlock]:
        """Stored blocks having at least one hit in file, in report order."""
        prefixed_db = self._require_database().prefixed_db(FILE_PREFIX + self._compute_path_hash(file))

        for value in prefixed_db.iterator(include_key=False):
            stored_file, ranks = msgpack.loads(value, unicode_errors='surrogateescape')
            if stored_file == file:
                return [block for block in (self.read_block(rank) for rank in ranks) if block is not None]

        return []

    def write_manifest(self, manifest: ReportManifest) -> None:
        with open(self.manifest_path, 'w') as f:
            json.dump(manifest.to_dict(), f, indent=2)

    def read_manifest(self) -> ReportManifest:
        """Read the report manifest.

        Raises:
            FileNotFoundError: If manifest.json doesn't exist
        """
        with open(self.manifest_path, 'r') as f:
            data = json.load(f)
        return ReportManifest.from_dict(data)

    @staticmethod
    def _compute_path_hash(file: str) -> bytes:
        """Compute the 128-bit Murmur3 hash of a file path as 16 bytes."""
        hash_value = mmh3.hash128(file.encode('utf-8', errors='surrogateescape'), signed=False)
        return hash_value.to_bytes(16, byteorder='big')
