"""Hit and DuplicateBlock records produced by a scan."""

from typing import Any, Iterable, NamedTuple

import msgpack

from ..detect.lines import line_byte_size


class Hit(NamedTuple):
    """One location of a duplicate block.

    Attributes:
        file: '/'-separated path of the file, as enumerated from the patterns
        start_line: First line of the block in the file, 1-based inclusive
        end_line: Last line of the block in the file, 1-based inclusive

    Hits order by file, then start_line, then end_line.
    """
    file: str
    start_line: int
    end_line: int

    @property
    def line_count(self) -> int:
        return self.end_line - self.start_line + 1


class DuplicateBlock:
    """A run of lines found at two or more locations.

    Attributes:
        lines: The block text, verbatim from one of its occurrences. When indentation is
               ignored, occurrences may differ in leading whitespace from these lines.
        hits: Unique locations of the block, sorted. Every hit spans len(lines) lines.
    """

    def __init__(self, lines: Iterable[str], hits: Iterable[Hit]):
        self.lines: tuple[str, ...] = tuple(lines)
        self.hits: tuple[Hit, ...] = tuple(sorted(set(hits)))

    @property
    def line_count(self) -> int:
        return len(self.lines)

    @property
    def byte_count(self) -> int:
        """Size of the block text in bytes, counting one newline per line."""
        return sum(line_byte_size(line) + 1 for line in self.lines)

    @property
    def occurrences(self) -> int:
        return len(self.hits)

    @property
    def content(self) -> str:
        return ''.join(line + '\n' for line in self.lines)

    def sort_key(self) -> tuple:
        """Key ordering longer blocks first, then more frequent ones, then by text."""
        first_line = self.lines[0] if self.lines else ''
        return -self.line_count, -self.occurrences, first_line, self.lines

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DuplicateBlock):
            return False
        return self.lines == other.lines and self.hits == other.hits

    def __hash__(self) -> int:
        return hash((self.lines, self.hits))

    def __repr__(self) -> str:
        return f"DuplicateBlock(lines={self.line_count}, hits={list(self.hits)!r})"

    def to_dict(self) -> dict[str, Any]:
        """Convert to the report structure shared by all emitters."""
        return {
            'lines': self.line_count,
            'bytes': self.byte_count,
            'occurrences': self.occurrences,
            'hits': [
                {'file': hit.file, 'start_line': hit.start_line, 'end_line': hit.end_line}
                for hit in self.hits
            ],
            'content': self.content,
        }

    def to_msgpack(self) -> bytes:
        """Serialize for storage as msgpack([lines, [[file, start_line, end_line], ...]])."""
        result = msgpack.dumps([list(self.lines), [list(hit) for hit in self.hits]],
                               unicode_errors='surrogateescape')
        assert isinstance(result, bytes)
        return result

    @classmethod
    def from_msgpack(cls, data: bytes) -> "DuplicateBlock":
        decoded = msgpack.loads(data, unicode_errors='surrogateescape')
        assert isinstance(decoded, list)
        lines: list[str] = decoded[0]
        hits = [Hit(file, start_line, end_line) for file, start_line, end_line in decoded[1]]
        return cls(lines, hits)


def sort_blocks(blocks: Iterable[DuplicateBlock]) -> list[DuplicateBlock]:
    return sorted(blocks, key=DuplicateBlock.sort_key)
