from .settings import ConfigurationError, Settings
from .glob.pattern import CompiledPattern, PatternError, compile_pattern
from .glob.expand import expand_patterns
from .detect.lines import LoadedFile, read_lines
from .detect.finder import find_duplicate_blocks
from .report.duplicate_block import DuplicateBlock, Hit
from .report.store import ReportManifest, ReportStore
from .utils.processor import Processor
from .scanner import Scanner, ScanResult
