import argparse
import datetime
import logging
import sys
import textwrap
from pathlib import Path

from . import Processor, Scanner, Settings, ConfigurationError
from .detect.finder import validate_min_lines
from .report.emit import REPORT_FORMATS, emit_report
from .report.store import ReportManifest, ReportStore
from .settings import (
    SETTING_IGNORE_INDENTATION,
    SETTING_LOG_LEVEL,
    SETTING_LOG_PATH,
    SETTING_MIN_LINES,
    SETTING_PATTERNS,
    SETTING_REPORT_FORMAT,
)

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def dupblock_main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog='dupblock',
        description='Find blocks of lines that are duplicated across files selected by glob patterns.',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=textwrap.dedent('''
            Examples:
              dupblock scan --min-lines 9 "src/**/*.py"
              dupblock scan --ignore-indentation --min-lines 5 --report scan.report "./foo/**/*.cpp" "*.c"
              dupblock show scan.report --file src/main.c
            ''').strip()
    )
    parser.add_argument(
        '--config',
        metavar='PATH',
        help='Path to a TOML settings file. If not provided, uses DUPBLOCK_CONFIG environment variable or '
             'dupblock.toml in the current directory when present.')
    parser.add_argument(
        '--debug',
        action='store_true',
        help='Print diagnostic messages to standard error')
    parser.add_argument(
        '--log-file',
        metavar='PATH',
        help='Path to log file. If not provided, uses logging.path from settings or standard error.')
    parser.add_argument(
        '--log-level',
        metavar='LEVEL',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
        help='Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL). Defaults to DEBUG with --debug, INFO '
             'otherwise.')
    subparsers = parser.add_subparsers(
        dest='command',
        title='Commands',
        description='Available commands',
        help='Use "dupblock COMMAND --help" for command-specific help',
        required=True
    )

    parser_scan = subparsers.add_parser(
        'scan',
        help='Scan files for duplicated blocks of lines',
        description='Reports every block of at least --min-lines consecutive lines that appears in two or more '
                    'places among the files matched by the patterns. Patterns support "*" and "?" within one '
                    'path segment and "**" across directories.',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=textwrap.dedent('''
            Examples:
              dupblock scan --min-lines 6 "src/**/*.py" "tests/*.py"
              dupblock scan --min-lines 4 --format json --report out.report "lib/**"
            ''').strip())
    parser_scan.add_argument(
        'patterns',
        nargs='*',
        metavar='PATTERN',
        help='Glob patterns selecting the files to scan (default: scan.patterns from settings)')
    parser_scan.add_argument(
        '--min-lines',
        type=int,
        metavar='N',
        help='Minimum number of lines in a reported block (default: scan.min_lines from settings)')
    parser_scan.add_argument(
        '--ignore-indentation',
        action='store_true',
        help='Ignore leading spaces and tabs when comparing lines')
    parser_scan.add_argument(
        '--format',
        choices=REPORT_FORMATS,
        help='Output format (default: report.format from settings, or yaml)')
    parser_scan.add_argument(
        '--report',
        metavar='DIR',
        help='Also store the report in DIR for later use with "dupblock show"')
    parser_scan.add_argument(
        '--jobs',
        type=int,
        metavar='N',
        help='Number of worker processes used to read files (default: number of CPUs)')
    parser_scan.set_defaults(method=_scan)

    parser_show = subparsers.add_parser(
        'show',
        help='Print a stored report',
        description='Prints the duplicate blocks stored by "dupblock scan --report".')
    parser_show.add_argument(
        'report_dir',
        metavar='DIR',
        help='Report directory written by "dupblock scan --report"')
    parser_show.add_argument(
        '--file',
        metavar='PATH',
        help='Only show blocks with an occurrence in PATH, given as it appears in the report')
    parser_show.add_argument(
        '--format',
        choices=REPORT_FORMATS,
        help='Output format (default: report.format from settings, or yaml)')
    parser_show.set_defaults(method=_show)

    args = parser.parse_args(argv)

    try:
        settings = Settings.locate(args.config)
        configure_logging(args, settings)
        args.method(settings, args, sys.stdout)
    except ConfigurationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0


def configure_logging(args, settings: Settings) -> bool:
    """Configure the root logger from --debug, --log-file and --log-level, falling back to settings.

    Returns:
        True if logging was configured, False if the defaults were left in place
    """
    log_file = args.log_file or settings.get(SETTING_LOG_PATH)
    log_level = args.log_level or settings.get(SETTING_LOG_LEVEL)

    if not (args.debug or log_file or log_level):
        return False

    if log_level is None:
        log_level = 'DEBUG' if args.debug else 'INFO'

    level = logging.getLevelName(str(log_level).upper())
    if not isinstance(level, int):
        raise ConfigurationError(f"Unknown logging level: {log_level}")

    if log_file:
        logging.basicConfig(filename=str(log_file), level=level, format=LOG_FORMAT, force=True)
    else:
        logging.basicConfig(stream=sys.stderr, level=level, format=LOG_FORMAT, force=True)
    return True


def _report_format(settings: Settings, args) -> str:
    report_format = args.format or settings.get(SETTING_REPORT_FORMAT, 'yaml')
    if report_format not in REPORT_FORMATS:
        raise ConfigurationError(f"Unknown report format: {report_format}")
    return report_format


def _scan(settings: Settings, args, output):
    patterns = args.patterns or settings.get(SETTING_PATTERNS, [])
    if isinstance(patterns, str):
        patterns = [patterns]

    min_lines = args.min_lines if args.min_lines is not None else settings.get(SETTING_MIN_LINES)
    if min_lines is None:
        raise ConfigurationError("--min-lines is required (or scan.min_lines in settings)")
    validate_min_lines(min_lines)

    configured_ignore_indentation = settings.get(SETTING_IGNORE_INDENTATION, False)
    if not isinstance(configured_ignore_indentation, bool):
        raise ConfigurationError(
            f"{SETTING_IGNORE_INDENTATION} must be true or false, got {configured_ignore_indentation!r}")
    ignore_indentation = args.ignore_indentation or configured_ignore_indentation

    if args.jobs is not None and args.jobs < 1:
        raise ConfigurationError(f"--jobs must be at least 1, got {args.jobs}")

    report_format = _report_format(settings, args)

    with Processor(args.jobs) as processor:
        result = Scanner(processor, min_lines, ignore_indentation).scan(patterns)

    emit_report(result.blocks, report_format, output)

    if args.report:
        manifest = ReportManifest(
            timestamp=datetime.datetime.now(datetime.UTC).isoformat(),
            patterns=list(patterns),
            min_lines=min_lines,
            ignore_indentation=ignore_indentation,
            files_scanned=len(result.files) - len(result.skipped),
            files_skipped=result.skipped
        )
        ReportStore(Path(args.report)).write_report(manifest, result.blocks)


def _show(settings: Settings, args, output):
    report_format = _report_format(settings, args)

    with ReportStore(Path(args.report_dir)) as store:
        if args.file:
            blocks = store.blocks_for_file(Path(args.file).as_posix())
        else:
            blocks = list(store.iter_blocks())

    emit_report(blocks, report_format, output)


if __name__ == '__main__':
    sys.exit(dupblock_main())
