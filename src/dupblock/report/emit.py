"""Render duplicate blocks as YAML or JSON reports."""

import json
from typing import Any, Iterable, TextIO

import yaml

from .duplicate_block import DuplicateBlock

REPORT_FORMATS = ('yaml', 'json')


class ReportDumper(yaml.SafeDumper):
    """YAML dumper writing multi-line strings as literal block scalars."""


def _represent_str(dumper: yaml.SafeDumper, data: str) -> yaml.ScalarNode:
    if '\n' in data:
        return dumper.represent_scalar('tag:yaml.org,2002:str', data, style='|')
    return dumper.represent_scalar('tag:yaml.org,2002:str', data)


ReportDumper.add_representer(str, _represent_str)


def build_report(blocks: Iterable[DuplicateBlock]) -> dict[str, Any]:
    """Report structure: {'blocks': [{lines, bytes, occurrences, hits, content}, ...]} in block order."""
    return {'blocks': [block.to_dict() for block in blocks]}


def emit_yaml(blocks: Iterable[DuplicateBlock], stream: TextIO) -> None:
    yaml.dump(build_report(blocks), stream, Dumper=ReportDumper, sort_keys=False,
              default_flow_style=False, allow_unicode=True, width=float('inf'))


def emit_json(blocks: Iterable[DuplicateBlock], stream: TextIO) -> None:
    json.dump(build_report(blocks), stream, indent=2)
    stream.write('\n')


def emit_report(blocks: Iterable[DuplicateBlock], report_format: str, stream: TextIO) -> None:
    """Write blocks to stream in report_format ('yaml' or 'json')."""
    if report_format == 'yaml':
        emit_yaml(blocks, stream)
    elif report_format == 'json':
        emit_json(blocks, stream)
    else:
        raise ValueError(f"Unknown report format: {report_format}")
