"""Tests for report module.

Test Files and Coverage:
========================

| Test File                  | Test Classes                 | Tested Constructs                          | Tested Functionalities              |
|----------------------------|------------------------------|--------------------------------------------|-------------------------------------|
| test_duplicate_block.py    | DuplicateBlockTest           | DuplicateBlock, Hit, sort_blocks           | Sizes, hit order, block order       |
| test_emit.py               | EmitReportTest               | emit_report, build_report                  | YAML and JSON structure             |
| test_report_store.py       | ReportStoreTest              | ReportStore, ReportManifest                | DB write/read, file lookup, manifest|
"""
