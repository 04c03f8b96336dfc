"""Tests for detect module.

Test Files and Coverage:
========================

| Test File                  | Test Classes                 | Tested Constructs                          | Tested Functionalities                  |
|----------------------------|------------------------------|--------------------------------------------|-----------------------------------------|
| test_lines.py              | SplitLinesTest               | split_lines, read_lines                    | CRLF, BOM, trailing newline, bytes      |
| test_finder.py             | FindDuplicateBlocksTest      | find_duplicate_blocks                      | Extension, merging, filtering, ordering |
"""
