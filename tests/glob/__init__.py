"""Tests for glob module.

Test Files and Coverage:
========================

| Test File                  | Test Classes                 | Tested Constructs                          | Tested Functionalities              |
|----------------------------|------------------------------|--------------------------------------------|-------------------------------------|
| test_pattern.py            | PatternCompileTest           | compile_pattern, split_base                | Base split, regex translation       |
| test_expand.py             | ExpandPatternsTest           | expand_patterns, iter_pattern_files        | Walks, literal files, dedup, order  |
"""
