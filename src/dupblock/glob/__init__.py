"""Glob support for selecting the files to scan.

This package contains:
- pattern: compilation of glob patterns into a base directory and a relative-path matcher
- expand: enumeration of the files matched by compiled patterns
"""
