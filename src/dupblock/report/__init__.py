"""Report module for duplicate block results.

This package contains:
- duplicate_block: Hit and DuplicateBlock, the result records, and their ordering
- emit: YAML and JSON rendering of a list of blocks
- store: ReportStore and ReportManifest for persisting a scan to disk
"""
