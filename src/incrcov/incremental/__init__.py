"""Incremental (diff-scoped) coverage."""

from incrcov.incremental.diff import (
    DiffMap,
    DiffRange,
    is_incremental_line,
    load_diff_map,
    normalize_diff_map,
    parse_unified_diff,
)
from incrcov.incremental.filter import Overlap, classify_range, filter_file_coverage

__all__ = [
    "DiffMap",
    "DiffRange",
    "Overlap",
    "classify_range",
    "filter_file_coverage",
    "is_incremental_line",
    "load_diff_map",
    "normalize_diff_map",
    "parse_unified_diff",
]
