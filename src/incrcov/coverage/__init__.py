"""Istanbul coverage data, summaries, collection, and the summary tree.

Usage:
    from incrcov.coverage import Collector, TreeSummarizer, summarize_file_coverage

    collector = Collector()
    collector.add_file(Path("coverage/coverage-final.json"))

    summarizer = TreeSummarizer()
    for path in collector.files():
        summarizer.add_summary(path, summarize_file_coverage(collector.file_coverage_for(path)))
    tree = summarizer.build_tree()
"""

from incrcov.coverage.collector import (
    Collector,
    load_coverage_file,
    merge_file_coverage,
    parse_coverage_object,
)
from incrcov.coverage.models import (
    DIMENSIONS,
    BranchMeta,
    CoverageParseError,
    CoverageSummary,
    FileCoverage,
    FunctionMeta,
    Metrics,
    Position,
    Range,
)
from incrcov.coverage.summary import (
    blank_summary,
    merge_summaries,
    percent,
    summarize_file_coverage,
)
from incrcov.coverage.tree import (
    TreeNode,
    TreeSummarizer,
    TreeSummary,
    find_common_prefix,
)

__all__ = [
    # Models
    "DIMENSIONS",
    "BranchMeta",
    "CoverageParseError",
    "CoverageSummary",
    "FileCoverage",
    "FunctionMeta",
    "Metrics",
    "Position",
    "Range",
    # Summary
    "blank_summary",
    "merge_summaries",
    "percent",
    "summarize_file_coverage",
    # Collector
    "Collector",
    "load_coverage_file",
    "merge_file_coverage",
    "parse_coverage_object",
    # Tree
    "TreeNode",
    "TreeSummarizer",
    "TreeSummary",
    "find_common_prefix",
]
