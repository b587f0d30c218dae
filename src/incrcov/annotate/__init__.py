"""Source annotation with coverage markup."""

from incrcov.annotate.annotator import (
    AnnotatedLine,
    annotate_branches,
    annotate_file,
    annotate_functions,
    annotate_lines,
    annotate_statements,
    build_structured,
    source_for,
    split_source,
)
from incrcov.annotate.insertion_text import GT, LT, InsertionText, escape_markup_safe

__all__ = [
    "GT",
    "LT",
    "AnnotatedLine",
    "InsertionText",
    "annotate_branches",
    "annotate_file",
    "annotate_functions",
    "annotate_lines",
    "annotate_statements",
    "build_structured",
    "escape_markup_safe",
    "source_for",
    "split_source",
]
