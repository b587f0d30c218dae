"""Reduce a file's coverage record to the entities touched by a diff.

Each statement, function and branch is classified against the file's diff
ranges in order. The first range that overlaps decides:

- ``delete``: the entity strictly contains the range on both sides
  (``start < diff_start and end > diff_end``); the entity is dropped.
- ``remain``: any other overlap; the entity is kept.

Entities that overlap no range are dropped. The line hit map and source code
pass through untouched.
"""

from __future__ import annotations

from collections.abc import Sequence
from enum import Enum
from typing import Any

from incrcov.coverage.models import FileCoverage
from incrcov.incremental.diff import DiffRange, normalize_ranges


class Overlap(str, Enum):
    DELETE = "delete"
    REMAIN = "remain"


def classify_range(
    span: tuple[int | None, int | None], diff: DiffRange | Sequence[int]
) -> Overlap | None:
    """Classify an entity line span against one diff range.

    Returns ``None`` for disjoint ranges, and for spans with no line data.
    """
    start, end = span
    if start is None or end is None:
        return None
    diff_start, diff_end = diff[0], diff[1]
    if start > diff_end or end < diff_start:
        return None
    if start < diff_start and end > diff_end:
        return Overlap.DELETE
    return Overlap.REMAIN


def _keeps(span: tuple[int | None, int | None], ranges: Sequence[DiffRange]) -> bool:
    for diff in ranges:
        result = classify_range(span, diff)
        if result is Overlap.DELETE:
            return False
        if result is Overlap.REMAIN:
            return True
    return False


def filter_file_coverage(
    fc: FileCoverage, diff_ranges: Sequence[DiffRange] | Sequence[Any] | None
) -> FileCoverage | None:
    """Build the incremental record for ``fc``.

    Args:
        fc: The full record. Not modified.
        diff_ranges: The file's changed-line ranges. Empty or malformed
            entries are ignored.

    Returns:
        A new record holding only the kept statements, functions and
        branches, or ``None`` when the file has no usable ranges.
    """
    if diff_ranges is None:
        return None
    ranges = normalize_ranges(list(diff_ranges), path=fc.path)
    if not ranges:
        return None

    result = FileCoverage(path=fc.path, l=dict(fc.l), code=list(fc.code) if fc.code is not None else None)

    for st_id, rng in fc.statement_map.items():
        if st_id in fc.s and _keeps(rng.line_span, ranges):
            result.statement_map[st_id] = rng
            result.s[st_id] = fc.s[st_id]

    for fn_id, fn in fc.fn_map.items():
        if fn_id in fc.f and _keeps(fn.line_span, ranges):
            result.fn_map[fn_id] = fn
            result.f[fn_id] = fc.f[fn_id]

    for br_id, branch in fc.branch_map.items():
        if br_id in fc.b and _keeps(branch.line_span, ranges):
            result.branch_map[br_id] = branch
            result.b[br_id] = list(fc.b[br_id])

    return result
