"""Per-file metric computation and dimension-wise summary merging.

Percentages use Istanbul's rounding: two decimals, rounded half-up on the
third decimal, and 100.0 for an empty dimension.
"""

import math

from incrcov.coverage.models import DIMENSIONS, CoverageSummary, FileCoverage, Metrics


def percent(covered: int, total: int) -> float:
    if total > 0:
        return math.floor((1000 * 100 * covered / total + 5) / 10) / 100
    return 100.0


def make_metrics(total: int, covered: int, skipped: int = 0) -> Metrics:
    return Metrics(total=total, covered=covered, skipped=skipped, pct=percent(covered, total))


def blank_summary() -> CoverageSummary:
    """Summary with every dimension at zero totals and 100%."""
    return CoverageSummary()


def derive_line_hits(fc: FileCoverage) -> dict[int, int]:
    """Line hit counts implied by statement start lines.

    A line takes the highest hit count of the statements starting on it.
    """
    lines: dict[int, int] = {}
    for st_id, rng in fc.statement_map.items():
        line = rng.start.line
        if line is None:
            continue
        count = fc.s.get(st_id, 0)
        if line not in lines or lines[line] < count:
            lines[line] = count
    return lines


def _count(hits: int, skip: bool) -> tuple[int, int]:
    """Return (covered, skipped) increments for one entity."""
    if skip:
        return 0, 1
    return (1 if hits > 0 else 0), 0


def summarize_file_coverage(fc: FileCoverage) -> CoverageSummary:
    """Compute the four dimension metrics for one file."""
    line_hits = fc.l or derive_line_hits(fc)
    lines = make_metrics(
        total=len(line_hits),
        covered=sum(1 for hits in line_hits.values() if hits > 0),
    )

    covered = skipped = 0
    for st_id, hits in fc.s.items():
        rng = fc.statement_map.get(st_id)
        c, sk = _count(hits, rng is not None and rng.skip)
        covered += c
        skipped += sk
    statements = make_metrics(len(fc.s), covered, skipped)

    covered = skipped = 0
    for fn_id, hits in fc.f.items():
        fn = fc.fn_map.get(fn_id)
        c, sk = _count(hits, fn is not None and fn.skip)
        covered += c
        skipped += sk
    functions = make_metrics(len(fc.f), covered, skipped)

    total = covered = skipped = 0
    for br_id, hit_array in fc.b.items():
        meta = fc.branch_map.get(br_id)
        for idx, hits in enumerate(hit_array):
            location = meta.locations[idx] if meta is not None and idx < len(meta.locations) else None
            skip = meta is not None and (meta.skip or (location is not None and location.skip))
            c, sk = _count(hits, skip)
            total += 1
            covered += c
            skipped += sk
    branches = make_metrics(total, covered, skipped)

    return CoverageSummary(
        lines=lines,
        statements=statements,
        functions=functions,
        branches=branches,
    )


def merge_summaries(*summaries: CoverageSummary) -> CoverageSummary:
    """Sum summaries dimension by dimension and recompute percentages."""
    merged: dict[str, Metrics] = {}
    for name in DIMENSIONS:
        parts = [summary.dimension(name) for summary in summaries]
        merged[name] = make_metrics(
            total=sum(m.total for m in parts),
            covered=sum(m.covered for m in parts),
            skipped=sum(m.skipped for m in parts),
        )
    return CoverageSummary(**merged)
