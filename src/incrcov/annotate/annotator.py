"""Overlay coverage markup on source lines.

Four passes run over one file's line buffer in a fixed order: lines,
branches, functions, statements. Statement spans usually cover whole lines,
so they go last and enclose the narrower branch and function markers.
Ranges that span several lines are collapsed onto their start line, running
to its end.

Markup brackets are written as ``LT``/``GT`` placeholders by ``InsertionText``
so that escaping the source text leaves them intact.
"""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Literal

from incrcov.annotate.insertion_text import InsertionText
from incrcov.coverage.models import FileCoverage, Range
from incrcov.incremental.diff import is_incremental_line

Covered = Literal["yes", "no", "neutral"]

_LINE_SPLIT = re.compile(r"(?:\r?\n)|\r")
_CLOSE_SPAN = "</span>"


def _title(text: str) -> str:
    return f' title="{text}" '


@dataclass(slots=True)
class AnnotatedLine:
    """One source line with its coverage state and pending markup."""

    line: int
    covered: Covered | None
    text: InsertionText
    incremental: bool

    def to_dict(self) -> dict[str, Any]:
        return {
            "line": self.line,
            "covered": self.covered or "neutral",
            "text": self.text.to_html(),
            "incremental": self.incremental,
        }


def split_source(source: str) -> list[str]:
    return _LINE_SPLIT.split(source)


def source_for(fc: FileCoverage) -> str | None:
    """Source embedded in the record (``code`` lines), if any."""
    if fc.code is None:
        return None
    return "\n".join(fc.code) + "\n"


def build_structured(
    fc: FileCoverage, source: str, diff_map: Mapping[str, Sequence[Any]] | None = None
) -> list[AnnotatedLine]:
    """Line buffer with a line-0 sentinel so indexes match 1-based line numbers.

    Without a diff map every line counts as incremental. With one, only lines
    inside the file's ranges do.
    """
    structured = [AnnotatedLine(line=0, covered=None, text=InsertionText(""), incremental=False)]
    for number, text in enumerate(split_source(source), start=1):
        incremental = diff_map is None or is_incremental_line(diff_map, fc.path, number)
        structured.append(
            AnnotatedLine(
                line=number,
                covered=None,
                text=InsertionText(text, consume_blanks=True),
                incremental=incremental,
            )
        )
    return structured


def _target(structured: list[AnnotatedLine], line: int | None) -> AnnotatedLine | None:
    if line is None or line <= 0 or line >= len(structured):
        return None
    return structured[line]


def _wrap_range(structured: list[AnnotatedLine], rng: Range | None, open_markup: str) -> None:
    if rng is None:
        return
    start_line, end_line = rng.start.line, rng.end.line
    start_col, end_col = rng.start.column, rng.end.column
    if start_line is None or start_col is None:
        return
    item = _target(structured, start_line)
    if item is None:
        return
    text = item.text
    if end_line != start_line or end_col is None:
        stop = text.original_length
    else:
        stop = end_col + 1
    text.wrap(start_col, open_markup, stop, _CLOSE_SPAN)


def annotate_lines(fc: FileCoverage, structured: list[AnnotatedLine]) -> None:
    for line_number, count in fc.l.items():
        item = _target(structured, line_number)
        if item is not None:
            item.covered = "yes" if count > 0 else "no"
    for item in structured[1:]:
        if item.covered is None:
            item.covered = "neutral"
        if not item.incremental:
            item.text.wrap_line('<span class="disabled">', _CLOSE_SPAN)


def annotate_branches(fc: FileCoverage, structured: list[AnnotatedLine]) -> None:
    for br_id, hits in fc.b.items():
        meta = fc.branch_map.get(br_id)
        # Only partially taken branches are highlighted
        if meta is None or sum(hits) <= 0:
            continue
        for idx, count in enumerate(hits):
            if count != 0 or idx >= len(meta.locations):
                continue
            location = meta.locations[idx]
            if location is None:
                continue
            skip = meta.skip or location.skip
            if meta.type == "if":
                item = _target(structured, location.start.line)
                if item is None or location.start.column is None:
                    continue
                cls = "skip-if-branch" if skip else "missing-if-branch"
                label = "if" if idx == 0 else "else"
                glyph = "I" if idx == 0 else "E"
                item.text.insert(
                    location.start.column,
                    f'<span class="{cls}"{_title(label + " path not taken")}>{glyph}</span>',
                    consume_blanks=False,
                )
            else:
                cls = "cbranch-skip" if skip else "cbranch-no"
                _wrap_range(
                    structured,
                    location,
                    f'<span class="branch-{idx} {cls}"{_title("branch not covered")}>',
                )


def annotate_functions(fc: FileCoverage, structured: list[AnnotatedLine]) -> None:
    for fn_id, count in fc.f.items():
        meta = fc.fn_map.get(fn_id)
        if meta is None or count > 0:
            continue
        cls = "fstat-skip" if meta.skip else "fstat-no"
        _wrap_range(structured, meta.loc or meta.decl, f'<span class="{cls}"{_title("function not covered")}>')


def annotate_statements(fc: FileCoverage, structured: list[AnnotatedLine]) -> None:
    for st_id, count in fc.s.items():
        meta = fc.statement_map.get(st_id)
        if meta is None or count > 0:
            continue
        cls = "cstat-skip" if meta.skip else "cstat-no"
        _wrap_range(structured, meta, f'<span class="{cls}"{_title("statement not covered")}>')


def annotate_file(
    fc: FileCoverage, source: str, diff_map: Mapping[str, Sequence[Any]] | None = None
) -> list[AnnotatedLine]:
    """Annotate every line of ``source`` with ``fc``'s coverage.

    Returns the 1-indexed annotated lines (sentinel removed).
    """
    structured = build_structured(fc, source, diff_map)
    annotate_lines(fc, structured)
    annotate_branches(fc, structured)
    annotate_functions(fc, structured)
    annotate_statements(fc, structured)
    return structured[1:]
