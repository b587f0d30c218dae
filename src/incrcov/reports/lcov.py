"""LCOV tracefile output.

Record layout per source file::

    TN:
    SF:<path>
    FN:<line>,<name>          one per function
    FNF:<total> / FNH:<hit>
    FNDA:<hits>,<name>        one per function
    DA:<line>,<hits>          one per line
    LF:<total> / LH:<hit>
    BRDA:<line>,<block>,<branch>,<hits>
    BRF:<total> / BRH:<hit>
    end_of_record
"""

from collections.abc import Callable, Iterator
from pathlib import Path

import click

from incrcov.coverage.collector import Collector
from incrcov.coverage.models import FileCoverage
from incrcov.coverage.summary import summarize_file_coverage
from incrcov.reports.base import ReportContext, ReportOptions
from incrcov.reports.html import HtmlReport
from incrcov.reports.writer import FileWriter

DEFAULT_FILE = "lcov.info"


def lcov_records(fc: FileCoverage) -> Iterator[str]:
    """Yield the LCOV lines for one file."""
    summary = summarize_file_coverage(fc)

    yield "TN:"
    yield f"SF:{fc.path}"

    for fn_id in fc.f:
        meta = fc.fn_map.get(fn_id)
        if meta is not None:
            yield f"FN:{meta.line if meta.line is not None else ''},{meta.name}"
    yield f"FNF:{summary.functions.total}"
    yield f"FNH:{summary.functions.covered}"
    for fn_id, hits in fc.f.items():
        meta = fc.fn_map.get(fn_id)
        if meta is not None:
            yield f"FNDA:{hits},{meta.name}"

    for line, hits in fc.l.items():
        yield f"DA:{line},{hits}"
    yield f"LF:{summary.lines.total}"
    yield f"LH:{summary.lines.covered}"

    for br_id, hit_array in fc.b.items():
        meta = fc.branch_map.get(br_id)
        line = meta.line if meta is not None and meta.line is not None else ""
        for idx, hits in enumerate(hit_array):
            yield f"BRDA:{line},{br_id},{idx},{hits}"
    yield f"BRF:{summary.branches.total}"
    yield f"BRH:{summary.branches.covered}"
    yield "end_of_record"


class LcovOnlyReport:
    """Writes ``lcov.info``."""

    def __init__(self, options: ReportOptions):
        self.options = options
        self.file = str(options.setting("file", DEFAULT_FILE))

    @property
    def report_type(self) -> str:
        return "lcovonly"

    def synopsis(self) -> str:
        return "lcov coverage report that can be consumed by the lcov tool"

    def write_report(self, collector: Collector, context: ReportContext) -> list[Path]:  # noqa: ARG002
        lines: list[str] = []
        for key in collector.files():
            lines.extend(lcov_records(collector.file_coverage_for(key)))
        writer = FileWriter()
        writer.write_file(self.options.dir / self.file, "\n".join(lines) + "\n" if lines else "")
        return writer.written


class TextLcovReport:
    """Prints LCOV records through an output callable instead of a file."""

    def __init__(self, options: ReportOptions, output: Callable[[str], None] | None = None):
        self.options = options
        self.output = output or click.echo

    @property
    def report_type(self) -> str:
        return "text-lcov"

    def synopsis(self) -> str:
        return "lcov coverage report printed to standard output"

    def write_report(self, collector: Collector, context: ReportContext) -> list[Path]:  # noqa: ARG002
        for key in collector.files():
            for line in lcov_records(collector.file_coverage_for(key)):
                self.output(line)
        return []


class LcovReport:
    """``lcov.info`` plus the HTML report under ``<dir>/lcov-report``."""

    def __init__(self, options: ReportOptions):
        self.options = options
        self.lcov = LcovOnlyReport(options)
        self.html = HtmlReport(options.with_dir(options.dir / "lcov-report"))

    @property
    def report_type(self) -> str:
        return "lcov"

    def synopsis(self) -> str:
        return "combined lcovonly and html report that generates an lcov.info file as well as HTML"

    def write_report(self, collector: Collector, context: ReportContext) -> list[Path]:
        written = self.lcov.write_report(collector, context)
        written.extend(self.html.write_report(collector, context))
        return written
