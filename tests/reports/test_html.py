"""Tests for the HTML report."""

from pathlib import Path
from typing import Any

import pytest

from incrcov.core.errors import SourceLookupError
from incrcov.coverage.collector import Collector
from incrcov.coverage.models import Metrics
from incrcov.coverage.summary import blank_summary
from incrcov.coverage.tree import TreeSummarizer
from incrcov.reports import HtmlReport, LinkMapper, ReportContext, ReportOptions
from incrcov.reports.html import clean_path, report_class, show_ignores, show_line_execution_counts, show_picture
from incrcov.store import MemoryStore


@pytest.fixture
def collector(calc_coverage: dict[str, Any]) -> Collector:
    c = Collector()
    c.add(calc_coverage)
    return c


@pytest.fixture
def report(tmp_path: Path, calc_path: str, calc_source: str) -> HtmlReport:
    return HtmlReport(ReportOptions(dir=tmp_path), store=MemoryStore({calc_path: calc_source}))


# =============================================================================
# Helpers
# =============================================================================


class TestHelpers:
    @pytest.mark.parametrize(
        ("pct", "expected"),
        [(0.0, "low"), (49.99, "low"), (50.0, "medium"), (79.9, "medium"), (80.0, "high"), (100.0, "high")],
    )
    def test_report_class(self, pct: float, expected: str) -> None:
        assert report_class(Metrics(total=10, covered=0, pct=pct), (50.0, 80.0)) == expected

    def test_show_picture_full(self) -> None:
        assert "cover-full" in show_picture(100)
        assert "cover-full" not in show_picture(99.5)

    def test_show_ignores(self) -> None:
        assert show_ignores(blank_summary()) == '<span class="ignore-none">none</span>'

    def test_line_execution_counts(self) -> None:
        cells = show_line_execution_counts({1: 3, 2: 0}, 3).split("\n")

        assert cells == [
            '<span class="cline-any cline-yes">3×</span>',
            '<span class="cline-any cline-no">&nbsp;</span>',
            '<span class="cline-any cline-neutral">&nbsp;</span>',
        ]

    def test_clean_path_keeps_forward_slashes(self) -> None:
        assert clean_path("src/calc.js") == "src/calc.js"


class TestLinkMapper:
    def test_links_follow_tree(self, collector: Collector, calc_path: str) -> None:
        summarizer = TreeSummarizer()
        summarizer.add_summary(calc_path, blank_summary())
        tree = summarizer.build_tree()
        package = tree.get_node("src/")
        leaf = tree.get_node("src/calc.js")
        assert package is not None
        assert leaf is not None

        mapper = LinkMapper()

        assert mapper.from_parent(package) == "src/index.html"
        assert mapper.from_parent(leaf) == "calc.js.html"
        assert mapper.ancestor(leaf, 1) == "index.html"
        assert mapper.ancestor(leaf, 2) == "../index.html"


# =============================================================================
# Report output
# =============================================================================


class TestHtmlReport:
    def test_writes_index_per_directory_and_page_per_file(
        self, report: HtmlReport, collector: Collector, tmp_path: Path
    ) -> None:
        written = report.write_report(collector, ReportContext())

        assert written == [
            tmp_path / "index.html",
            tmp_path / "src" / "index.html",
            tmp_path / "src" / "calc.js.html",
        ]

    def test_index_links_packages(self, report: HtmlReport, collector: Collector, tmp_path: Path) -> None:
        report.write_report(collector, ReportContext())

        index = (tmp_path / "index.html").read_text()
        assert '<a href="src/index.html?t=' in index
        assert "Code coverage report for All files" in index
        assert "summary-line incremental" not in index

    def test_detail_page_annotates_source(self, report: HtmlReport, collector: Collector, tmp_path: Path) -> None:
        report.write_report(collector, ReportContext())

        page = (tmp_path / "src" / "calc.js.html").read_text()
        assert '<span class="cstat-no" title="statement not covered" >  return b;</span>' in page
        assert '<span class="cline-any cline-no">&nbsp;</span>' in page
        assert 'class="disabled"' not in page

    def test_incremental_rows_and_strip(
        self, report: HtmlReport, collector: Collector, calc_path: str, tmp_path: Path
    ) -> None:
        """
        Given a diff touching line 5 only
        When the report is written
        Then every summary row gets an incremental companion and lines outside the diff are dimmed
        """
        report.write_report(collector, ReportContext(diff_map={calc_path: [[5, 5]]}))

        index = (tmp_path / "src" / "index.html").read_text()
        assert index.count("summary-line origin") == 1
        assert index.count("summary-line incremental") == 1
        assert "Incremental Statements" in index

        page = (tmp_path / "src" / "calc.js.html").read_text()
        assert '<span class="disabled">function add(a, b) {</span>' in page

    def test_embedded_code_needs_no_store(
        self, calc_coverage: dict[str, Any], calc_path: str, calc_source: str, tmp_path: Path
    ) -> None:
        calc_coverage[calc_path]["code"] = calc_source.split("\n")
        collector = Collector()
        collector.add(calc_coverage)

        report = HtmlReport(ReportOptions(dir=tmp_path), store=MemoryStore())
        report.write_report(collector, ReportContext())

        assert "add(1, 2);" in (tmp_path / "src" / "calc.js.html").read_text()

    def test_missing_source_raises(self, collector: Collector, tmp_path: Path) -> None:
        report = HtmlReport(ReportOptions(dir=tmp_path), store=MemoryStore())

        with pytest.raises(SourceLookupError):
            report.write_report(collector, ReportContext())

    def test_source_is_escaped(self, report: HtmlReport, collector: Collector, tmp_path: Path) -> None:
        report.write_report(collector, ReportContext())

        page = (tmp_path / "src" / "calc.js.html").read_text()
        assert "if (a &lt; b) {" in page
        assert "if (a < b)" not in page
