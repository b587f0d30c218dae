"""Tests for the json, lcov, text-lcov and none report formats."""

import json
from pathlib import Path
from typing import Any

import pytest

from incrcov.core.errors import ErrorCode, InputError
from incrcov.coverage.collector import Collector
from incrcov.reports import (
    REPORT_REGISTRY,
    JsonReport,
    LcovOnlyReport,
    LcovReport,
    NoneReport,
    ReportContext,
    ReportOptions,
    TextLcovReport,
    create_report,
    lcov_records,
    report_formats,
)
from incrcov.store import MemoryStore

CALC_LCOV = [
    "TN:",
    "SF:/proj/src/calc.js",
    "FN:1,add",
    "FNF:1",
    "FNH:1",
    "FNDA:1,add",
    "DA:2,1",
    "DA:3,1",
    "DA:5,0",
    "DA:7,1",
    "LF:4",
    "LH:3",
    "BRDA:2,0,0,1",
    "BRDA:2,0,1,0",
    "BRF:2",
    "BRH:1",
    "end_of_record",
]


@pytest.fixture
def collector(calc_coverage: dict[str, Any]) -> Collector:
    c = Collector()
    c.add(calc_coverage)
    return c


# =============================================================================
# Registry
# =============================================================================


class TestRegistry:
    def test_formats(self) -> None:
        assert report_formats() == ["html", "json", "lcov", "lcovonly", "none", "text-lcov"]

    @pytest.mark.parametrize("fmt", sorted(REPORT_REGISTRY))
    def test_create_each(self, fmt: str, tmp_path: Path) -> None:
        report = create_report(fmt, ReportOptions(dir=tmp_path))

        assert report.report_type == fmt
        assert report.synopsis()

    def test_invalid_format(self, tmp_path: Path) -> None:
        with pytest.raises(InputError) as exc_info:
            create_report("xml", ReportOptions(dir=tmp_path))

        assert exc_info.value.code == ErrorCode.INPUT_INVALID_REPORT_FORMAT
        assert exc_info.value.message == "Invalid report format [xml]"


# =============================================================================
# JSON
# =============================================================================


class TestJsonReport:
    def test_writes_final_coverage(self, collector: Collector, tmp_path: Path) -> None:
        written = JsonReport(ReportOptions(dir=tmp_path)).write_report(collector, ReportContext())

        assert written == [tmp_path / "coverage-final.json"]
        data = json.loads(written[0].read_text())
        assert list(data) == ["/proj/src/calc.js"]
        assert data["/proj/src/calc.js"]["l"] == {"2": 1, "3": 1, "5": 0, "7": 1}

    def test_writes_incremental_coverage(self, collector: Collector, calc_path: str, tmp_path: Path) -> None:
        """
        Given a diff touching only line 5
        When the json report is written
        Then the incremental file keeps only the statement on line 5
        """
        context = ReportContext(diff_map={calc_path: [[5, 5]]})

        written = JsonReport(ReportOptions(dir=tmp_path)).write_report(collector, context)

        assert written == [tmp_path / "coverage-final.json", tmp_path / "coverage-incremental.json"]
        incremental = json.loads(written[1].read_text())[calc_path]
        assert incremental["s"] == {"2": 0}
        assert incremental["f"] == {}
        assert incremental["b"] == {}

    def test_files_without_ranges_are_left_out(self, collector: Collector, tmp_path: Path) -> None:
        context = ReportContext(diff_map={"/elsewhere.js": [[1, 2]]})

        JsonReport(ReportOptions(dir=tmp_path)).write_report(collector, context)

        assert json.loads((tmp_path / "coverage-incremental.json").read_text()) == {}

    def test_file_setting(self, collector: Collector, tmp_path: Path) -> None:
        options = ReportOptions(dir=tmp_path, settings={"file": "out.json"})

        assert JsonReport(options).write_report(collector, ReportContext()) == [tmp_path / "out.json"]


# =============================================================================
# LCOV
# =============================================================================


class TestLcov:
    def test_records(self, collector: Collector, calc_path: str) -> None:
        assert list(lcov_records(collector.file_coverage_for(calc_path))) == CALC_LCOV

    def test_lcovonly_writes_tracefile(self, collector: Collector, tmp_path: Path) -> None:
        written = LcovOnlyReport(ReportOptions(dir=tmp_path)).write_report(collector, ReportContext())

        assert written == [tmp_path / "lcov.info"]
        assert written[0].read_text() == "\n".join(CALC_LCOV) + "\n"

    def test_text_lcov_prints(self, collector: Collector, tmp_path: Path) -> None:
        printed: list[str] = []
        report = TextLcovReport(ReportOptions(dir=tmp_path), output=printed.append)

        assert report.write_report(collector, ReportContext()) == []
        assert printed == CALC_LCOV
        assert list(tmp_path.iterdir()) == []

    def test_lcov_adds_html_subdirectory(
        self, collector: Collector, calc_path: str, calc_source: str, tmp_path: Path
    ) -> None:
        report = LcovReport(ReportOptions(dir=tmp_path))
        report.html.store = MemoryStore({calc_path: calc_source})

        written = report.write_report(collector, ReportContext())

        assert written[0] == tmp_path / "lcov.info"
        assert tmp_path / "lcov-report" / "index.html" in written
        assert (tmp_path / "lcov-report" / "src" / "calc.js.html").is_file()


class TestNoneReport:
    def test_writes_nothing(self, collector: Collector, tmp_path: Path) -> None:
        assert NoneReport(ReportOptions(dir=tmp_path)).write_report(collector, ReportContext()) == []
        assert list(tmp_path.iterdir()) == []
