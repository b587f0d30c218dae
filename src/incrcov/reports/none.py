"""Report that writes nothing."""

from pathlib import Path

from incrcov.coverage.collector import Collector
from incrcov.reports.base import ReportContext, ReportOptions


class NoneReport:
    def __init__(self, options: ReportOptions):
        self.options = options

    @property
    def report_type(self) -> str:
        return "none"

    def synopsis(self) -> str:
        return "Does nothing. Useful to override default behavior and suppress reporting entirely"

    def write_report(self, collector: Collector, context: ReportContext) -> list[Path]:  # noqa: ARG002
        return []
