"""Write several report formats for one collector in a single pass.

Usage::

    reporter = Reporter(load_config())
    reporter.add_all(["lcovonly", "html"])
    written = reporter.write(collector, ReportContext(diff_map=diff_map))
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from incrcov.config.models import IncrcovConfig
from incrcov.core.logging import get_logger
from incrcov.coverage.collector import Collector
from incrcov.reports import Report, ReportContext, ReportOptions, create_report
from incrcov.templates import HtmlAssets, load_html_assets

log = get_logger("reporter")


class Reporter:
    """Holds the configured reports and writes them.

    Args:
        config: Loaded configuration.
        directory: Output directory; defaults to ``config.reporting.dir``.
    """

    def __init__(self, config: IncrcovConfig | None = None, directory: Path | str | None = None):
        self.config = config or IncrcovConfig()
        self.dir = Path(directory) if directory is not None else Path(self.config.reporting.dir)
        self.reports: dict[str, Report] = {}
        self._assets: HtmlAssets | None = None

    def _options_for(self, fmt: str) -> ReportOptions:
        if self._assets is None:
            self._assets = load_html_assets()
        reporting = self.config.reporting
        return ReportOptions(
            dir=self.dir,
            watermarks=reporting.watermarks,
            verbose=self.config.verbose,
            settings=dict(reporting.report_config.get(fmt, {})),
            assets=self._assets,
        )

    def add(self, fmt: str) -> None:
        """Add a report format; adding the same format twice is a no-op.

        Raises:
            InputError: If ``fmt`` is not a registered format.
        """
        if fmt in self.reports:
            return
        self.reports[fmt] = create_report(fmt, self._options_for(fmt))

    def add_all(self, fmts: Iterable[str]) -> None:
        for fmt in fmts:
            self.add(fmt)

    def write(self, collector: Collector, context: ReportContext | None = None) -> list[Path]:
        """Write every added report and return all paths written."""
        context = context or ReportContext()
        written: list[Path] = []
        for name, report in self.reports.items():
            log.info("write_report", report=name, dir=str(self.dir))
            written.extend(report.write_report(collector, context))
        return written
