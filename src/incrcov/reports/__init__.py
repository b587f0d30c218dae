"""Report formats and their registry.

Formats:
    - html: navigable HTML pages per directory and file
    - json: coverage-final.json (+ coverage-incremental.json with a diff)
    - lcovonly: lcov.info tracefile
    - lcov: lcovonly plus html under lcov-report/
    - text-lcov: LCOV records printed to stdout
    - none: no output
"""

from collections.abc import Callable

from incrcov.core.errors import InputError

from .base import Report, ReportContext, ReportOptions
from .html import HtmlReport, LinkMapper
from .json import JsonReport
from .lcov import LcovOnlyReport, LcovReport, TextLcovReport, lcov_records
from .none import NoneReport
from .writer import FileWriter

REPORT_REGISTRY: dict[str, Callable[[ReportOptions], Report]] = {
    "html": HtmlReport,
    "json": JsonReport,
    "lcov": LcovReport,
    "lcovonly": LcovOnlyReport,
    "none": NoneReport,
    "text-lcov": TextLcovReport,
}

__all__ = [
    "REPORT_REGISTRY",
    "FileWriter",
    "HtmlReport",
    "JsonReport",
    "LcovOnlyReport",
    "LcovReport",
    "LinkMapper",
    "NoneReport",
    "Report",
    "ReportContext",
    "ReportOptions",
    "TextLcovReport",
    "create_report",
    "lcov_records",
    "report_formats",
]


def create_report(fmt: str, options: ReportOptions) -> Report:
    """Instantiate the report registered under ``fmt``.

    Raises:
        InputError: If ``fmt`` is not a registered format.
    """
    factory = REPORT_REGISTRY.get(fmt)
    if factory is None:
        raise InputError.invalid_report_format(fmt)
    return factory(options)


def report_formats() -> list[str]:
    return sorted(REPORT_REGISTRY)
