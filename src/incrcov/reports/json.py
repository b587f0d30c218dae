"""JSON dump of the collected coverage records."""

import json
from pathlib import Path
from typing import Any

from incrcov.core.logging import get_logger
from incrcov.coverage.collector import Collector
from incrcov.incremental.filter import filter_file_coverage
from incrcov.reports.base import ReportContext, ReportOptions
from incrcov.reports.writer import FileWriter

log = get_logger("reports.json")

DEFAULT_FILE = "coverage-final.json"
DEFAULT_INCREMENTAL_FILE = "coverage-incremental.json"


class JsonReport:
    """Writes ``coverage-final.json`` and, with a diff map, ``coverage-incremental.json``."""

    def __init__(self, options: ReportOptions):
        self.options = options
        self.file = str(options.setting("file", DEFAULT_FILE))
        self.incremental_file = str(options.setting("incremental_file", DEFAULT_INCREMENTAL_FILE))

    @property
    def report_type(self) -> str:
        return "json"

    def synopsis(self) -> str:
        return "prints the coverage object as JSON to a file"

    def write_report(self, collector: Collector, context: ReportContext) -> list[Path]:
        writer = FileWriter()
        final: dict[str, Any] = {
            key: collector.file_coverage_for(key).to_dict() for key in collector.files()
        }
        writer.write_file(self.options.dir / self.file, json.dumps(final))

        if context.diff_map is not None:
            incremental: dict[str, Any] = {}
            for key in collector.files():
                reduced = filter_file_coverage(collector.file_coverage_for(key), context.diff_map.get(key))
                if reduced is not None:
                    incremental[key] = reduced.to_dict()
            log.debug("incremental_files", count=len(incremental))
            writer.write_file(self.options.dir / self.incremental_file, json.dumps(incremental))

        return writer.written
