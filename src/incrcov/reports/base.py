"""Report protocol and the values handed to every report."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import TYPE_CHECKING, Any, Protocol

from incrcov.config.models import WatermarksConfig

if TYPE_CHECKING:
    from incrcov.coverage.collector import Collector
    from incrcov.incremental.diff import DiffMap
    from incrcov.templates import HtmlAssets


@dataclass(frozen=True, slots=True)
class ReportOptions:
    """Immutable per-report configuration.

    ``settings`` carries the format's entry from ``reporting.report_config``
    (e.g. ``{"file": "lcov.info"}``).
    """

    dir: Path
    watermarks: WatermarksConfig = field(default_factory=WatermarksConfig)
    verbose: bool = False
    settings: Mapping[str, Any] = field(default_factory=dict)
    assets: HtmlAssets | None = None

    def setting(self, key: str, default: Any = None) -> Any:
        return self.settings.get(key, default)

    def with_dir(self, directory: Path) -> ReportOptions:
        return replace(self, dir=directory)


@dataclass(frozen=True, slots=True)
class ReportContext:
    """Run-scoped data for one ``write_report`` call."""

    diff_map: DiffMap | None = None


class Report(Protocol):
    """A report format."""

    @property
    def report_type(self) -> str:
        """Registry tag (e.g., 'html', 'lcovonly')."""
        ...

    def synopsis(self) -> str:
        """One-line description shown by ``incrcov formats``."""
        ...

    def write_report(self, collector: Collector, context: ReportContext) -> list[Path]:
        """Write the report and return the paths written."""
        ...
