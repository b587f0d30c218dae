"""incrcov report command - write coverage reports."""

from pathlib import Path

import click

from incrcov.cli.utils import cli_errors, diff_options, load_collector, load_diff
from incrcov.config.models import IncrcovConfig
from incrcov.core.progress import pluralize, print_summary, status, task
from incrcov.coverage.collector import Collector
from incrcov.coverage.models import CoverageSummary
from incrcov.coverage.summary import merge_summaries, summarize_file_coverage
from incrcov.incremental.diff import DiffMap
from incrcov.incremental.filter import filter_file_coverage
from incrcov.reporter import Reporter
from incrcov.reports import ReportContext


def _summaries(collector: Collector, diff_map: DiffMap | None) -> dict[str, CoverageSummary]:
    full = []
    incremental = []
    for key in collector.files():
        fc = collector.file_coverage_for(key)
        full.append(summarize_file_coverage(fc))
        if diff_map is not None:
            reduced = filter_file_coverage(fc, diff_map.get(key))
            if reduced is not None:
                incremental.append(summarize_file_coverage(reduced))
    summaries = {"all files": merge_summaries(*full)}
    if diff_map is not None:
        summaries["incremental"] = merge_summaries(*incremental)
    return summaries


@click.command()
@click.argument(
    "coverage_files",
    nargs=-1,
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-d",
    "--dir",
    "output_dir",
    type=click.Path(file_okay=False, path_type=Path),
    help="Output directory (default: reporting.dir from config)",
)
@click.option(
    "-r",
    "--reporter",
    "formats",
    multiple=True,
    help="Report format, repeatable (default: reporting.reports from config)",
)
@diff_options
@click.pass_context
def report_command(
    ctx: click.Context,
    coverage_files: tuple[Path, ...],
    output_dir: Path | None,
    formats: tuple[str, ...],
    diff_json: Path | None,
    diff_patch: Path | None,
    base_path: Path | None,
) -> None:
    """Write coverage reports for COVERAGE_FILES (coverage-final.json files).

    With --diff-json or --diff, HTML pages dim unchanged lines and every
    summary gains an incremental row covering only the changed code.
    """
    config: IncrcovConfig = ctx.obj["config"]

    with cli_errors():
        collector = load_collector(coverage_files)
        diff_map = load_diff(diff_json, diff_patch, base_path)
        reporter = Reporter(config, output_dir)
        reporter.add_all(formats or config.reporting.reports)

        with task(f"Writing {pluralize(len(reporter.reports), 'report')}"):
            written = reporter.write(collector, ReportContext(diff_map=diff_map))

    status(f"Wrote {pluralize(len(written), 'file')} to {reporter.dir}", style="success")
    print_summary(f"Coverage ({pluralize(len(collector), 'file')})", _summaries(collector, diff_map))
