"""incrcov tree command - print the summary tree as JSON."""

import json
from pathlib import Path

import click

from incrcov.cli.utils import cli_errors, diff_options, load_collector, load_diff
from incrcov.coverage.summary import summarize_file_coverage
from incrcov.coverage.tree import TreeSummarizer
from incrcov.incremental.filter import filter_file_coverage


@click.command()
@click.argument(
    "coverage_files",
    nargs=-1,
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@diff_options
@click.option("--incremental", is_flag=True, help="Print the tree of changed code only")
def tree_command(
    coverage_files: tuple[Path, ...],
    diff_json: Path | None,
    diff_patch: Path | None,
    base_path: Path | None,
    incremental: bool,
) -> None:
    """Print the coverage summary tree for COVERAGE_FILES as JSON."""
    with cli_errors():
        collector = load_collector(coverage_files)
        diff_map = load_diff(diff_json, diff_patch, base_path)
        if incremental and diff_map is None:
            raise click.UsageError("--incremental requires --diff-json or --diff")

        summarizer = TreeSummarizer()
        incremental_summarizer = TreeSummarizer()
        for key in collector.files():
            fc = collector.file_coverage_for(key)
            summarizer.add_summary(key, summarize_file_coverage(fc))
            if diff_map is not None:
                reduced = filter_file_coverage(fc, diff_map.get(key))
                if reduced is not None:
                    incremental_summarizer.add_summary(key, summarize_file_coverage(reduced))

        tree = summarizer.build_tree()
        if incremental:
            tree = incremental_summarizer.build_tree(tree.prefix)

    click.echo(json.dumps(tree.root.to_dict(), indent=2))
