"""CLI utilities."""

from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from pathlib import Path

import click

from incrcov.core.errors import IncrcovError
from incrcov.core.logging import get_logger
from incrcov.coverage.collector import Collector
from incrcov.incremental.diff import DiffMap, load_diff_map, parse_unified_diff

log = get_logger("cli")


@contextmanager
def cli_errors() -> Iterator[None]:
    """Turn domain errors into ``click.ClickException`` (exit code 1)."""
    try:
        yield
    except IncrcovError as e:
        log.debug("command_failed", **e.to_dict())
        raise click.ClickException(e.message) from e


def load_collector(coverage_files: Sequence[Path]) -> Collector:
    """Collect every coverage-final.json given on the command line."""
    collector = Collector()
    for path in coverage_files:
        collector.add_file(path)
    return collector


def load_diff(
    diff_json: Path | None,
    diff_patch: Path | None,
    base_path: Path | None,
) -> DiffMap | None:
    """Resolve the diff map from ``--diff-json`` or ``--diff``, if either was given.

    Raises:
        click.UsageError: If both options were given.
    """
    if diff_json is not None and diff_patch is not None:
        raise click.UsageError("--diff-json and --diff are mutually exclusive")
    if diff_json is not None:
        return load_diff_map(diff_json)
    if diff_patch is not None:
        text = diff_patch.read_text(encoding="utf-8")
        root = base_path.resolve() if base_path is not None else Path.cwd()
        return parse_unified_diff(text, base_path=root)
    return None


def diff_options(func: click.decorators.FC) -> click.decorators.FC:
    """Shared ``--diff-json`` / ``--diff`` / ``--base-path`` options."""
    func = click.option(
        "--base-path",
        type=click.Path(exists=True, file_okay=False, path_type=Path),
        help="Directory that paths in --diff are relative to (default: current directory)",
    )(func)
    func = click.option(
        "--diff",
        "diff_patch",
        type=click.Path(exists=True, dir_okay=False, path_type=Path),
        help="Unified diff (e.g. `git diff` output) giving the changed lines",
    )(func)
    func = click.option(
        "--diff-json",
        type=click.Path(exists=True, dir_okay=False, path_type=Path),
        help="JSON map of absolute path -> [[start, end], ...] changed-line ranges",
    )(func)
    return func
