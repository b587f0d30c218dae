"""incrcov formats command - list report formats."""

from pathlib import Path

import click

from incrcov.reports import REPORT_REGISTRY, ReportOptions


@click.command()
def formats_command() -> None:
    """List the available report formats."""
    options = ReportOptions(dir=Path("."))
    for fmt in sorted(REPORT_REGISTRY):
        report = REPORT_REGISTRY[fmt](options)
        click.echo(f"{fmt:<10} {report.synopsis()}")
