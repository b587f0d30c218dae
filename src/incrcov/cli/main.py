"""incrcov CLI - incrcov command."""

from pathlib import Path

import click

from incrcov import __version__
from incrcov.cli.formats import formats_command
from incrcov.cli.report import report_command
from incrcov.cli.tree import tree_command
from incrcov.config import load_config
from incrcov.core.errors import ConfigError
from incrcov.core.logging import configure_logging, set_run_id


@click.group()
@click.version_option(version=__version__, prog_name="incrcov")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Project config file (default: ./.incrcov.yaml)",
)
@click.pass_context
def cli(ctx: click.Context, verbose: bool, config_path: Path | None) -> None:
    """incrcov - Istanbul coverage reports with incremental (diff) coverage."""
    ctx.ensure_object(dict)
    try:
        config = load_config(config_path=config_path, **({"verbose": True} if verbose else {}))
    except ConfigError as e:
        raise click.ClickException(e.message) from e

    logging_config = config.logging
    if verbose:
        logging_config = logging_config.model_copy(update={"level": "DEBUG"})
    configure_logging(config=logging_config)
    set_run_id()

    ctx.obj["verbose"] = verbose
    ctx.obj["config"] = config


cli.add_command(report_command, name="report")
cli.add_command(tree_command, name="tree")
cli.add_command(formats_command, name="formats")


if __name__ == "__main__":
    cli()
