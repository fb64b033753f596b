"""rpclens CLI - rpclens command."""

from pathlib import Path

import click

from rpclens import __version__
from rpclens.cli.calls import calls_command
from rpclens.cli.check import check_command
from rpclens.cli.complete import complete_command
from rpclens.cli.watch import watch_command
from rpclens.config.loader import load_config
from rpclens.core.errors import ConfigError
from rpclens.core.logging import configure_logging


@click.group()
@click.version_option(version=__version__, prog_name="rpclens")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.option(
    "--config-dir",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=None,
    help="Project directory holding .rpclens/config.yaml (default: cwd)",
)
@click.option(
    "--config",
    "config_file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Config file to use instead of the project config",
)
@click.pass_context
def cli(ctx: click.Context, verbose: bool, config_dir: Path | None, config_file: Path | None) -> None:
    """rpclens - Validate RPC call sites against a procedure catalog."""
    ctx.ensure_object(dict)
    try:
        config = load_config(config_dir or Path.cwd(), config_file=config_file)
    except ConfigError as e:
        raise click.ClickException(str(e)) from e

    logging_config = config.logging
    if verbose:
        logging_config = logging_config.model_copy(update={"level": "DEBUG"})
    configure_logging(config=logging_config)

    ctx.obj["verbose"] = verbose
    ctx.obj["config"] = config


cli.add_command(check_command, name="check")
cli.add_command(calls_command, name="calls")
cli.add_command(complete_command, name="complete")
cli.add_command(watch_command, name="watch")


if __name__ == "__main__":
    cli()
