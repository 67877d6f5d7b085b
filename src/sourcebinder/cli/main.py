"""SourceBinder CLI - srcbind command."""

from pathlib import Path

import click

from sourcebinder.cli.checkout import checkout_command
from sourcebinder.config import load_config
from sourcebinder.core.errors import ConfigError
from sourcebinder.core.logging import configure_logging


@click.group()
@click.version_option(version="0.1.0", prog_name="srcbind")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="YAML config file layered over ~/.config/sourcebinder/config.yaml",
)
@click.pass_context
def cli(ctx: click.Context, verbose: bool, config_path: Path | None) -> None:
    """SourceBinder - resolve versioned sources and check them out."""
    try:
        config = load_config(config_path)
    except ConfigError as e:
        raise click.ClickException(e.summary) from e

    logging_config = config.logging
    if verbose:
        logging_config = logging_config.model_copy(update={"level": "DEBUG"})
    configure_logging(config=logging_config)

    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["config"] = config


cli.add_command(checkout_command, name="checkout")


if __name__ == "__main__":
    cli()
