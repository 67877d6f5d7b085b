"""srcbind checkout command - fetch a remote reference and extract its tree."""

from pathlib import Path

import click

from sourcebinder.config.models import SourceBinderConfig
from sourcebinder.core.errors import SourceBinderError
from sourcebinder.core.progress import spinner, status
from sourcebinder.git import database_path_for
from sourcebinder.source import RepositoryBuilder


@click.command()
@click.argument("url")
@click.option(
    "--dest",
    required=True,
    type=click.Path(file_okay=False, path_type=Path),
    help="Directory to extract into (created if missing)",
)
@click.option("--branch", help="Check out the tip of this branch")
@click.option("--tag", help="Check out this tag")
@click.option("--rev", help="Check out this commit id or revision expression")
@click.option(
    "--database",
    type=click.Path(file_okay=False, path_type=Path),
    help="Reusable git database directory (default: from config, else temporary)",
)
@click.pass_context
def checkout_command(
    ctx: click.Context,
    url: str,
    dest: Path,
    branch: str | None,
    tag: str | None,
    rev: str | None,
    database: Path | None,
) -> None:
    """Check out URL at a branch, tag or revision into --dest.

    Without --branch, --tag or --rev the remote's default branch is used.
    """
    chosen = [opt for opt, value in (("--branch", branch), ("--tag", tag), ("--rev", rev)) if value]
    if len(chosen) > 1:
        raise click.UsageError(f"{' and '.join(chosen)} are mutually exclusive")

    config: SourceBinderConfig = ctx.obj["config"]

    try:
        builder = RepositoryBuilder.new(
            url,
            lock_timeout=config.git.lock_timeout_sec,
            use_credential_helper=config.git.use_credential_helper,
        ).dest(dest)
        if branch:
            builder = builder.branch(branch)
        elif tag:
            builder = builder.tag(tag)
        elif rev:
            builder = builder.rev(rev)

        if database is None and config.cache.database_root:
            database = database_path_for(url, Path(config.cache.database_root))
        if database is not None:
            builder = builder.database(database)

        repo = builder.build()
        with spinner(f"Fetching {url} ({repo.reference})"):
            summary = repo.checkout()
    except SourceBinderError as e:
        raise click.ClickException(e.summary) from e

    status(f"Checked out {summary.oid[:12]} into {summary.destination}", style="success")
    if summary.skipped_submodules:
        status(
            f"Skipped {len(summary.skipped_submodules)} submodule(s): "
            + ", ".join(summary.skipped_submodules),
            style="warning",
        )
    if database is not None:
        status(f"Database: {database}", indent=2)
    click.echo(summary.oid)
