"""CLI interface for mdwiki.

Command-line tool for serving and bootstrapping Markdown sites.
"""

import logging
import sys
from pathlib import Path

import click

from mdwiki.config import Config
from mdwiki.core.errors import ConfigLoadError


@click.group()
def cli() -> None:
    """mdwiki - Markdown pages you can edit in the browser."""


@cli.command()
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help="Path to configuration file (default: auto-discover mdwiki.toml)",
)
@click.option(
    "--host",
    default=None,
    help="Host to bind to (overrides config)",
)
@click.option(
    "--port",
    "-p",
    type=int,
    default=None,
    help="Port to bind to (overrides config)",
)
@click.option(
    "--doc-root",
    type=click.Path(path_type=Path, file_okay=False),
    default=None,
    help="Document root directory (overrides config)",
)
@click.option(
    "--template-dir",
    type=click.Path(path_type=Path, file_okay=False),
    default=None,
    help="Page template directory (overrides config)",
)
@click.option(
    "--static-dir",
    type=click.Path(path_type=Path, file_okay=False),
    default=None,
    help="Static assets directory served under /_static (overrides config)",
)
@click.option(
    "--site-config",
    type=click.Path(path_type=Path, dir_okay=False),
    default=None,
    help="YAML site configuration file (overrides config)",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose output (log every request decision)",
)
def serve(
    config_path: Path | None,
    host: str | None,
    port: int | None,
    doc_root: Path | None,
    template_dir: Path | None,
    static_dir: Path | None,
    site_config: Path | None,
    verbose: bool,
) -> None:
    """Start the content server."""
    from mdwiki.server import run_server

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = Config.load(config_path).with_overrides(
            host=host,
            port=port,
            doc_root=doc_root,
            template_dir=template_dir,
            static_dir=static_dir,
            config_file=site_config,
        )
    except (FileNotFoundError, ValueError) as e:
        click.echo(click.style(f"Error: {e}", fg="red"), err=True)
        sys.exit(1)

    click.echo(f"Starting server on {config.server.host}:{config.server.port}")
    click.echo(f"Document root: {config.site.doc_root}")
    click.echo(f"Templates: {config.site.template_dir}")
    click.echo(f"Site config: {config.site.config_file}")

    try:
        run_server(config)
    except ConfigLoadError as e:
        click.echo(click.style(f"Error: {e}", fg="red"), err=True)
        sys.exit(1)


@cli.command()
@click.argument(
    "directory",
    type=click.Path(path_type=Path, file_okay=False),
    default=Path("."),
)
def init(directory: Path) -> None:
    """Create a starter site in DIRECTORY (default: current directory)."""
    from mdwiki.assets import copy_skeleton

    created = copy_skeleton(directory)
    if not created:
        click.echo("Nothing to do, all files already exist.")
        return

    for relative in created:
        click.echo(f"  -> {relative}")
    click.echo(
        click.style(f"\nSite initialized in {directory}", fg="green", bold=True),
    )
    click.echo(f"Run 'mdwiki serve -c {directory / 'mdwiki.toml'}' to start.")


if __name__ == "__main__":
    cli()
