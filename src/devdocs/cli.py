"""CLI interface for devdocs.

Command-line tool for serving documentation and exporting routes and the
search index.
"""

import json
import logging
import sys
from pathlib import Path

import click

from devdocs.config import Config
from devdocs.core.content import ContentSource


@click.group()
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose (debug) logging",
)
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """devdocs - Markdown documentation sites."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


config_option = click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help="Path to configuration file (default: auto-discover devdocs.yml)",
)
source_dir_option = click.option(
    "--source-dir",
    "-s",
    type=click.Path(exists=True, path_type=Path, file_okay=False),
    default=None,
    help="Documentation source directory (overrides config)",
)


@cli.command()
@config_option
@source_dir_option
@click.option(
    "--cache-dir",
    type=click.Path(path_type=Path, file_okay=False),
    default=None,
    help="Cache directory (overrides config)",
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
    "--live-reload/--no-live-reload",
    default=None,
    help="Enable/disable live reload (overrides config, default: enabled)",
)
@click.option(
    "--cache/--no-cache",
    default=None,
    help="Enable/disable caching (overrides config, default: enabled)",
)
@click.pass_context
def serve(
    ctx: click.Context,
    config_path: Path | None,
    source_dir: Path | None,
    cache_dir: Path | None,
    host: str | None,
    port: int | None,
    live_reload: bool | None,
    cache: bool | None,
) -> None:
    """Start the documentation server."""
    from devdocs.server import run_server

    config = _load_config(config_path).with_overrides(
        host=host,
        port=port,
        source_dir=source_dir,
        cache_dir=cache_dir,
        cache_enabled=cache,
        live_reload_enabled=live_reload,
    )

    click.echo(f"Starting server on {config.server.host}:{config.server.port}")
    click.echo(f"Source directory: {config.docs.source_dir}")
    if config.docs.cache_enabled:
        click.echo(f"Cache directory: {config.docs.cache_dir}")
    else:
        click.echo("Cache: disabled")
    if config.live_reload.enabled:
        click.echo("Live reload: enabled")
    else:
        click.echo("Live reload: disabled")

    run_server(config, verbose=ctx.obj["verbose"])


@cli.command()
@config_option
@source_dir_option
def routes(config_path: Path | None, source_dir: Path | None) -> None:
    """List every routable slug, one per line."""
    content = _content_source(config_path, source_dir)
    for slug in content.list_all_slugs():
        click.echo(slug)


@cli.command("search-index")
@config_option
@source_dir_option
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write the index to a file instead of stdout",
)
def search_index(
    config_path: Path | None,
    source_dir: Path | None,
    output: Path | None,
) -> None:
    """Export the search corpus as JSON."""
    content = _content_source(config_path, source_dir)
    entries = content.build_search_corpus()
    payload = json.dumps([entry.to_dict() for entry in entries], ensure_ascii=False, indent=2)

    if output is None:
        click.echo(payload)
        return

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(payload + "\n", encoding="utf-8")
    click.echo(
        click.style(f"Wrote {len(entries)} entries to {output}", fg="green"),
        err=True,
    )


def _load_config(config_path: Path | None) -> Config:
    """Load configuration or exit with an error.

    Args:
        config_path: Explicit config file, or None to auto-discover

    Returns:
        Loaded configuration

    Raises:
        SystemExit: If the configuration cannot be loaded
    """
    try:
        return Config.load(config_path)
    except (FileNotFoundError, ValueError) as e:
        click.echo(click.style(f"Error: {e}", fg="red"), err=True)
        sys.exit(1)


def _content_source(config_path: Path | None, source_dir: Path | None) -> ContentSource:
    config = _load_config(config_path).with_overrides(source_dir=source_dir)
    return ContentSource(config.docs.source_dir, site_name=config.site.site_name)


if __name__ == "__main__":
    cli()
