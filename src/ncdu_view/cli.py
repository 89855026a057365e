#!/usr/bin/env python
import os
import sys

import click
import orjson
import uvicorn

from .config import CONFIG_ENV_VAR, load_config
from .exceptions import NcduViewException
from .formatting import format_size
from .resolver import resolve, split_path
from .snapshot import build_snapshot


def _load_snapshot(export_file: str):
    try:
        with open(export_file, "rb") as f:
            raw = f.read()
        return build_snapshot(raw, source=export_file)
    except OSError as e:
        click.echo(click.style(f"Error: cannot read {export_file}: {e}", fg="red"), err=True)
    except NcduViewException as e:
        click.echo(click.style(f"Error: {e.detail}", fg="red"), err=True)
    sys.exit(1)


@click.group()
def cli():
    """Browse ncdu disk-usage exports."""
    pass


@cli.command()
@click.option("-c", "--config", "config_file", type=click.Path(exists=True, dir_okay=False),
              help="YAML configuration file.")
@click.option("--host", default=None, help="Host address to bind to (overrides config).")
@click.option("-p", "--port", default=None, type=int, help="Port to bind to (overrides config).")
@click.option("--reload", is_flag=True, help="Enable auto-reloading on code changes.")
@click.option("-V", "--verbose", is_flag=True, help="Enable verbose (DEBUG level) logging.")
def serve(config_file, host, port, reload, verbose):
    """Starts the ncdu-view API server."""
    # The app factory reads these, including in uvicorn's reload subprocess
    if config_file:
        os.environ[CONFIG_ENV_VAR] = os.path.abspath(config_file)
    if verbose:
        os.environ["NCDU_VIEW_LOG_LEVEL"] = "DEBUG"

    try:
        config = load_config()
    except NcduViewException as e:
        click.echo(click.style(f"Configuration error: {e.detail}", fg="red"), err=True)
        sys.exit(1)

    host = host or config.host
    port = port or config.port
    click.echo(f"Serving {config.export_path} on http://{host}:{port}/")
    uvicorn.run(
        "ncdu_view.main:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
        log_config=None,
        log_level="debug" if verbose else "info",
    )


@cli.command(name="ls")
@click.argument("export_file", type=click.Path(exists=True, dir_okay=False))
@click.argument("path", default="")
@click.option("--json", "as_json", is_flag=True, help="Print the listing as JSON.")
def list_directory(export_file, path, as_json):
    """List PATH inside EXPORT_FILE, largest entries first."""
    snapshot = _load_snapshot(export_file)
    segments = split_path(path)
    listing = snapshot.index.lookup(segments) or resolve(snapshot.root, segments)

    if as_json:
        click.echo(orjson.dumps(listing.to_wire(), option=orjson.OPT_INDENT_2).decode())
    else:
        title = "/" + "/".join(listing.path)
        click.echo(click.style(f"{title}  {format_size(listing.current.size)}, {listing.total_items} items", bold=True))
        for entry in listing.directories:
            click.echo(f"{format_size(entry.size):>10}  {entry.name}/")
        for entry in listing.files:
            click.echo(f"{format_size(entry.size):>10}  {entry.name}")

    if listing.error:
        resolved = listing.path == segments
        click.echo(click.style(listing.error, fg="yellow" if resolved else "red"), err=True)
        if not resolved:
            sys.exit(1)


@cli.command()
@click.argument("export_file", type=click.Path(exists=True, dir_okay=False))
def info(export_file):
    """Show the summary of EXPORT_FILE."""
    summary = _load_snapshot(export_file).summary
    scan_time = summary.scan_time.isoformat() if summary.scan_time else "unknown"
    click.echo(f"Root path:       {summary.root_path}")
    click.echo(f"Total size:      {format_size(summary.total_size)}")
    click.echo(f"Available space: {format_size(summary.available_space)}")
    click.echo(f"Total files:     {summary.total_files}")
    click.echo(f"Max files:       {summary.max_files}")
    click.echo(f"Scan time:       {scan_time}")


if __name__ == "__main__":
    cli()
