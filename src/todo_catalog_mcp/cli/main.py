"""Main Click CLI entry point for the todo-catalog command.

Entry point registered in pyproject.toml::

    [project.scripts]
    todo-catalog = "todo_catalog_mcp.cli.main:cli"

Usage examples::

    todo-catalog --version
    todo-catalog serve                      # MCP server over stdio
    todo-catalog api --port 8787            # HTTP stub API
    todo-catalog list --json-output
    todo-catalog call complete_todo id=3
    todo-catalog --config todo-catalog.json config
"""

from __future__ import annotations

import json
import sys
from typing import Optional

import click
from mcp.shared.exceptions import McpError
from pydantic import ValidationError

from todo_catalog_mcp import __version__
from todo_catalog_mcp.catalog.seed import SeedFileError, build_catalog
from todo_catalog_mcp.catalog.store import TodoCatalog
from todo_catalog_mcp.config import CatalogConfig


@click.group()
@click.version_option(version=__version__, prog_name="todo-catalog-mcp")
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=False, dir_okay=False),
    default=None,
    envvar="TODO_CATALOG_CONFIG",
    help="Path to a JSON config file. Defaults to ./todo-catalog.json.",
)
@click.pass_context
def cli(ctx: click.Context, config_path: Optional[str]) -> None:
    """Todo Catalog -- an in-memory TODO catalog served over MCP."""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path


@cli.command()
@click.pass_context
def serve(ctx: click.Context) -> None:
    """Run the MCP server over stdio."""
    from todo_catalog_mcp.mcp.server import create_server

    config = _load_config(ctx)
    config.configure_logging()
    catalog = _build_catalog(config)
    server = create_server(config=config, catalog=catalog)
    server.run(transport="stdio")


@cli.command()
@click.option("--host", default=None, help="Bind host. Defaults to http_host from config.")
@click.option("--port", type=int, default=None, help="Bind port. Defaults to http_port from config.")
@click.pass_context
def api(ctx: click.Context, host: Optional[str], port: Optional[int]) -> None:
    """Run the HTTP stub API with uvicorn."""
    import uvicorn

    from todo_catalog_mcp.api.app import create_app

    config = _load_config(ctx)
    config.configure_logging()
    app = create_app(config)

    uvicorn.run(
        app,
        host=host or config.http_host,
        port=port or config.http_port,
        log_level=config.log_level.lower(),
    )


@cli.command(name="list")
@click.option(
    "--json-output",
    "output_json",
    is_flag=True,
    default=False,
    help="Output entries as JSON instead of human-readable text.",
)
@click.pass_context
def list_entries(ctx: click.Context, output_json: bool) -> None:
    """List the entries the catalog starts with."""
    from todo_catalog_mcp.messages import Messages

    config = _load_config(ctx)
    catalog = _build_catalog(config)
    entries = catalog.list_entries()

    if output_json:
        click.echo(
            json.dumps([e.to_json_dict() for e in entries], indent=2, ensure_ascii=False)
        )
        return

    if not entries:
        click.echo("No entries.")
        return

    messages = Messages(config.locale)
    for entry in entries:
        click.echo(f"{messages.glyph(entry.completed)} {entry.id:>4}  {entry.title}")
    stats = catalog.stats()
    click.echo()
    click.echo(
        f"{stats['total']} entries, {stats['completed']} completed, "
        f"{stats['pending']} pending"
    )


@cli.command()
@click.argument("action")
@click.argument("arguments", nargs=-1)
@click.pass_context
def call(ctx: click.Context, action: str, arguments: tuple[str, ...]) -> None:
    """Invoke ACTION against a freshly seeded catalog.

    ARGUMENTS are KEY=VALUE pairs, e.g. ``call add_todo title="Ship it"``.
    """
    from todo_catalog_mcp.mcp.actions import build_actions
    from todo_catalog_mcp.mcp.rendering import EntryRenderer
    from todo_catalog_mcp.messages import Messages

    config = _load_config(ctx)
    catalog = _build_catalog(config)
    renderer = EntryRenderer(Messages(config.locale), uri_scheme=config.uri_scheme)
    actions = build_actions(catalog, renderer)

    kwargs: dict[str, str] = {}
    for item in arguments:
        key, sep, value = item.partition("=")
        if not sep or not key:
            raise click.BadParameter(
                f"Expected KEY=VALUE, got {item!r}.", param_hint="ARGUMENTS"
            )
        kwargs[key] = value

    try:
        click.echo(actions.dispatch(action, kwargs))
    except McpError as exc:
        click.secho(
            f"ERROR ({exc.error.code}): {exc.error.message}", fg="red", err=True
        )
        sys.exit(1)


@cli.command(name="config")
@click.pass_context
def show_config(ctx: click.Context) -> None:
    """Print the resolved configuration as JSON."""
    config = _load_config(ctx)
    click.echo(json.dumps(config.to_dict(), indent=2, ensure_ascii=False))


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _load_config(ctx: click.Context) -> CatalogConfig:
    try:
        return CatalogConfig.load(config_path=ctx.obj.get("config_path"))
    except ValidationError as exc:
        click.secho(f"ERROR: Invalid configuration: {exc}", fg="red", err=True)
        sys.exit(1)


def _build_catalog(config: CatalogConfig) -> TodoCatalog:
    try:
        return build_catalog(config)
    except SeedFileError as exc:
        click.secho(f"ERROR: {exc}", fg="red", err=True)
        sys.exit(1)
