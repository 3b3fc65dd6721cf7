"""Root CLI group for propwrap: inspect and edit the standard defaults store."""

from __future__ import annotations

import json
from io import StringIO
from pathlib import Path
from typing import Any

import click
from rich.console import Console
from rich.table import Table

from propwrap import __version__
from propwrap.config.settings import PropwrapSettings
from propwrap.domain.defaults import StoredDefault
from propwrap.errors import PropwrapError
from propwrap.infrastructure.stores import ListableStore, build_store


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    The store is built lazily so ``--help`` and ``--version`` never touch
    the filesystem.
    """

    def __init__(self, settings: PropwrapSettings) -> None:
        self.settings = settings
        self._store: ListableStore | None = None

        from propwrap.config.logging import configure_logging

        configure_logging(verbose=settings.logging.verbose, log_json=settings.logging.log_json)

    @property
    def store(self) -> ListableStore:
        if self._store is None:
            self._store = build_store(self.settings.store)
        return self._store


def _parse_json(raw: str) -> Any:
    try:
        return json.loads(raw)
    except json.JSONDecodeError as exc:
        msg = f"Not valid JSON: {raw!r}"
        raise click.BadParameter(msg) from exc


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="propwrap")
@click.option("-v", "--verbose", is_flag=True, help="Detailed output with debug info.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
@click.option(
    "--store",
    "store_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Use a JSON file store at this path.",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
    store_path: Path | None,
) -> None:
    """propwrap — constrained value wrappers and their defaults store."""
    try:
        settings = PropwrapSettings.from_cli(
            config_path=config_path,
            verbose=verbose,
            log_json=log_json,
            store_path=store_path,
        )
    except PropwrapError as exc:
        raise click.ClickException(str(exc)) from exc
    ctx.obj = AppContext(settings)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@cli.group()
def store() -> None:
    """Read and write entries of the defaults store."""


@store.command("get")
@click.argument("key")
@click.option(
    "--default",
    "default_json",
    default=None,
    help="JSON default; entries of a different type also fall back to it.",
)
@click.pass_obj
def get_cmd(app: AppContext, key: str, default_json: str | None) -> None:
    """Print the JSON value stored under KEY."""
    default = _parse_json(default_json) if default_json is not None else None
    accessor: StoredDefault[Any] = StoredDefault(key, default, app.store)
    try:
        value = accessor.value
    except PropwrapError as exc:
        raise click.ClickException(str(exc)) from exc
    if value is None:
        click.echo(f"Key not found: {key}", err=True)
        raise SystemExit(1)
    click.echo(json.dumps(value))


@store.command("set")
@click.argument("key")
@click.argument("value_json")
@click.pass_obj
def set_cmd(app: AppContext, key: str, value_json: str) -> None:
    """Store VALUE_JSON under KEY (``null`` removes the entry)."""
    accessor: StoredDefault[Any] = StoredDefault(key, None, app.store)
    try:
        accessor.value = _parse_json(value_json)
    except PropwrapError as exc:
        raise click.ClickException(str(exc)) from exc


@store.command("remove")
@click.argument("key")
@click.pass_obj
def remove_cmd(app: AppContext, key: str) -> None:
    """Remove the entry stored under KEY."""
    try:
        app.store.remove(key)
    except PropwrapError as exc:
        raise click.ClickException(str(exc)) from exc


@store.command("list")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.pass_obj
def list_cmd(app: AppContext, json_output: bool) -> None:
    """List every key and its value."""
    try:
        entries = {key: app.store.get(key) for key in app.store.keys()}
    except PropwrapError as exc:
        raise click.ClickException(str(exc)) from exc

    if json_output:
        click.echo(json.dumps(entries, indent=2, sort_keys=True))
        return

    table = Table(title="propwrap store")
    table.add_column("Key", style="bold cyan")
    table.add_column("Value")
    for key, value in entries.items():
        table.add_row(key, json.dumps(value))
    console = Console(file=StringIO(), highlight=False, width=120)
    console.print(table)
    assert isinstance(console.file, StringIO)
    click.echo(console.file.getvalue(), nl=False)
