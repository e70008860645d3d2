"""CLI entry point for revlens.

Commands:
  review    — run an AI review on a snippet, file, or project folder
  settings  — show or change provider settings (each change is a new snapshot)
  history   — list saved settings snapshots, newest first
  revert    — make an earlier snapshot the current settings again
  init      — interactive setup wizard that writes .revlens.yml
"""

from __future__ import annotations

import importlib.metadata
import logging
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler

from revlens_cli.commands.history import history_cmd, revert_cmd
from revlens_cli.commands.init import init_cmd
from revlens_cli.commands.review import review_cmd
from revlens_cli.commands.settings import settings_cmd

console = Console()


def _build_store(config: dict):
    """Instantiate the configured store from .revlens.yml settings.

    Store selection hierarchy:
      store: json   → JsonFileStore (default; store_path or the per-user app dir)
      store: sqlite → SQLiteStore   (store_path or .revlens.db)
      store: noop   → NoOpStore     (settings only come from .revlens.yml)

    This factory lives in cli.py so neither revlens_core nor revlens_store
    know about the CLI config format.
    """
    from revlens_store.noop import NoOpStore

    store_type = config.get("store") or "json"
    store_path = config.get("store_path")

    if store_type == "json":
        from revlens_store.json_file import HISTORY_FILENAME, JsonFileStore

        path = store_path or Path(click.get_app_dir("revlens")) / HISTORY_FILENAME
        return JsonFileStore(path)

    if store_type == "sqlite":
        from revlens_store.sqlite import SQLiteStore

        return SQLiteStore(db_path=store_path or ".revlens.db")

    if store_type != "noop":
        console.print(f"[yellow]Unknown store type {store_type!r}. Falling back to no store.[/yellow]")
    return NoOpStore()


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


@click.group()
@click.version_option(
    version=importlib.metadata.version("revlens"),
    prog_name="revlens",
)
@click.option(
    "--config",
    "config_path",
    default=".revlens.yml",
    show_default=True,
    help="Path to the configuration file.",
    envvar="REVLENS_CONFIG",
)
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging.")
@click.pass_context
def main(ctx: click.Context, config_path: str, verbose: bool):
    """AI-powered code review for snippets and projects, using Gemini or a local LLM."""
    from revlens_core.config import load_config

    _configure_logging(verbose)
    ctx.ensure_object(dict)

    config = load_config(config_path)
    store = _build_store(config)

    # The newest saved snapshot is the current configuration.
    latest = store.latest()
    if latest is not None:
        config = load_config(config_path, settings=latest.config)

    ctx.obj["config_path"] = config_path
    ctx.obj["config"] = config
    ctx.obj["store"] = store
    ctx.call_on_close(store.close)


main.add_command(review_cmd)
main.add_command(settings_cmd)
main.add_command(history_cmd)
main.add_command(revert_cmd)
main.add_command(init_cmd)
