"""history and revert commands — browse and restore config snapshots."""

from __future__ import annotations

from datetime import datetime

import click
from rich.console import Console
from rich.table import Table

from revlens_store.models import ConfigSnapshot

console = Console()


def _require_history(ctx) -> list[ConfigSnapshot]:
    from revlens_store.noop import NoOpStore

    store = ctx.obj.get("store") if ctx.obj else None
    if store is None or isinstance(store, NoOpStore):
        raise click.UsageError(
            "No store configured. Set 'store: json' or 'store: sqlite' in .revlens.yml, "
            "or run `revlens init` to set one up."
        )
    return store.load() or []


def format_timestamp(millis: int) -> str:
    return datetime.fromtimestamp(millis / 1000).strftime("%Y-%m-%d %H:%M:%S")


@click.command("history")
@click.option("--limit", default=10, show_default=True, help="Maximum number of snapshots to show.")
@click.pass_context
def history_cmd(ctx, limit: int):
    """Show saved settings snapshots, newest first.

    Snapshot #1 is the current configuration.
    """
    history = _require_history(ctx)
    if not history:
        console.print("[yellow]No saved settings yet. Use `revlens settings` to save some.[/yellow]")
        return

    table = Table(title="Configuration History", show_header=True, header_style="bold cyan")
    table.add_column("#", style="bold", width=4)
    table.add_column("Saved At", width=20)
    table.add_column("Gemini Key", width=10)
    table.add_column("Ollama Model")
    table.add_column("LM Studio Model")

    for index, snapshot in enumerate(history[:limit], 1):
        cfg = snapshot.config
        table.add_row(
            f"#{index}",
            format_timestamp(snapshot.timestamp),
            "yes" if cfg.get("gemini_api_key") else "no",
            (cfg.get("ollama") or {}).get("model", ""),
            (cfg.get("lmstudio") or {}).get("model", ""),
        )

    console.print(table)


@click.command("revert")
@click.argument("index", type=int)
@click.pass_context
def revert_cmd(ctx, index: int):
    """Make snapshot INDEX (as numbered by `revlens history`) current again.

    The old settings are saved as a new snapshot; nothing is deleted.
    """
    history = _require_history(ctx)
    if not 1 <= index <= len(history):
        raise click.BadParameter(f"no snapshot #{index} (history has {len(history)} entries)", param_hint="INDEX")

    chosen = history[index - 1]
    ctx.obj["store"].append(ConfigSnapshot(config=chosen.config))
    console.print(f"[green]Reverted to configuration from {format_timestamp(chosen.timestamp)}.[/green]")
