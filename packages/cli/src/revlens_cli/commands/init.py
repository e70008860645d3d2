"""init command — interactive setup wizard.

Writes .revlens.yml with the default provider, language and history store so
later `revlens review` runs need no flags.
"""

from __future__ import annotations

from pathlib import Path

import click
import yaml
from rich.console import Console

from revlens_core.models import SUPPORTED_LANGUAGES, ProviderId

console = Console()


@click.command("init")
@click.pass_context
def init_cmd(ctx):
    """Set up revlens for this directory.

    Creates (or updates) the configuration file with your default provider,
    language and settings store.
    """
    config_path = Path(ctx.obj.get("config_path", ".revlens.yml") if ctx.obj else ".revlens.yml")
    console.print("\n[bold cyan]revlens init[/bold cyan] — setup wizard\n")

    provider = click.prompt(
        "AI provider",
        type=click.Choice([p.value for p in ProviderId]),
        default=ProviderId.GEMINI.value,
    )
    language = click.prompt(
        "Default language",
        type=click.Choice(list(SUPPORTED_LANGUAGES)),
        default="javascript",
        show_choices=False,
    )

    console.print("\nSettings history store:")
    console.print("  [bold]json[/bold]    — JSON file in your user config directory (default)")
    console.print("  [bold]sqlite[/bold]  — local SQLite database")
    console.print("  [bold]noop[/bold]    — no history; settings only come from this file")
    store_type = click.prompt("Store backend", type=click.Choice(["json", "sqlite", "noop"]), default="json")

    config: dict = {"provider": provider, "language": language, "store": store_type}

    if store_type == "sqlite":
        db_path = click.prompt("SQLite database path", default=".revlens.db")
        if db_path != ".revlens.db":
            config["store_path"] = db_path
        console.print(f"[green]SQLite store configured at {db_path}[/green]")

    if provider == ProviderId.GEMINI.value:
        console.print(
            "\n[yellow]Set your key with[/yellow] [bold]revlens settings --gemini-api-key <key>[/bold] "
            "[yellow]or export GEMINI_API_KEY.[/yellow]"
        )
    else:
        console.print(
            f"\n[yellow]Make sure {ProviderId(provider).display_name} is running. Check its URL and model with "
            "[bold]revlens settings[/bold].[/yellow]"
        )

    _write_config(config_path, config)
    console.print(f"[green]Wrote {config_path}[/green]")
    console.print("\n[bold green]Setup complete![/bold green]")
    console.print("Run a review with: [bold]revlens review <file>[/bold] or [bold]revlens review --sample[/bold]")


def _write_config(path: Path, config: dict) -> None:
    """Write or update the config file, preserving any existing keys."""
    existing: dict = {}
    if path.exists():
        existing = yaml.safe_load(path.read_text()) or {}
    existing.update(config)
    path.write_text(yaml.dump(existing, default_flow_style=False, sort_keys=False))
