"""settings command — show or change provider settings.

Every change is saved as a new ConfigSnapshot at the head of the history, so
`revlens revert` can always go back to an earlier configuration.
"""

from __future__ import annotations

import os

import click
from rich.console import Console
from rich.table import Table

from revlens_core.config import DEFAULT_UPLOAD, settings_from_config
from revlens_store.models import ConfigSnapshot

console = Console()


def mask_secret(value: str | None) -> str:
    if not value:
        return "[dim]not set[/dim]"
    return f"set (…{value[-4:]})" if len(value) > 8 else "set"


def _print_settings(config: dict) -> None:
    table = Table(title="Current Settings", show_header=True, header_style="bold cyan")
    table.add_column("Setting", style="bold")
    table.add_column("Value")
    table.add_row("Default provider", config["provider"])
    table.add_row("Default language", config["language"])
    table.add_row("Gemini API key", mask_secret(config.get("gemini_api_key")))
    table.add_row("Gemini model", config.get("gemini_model") or "")
    for key, label in (("ollama", "Ollama"), ("lmstudio", "LM Studio")):
        section = config.get(key) or {}
        table.add_row(f"{label} URL", section.get("url") or "")
        table.add_row(f"{label} model", section.get("model") or "")
    upload = config.get("upload") or {}
    table.add_row("Allowed extensions", ", ".join(upload.get("allowed_extensions", [])))
    table.add_row("Ignored directories", ", ".join(upload.get("ignored_dirs", [])))
    table.add_row("Ignored files", ", ".join(upload.get("ignored_files", [])))
    console.print(table)


@click.command("settings")
@click.option("--gemini-api-key", default=None, help="Gemini API key.")
@click.option("--gemini-model", default=None, help="Gemini model name.")
@click.option("--ollama-url", default=None, help="Ollama chat-completions URL.")
@click.option("--ollama-model", default=None, help="Ollama model name.")
@click.option("--lmstudio-url", default=None, help="LM Studio chat-completions URL.")
@click.option("--lmstudio-model", default=None, help="LM Studio model name.")
@click.option("--allow-ext", multiple=True, help="Allowed file extension for project uploads (repeatable).")
@click.option("--ignore-dir", multiple=True, help="Directory name skipped in project uploads (repeatable).")
@click.option("--ignore-file", multiple=True, help="File name skipped in project uploads (repeatable).")
@click.option("--reset-upload-defaults", is_flag=True, help="Restore the default project upload filters.")
@click.pass_context
def settings_cmd(
    ctx,
    gemini_api_key: str | None,
    gemini_model: str | None,
    ollama_url: str | None,
    ollama_model: str | None,
    lmstudio_url: str | None,
    lmstudio_model: str | None,
    allow_ext: tuple[str, ...],
    ignore_dir: tuple[str, ...],
    ignore_file: tuple[str, ...],
    reset_upload_defaults: bool,
):
    """Show current settings, or save changed ones as a new snapshot.

    Repeatable upload options replace the whole list, e.g.
    `revlens settings --allow-ext .py --allow-ext .pyi`.
    """
    config = ctx.obj["config"]
    store = ctx.obj["store"]

    changes = {
        "gemini_api_key": gemini_api_key,
        "gemini_model": gemini_model,
        ("ollama", "url"): ollama_url,
        ("ollama", "model"): ollama_model,
        ("lmstudio", "url"): lmstudio_url,
        ("lmstudio", "model"): lmstudio_model,
        ("upload", "allowed_extensions"): list(allow_ext) or None,
        ("upload", "ignored_dirs"): list(ignore_dir) or None,
        ("upload", "ignored_files"): list(ignore_file) or None,
    }
    changes = {k: v for k, v in changes.items() if v is not None}

    if not changes and not reset_upload_defaults:
        _print_settings(config)
        return

    settings = settings_from_config(config)
    if os.environ.get("GEMINI_API_KEY") and gemini_api_key is None:
        # Never write a key that only came from the environment into the history file.
        latest = store.latest()
        saved_key = (latest.config if latest else {}).get("gemini_api_key")
        if saved_key is None:
            # Leave it out so a key in .revlens.yml still applies later.
            settings.pop("gemini_api_key", None)
        else:
            settings["gemini_api_key"] = saved_key
    if reset_upload_defaults:
        settings["upload"] = {k: list(v) for k, v in DEFAULT_UPLOAD.items()}
    for key, value in changes.items():
        if isinstance(key, tuple):
            section, field = key
            settings[section] = {**settings.get(section, {}), field: value}
        else:
            settings[key] = value

    from revlens_store.noop import NoOpStore

    if isinstance(store, NoOpStore):
        raise click.UsageError("No store configured, settings cannot be saved. Edit .revlens.yml instead.")
    store.append(ConfigSnapshot(config=settings))
    console.print("[green]Settings saved.[/green]")
