import copy
import os
from pathlib import Path
from typing import Optional

import yaml

from revlens_core.models import LocalProviderConfig, ProviderConfig, UploadFilterRules

DEFAULT_ALLOWED_EXTENSIONS = [
    ".js", ".jsx", ".ts", ".tsx", ".py", ".java", ".cs", ".go", ".rs", ".rb", ".php",
    ".html", ".css", ".scss", ".sql", ".json", ".md", ".yml", ".yaml", ".toml", ".ini",
    "Dockerfile", ".sh", ".ps1", ".xml", ".env.example",
]  # fmt: skip
DEFAULT_IGNORED_DIRS = ["node_modules", ".git", ".vscode", "dist", "build", "out", "coverage", ".next", ".idea"]
DEFAULT_IGNORED_FILES = ["package-lock.json", "yarn.lock", "pnpm-lock.yaml"]

DEFAULT_UPLOAD: dict = {
    "allowed_extensions": DEFAULT_ALLOWED_EXTENSIONS,
    "ignored_dirs": DEFAULT_IGNORED_DIRS,
    "ignored_files": DEFAULT_IGNORED_FILES,
}

DEFAULT_CONFIG: dict = {
    "provider": "gemini",
    "language": "javascript",
    "gemini_api_key": "",
    "gemini_model": "gemini-2.5-flash",
    "ollama": {"url": "http://localhost:11434/v1/chat/completions", "model": "llama3"},
    # LM Studio serves whatever model is loaded under a generic name.
    "lmstudio": {"url": "http://localhost:1234/v1/chat/completions", "model": "local-model"},
    "upload": DEFAULT_UPLOAD,
    "request_timeout": None,  # seconds; None = wait for the model however long it takes
    "store": "json",  # json | sqlite | noop
    "store_path": None,  # None = per-user app directory
}

# Keys persisted in config snapshots: everything a user edits with `revlens settings`.
SETTINGS_KEYS = ("gemini_api_key", "gemini_model", "ollama", "lmstudio", "upload")


def load_config(
    config_path: str = ".revlens.yml",
    cli_overrides: Optional[dict] = None,
    settings: Optional[dict] = None,
) -> dict:
    """
    Load configuration by merging (in order of precedence):
      1. Built-in defaults
      2. .revlens.yml in the current directory
      3. Saved settings (the newest config snapshot)
      4. CLI argument overrides
    GEMINI_API_KEY in the environment wins over any stored key.
    """
    config = copy.deepcopy(DEFAULT_CONFIG)

    path = Path(config_path)
    if path.exists():
        with open(path) as f:
            file_config = yaml.safe_load(f) or {}
        config = merge_settings(config, file_config)

    if settings:
        config = merge_settings(config, settings)

    if cli_overrides:
        for key, value in cli_overrides.items():
            if value is not None:
                config[key] = value

    env_key = os.environ.get("GEMINI_API_KEY")
    if env_key:
        config["gemini_api_key"] = env_key

    return config


def merge_settings(config: dict, overrides: dict) -> dict:
    """Return a copy of config with overrides applied; nested provider dicts merge key by key."""
    merged = copy.deepcopy(config)
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = {**merged[key], **copy.deepcopy(value)}
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def settings_from_config(config: dict) -> dict:
    """Extract the user-editable subset of config that is stored in snapshots."""
    return {key: copy.deepcopy(config[key]) for key in SETTINGS_KEYS if key in config}


def provider_config(config: dict) -> ProviderConfig:
    timeout = config.get("request_timeout")

    def _local(key: str) -> LocalProviderConfig:
        section = config.get(key) or {}
        return LocalProviderConfig(url=section.get("url") or "", model=section.get("model") or "", timeout=timeout)

    return ProviderConfig(
        gemini_api_key=config.get("gemini_api_key") or None,
        ollama=_local("ollama"),
        lmstudio=_local("lmstudio"),
        gemini_model=config.get("gemini_model") or DEFAULT_CONFIG["gemini_model"],
        request_timeout=timeout,
    )


def upload_rules(config: dict) -> UploadFilterRules:
    overrides = {k: v for k, v in (config.get("upload") or {}).items() if v is not None}
    upload = {**DEFAULT_UPLOAD, **overrides}
    return UploadFilterRules(
        allowed_extensions=frozenset(upload["allowed_extensions"]),
        ignored_dirs=frozenset(upload["ignored_dirs"]),
        ignored_files=frozenset(upload["ignored_files"]),
    )
