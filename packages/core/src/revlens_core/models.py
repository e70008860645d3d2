"""Review input and provider configuration types.

These are the only types the orchestration layer accepts. The CLI builds them
from the merged config dict (see revlens_core.config) so nothing below the
session ever sees raw YAML or store records.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import PurePosixPath
from typing import Union


class ProviderId(str, Enum):
    GEMINI = "gemini"
    OLLAMA = "ollama"
    LMSTUDIO = "lmstudio"

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]

    @property
    def is_local(self) -> bool:
        return self is not ProviderId.GEMINI


_DISPLAY_NAMES = {
    ProviderId.GEMINI: "Gemini (Cloud)",
    ProviderId.OLLAMA: "Ollama",
    ProviderId.LMSTUDIO: "LM Studio",
}


class ReviewMode(str, Enum):
    SNIPPET = "snippet"
    PROJECT = "project"


@dataclass(frozen=True)
class ProjectFile:
    path: str  # repo-relative, slash-separated
    content: str


@dataclass(frozen=True)
class Snippet:
    code: str
    language: str

    mode = ReviewMode.SNIPPET


@dataclass(frozen=True)
class Project:
    files: tuple[ProjectFile, ...]
    language: str

    mode = ReviewMode.PROJECT

    def __post_init__(self):
        # Accept any sequence but store a tuple so the input stays hashable and immutable.
        object.__setattr__(self, "files", tuple(self.files))


ReviewInput = Union[Snippet, Project]


@dataclass(frozen=True)
class LocalProviderConfig:
    url: str = ""
    model: str = ""
    timeout: float | None = None  # seconds; None waits indefinitely


@dataclass(frozen=True)
class ProviderConfig:
    """Connection settings for every provider, resolved for a single call."""

    gemini_api_key: str | None = None
    ollama: LocalProviderConfig = field(default_factory=LocalProviderConfig)
    lmstudio: LocalProviderConfig = field(default_factory=LocalProviderConfig)
    gemini_model: str = "gemini-2.5-flash"
    request_timeout: float | None = None


@dataclass(frozen=True)
class UploadFilterRules:
    allowed_extensions: frozenset[str] = frozenset()
    ignored_dirs: frozenset[str] = frozenset()
    ignored_files: frozenset[str] = frozenset()


SUPPORTED_LANGUAGES: dict[str, str] = {
    "javascript": "JavaScript",
    "typescript": "TypeScript",
    "python": "Python",
    "java": "Java",
    "csharp": "C#",
    "go": "Go",
    "rust": "Rust",
    "ruby": "Ruby",
    "php": "PHP",
    "html": "HTML",
    "css": "CSS",
    "sql": "SQL",
    "json": "JSON",
    "markdown": "Markdown",
}

_EXTENSION_LANGUAGES = {
    ".js": "javascript",
    ".jsx": "javascript",
    ".mjs": "javascript",
    ".cjs": "javascript",
    ".ts": "typescript",
    ".tsx": "typescript",
    ".py": "python",
    ".java": "java",
    ".cs": "csharp",
    ".go": "go",
    ".rs": "rust",
    ".rb": "ruby",
    ".php": "php",
    ".html": "html",
    ".htm": "html",
    ".css": "css",
    ".scss": "css",
    ".sql": "sql",
    ".json": "json",
    ".md": "markdown",
}


def guess_language(path: str) -> str | None:
    """Return the language id for a file path based on its extension, or None."""
    return _EXTENSION_LANGUAGES.get(PurePosixPath(path).suffix.lower())
