"""Project folder ingestion.

Walks a directory and returns the files a project review should see, filtered
by UploadFilterRules. The review pipeline never filters on its own; it trusts
whatever ProjectFile sequence it is handed.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from revlens_core.models import ProjectFile, UploadFilterRules

logger = logging.getLogger(__name__)


def is_allowed_file(path: str, rules: UploadFilterRules) -> bool:
    """Return True if a slash-separated relative path passes the upload filter.

    Extensions are matched as plain suffixes so entries like "Dockerfile" or
    ".env.example" work without special-casing.
    """
    parts = path.split("/")
    file_name = parts[-1]
    if file_name in rules.ignored_files:
        return False
    if any(part in rules.ignored_dirs for part in parts[:-1]):
        return False
    return any(file_name.endswith(ext) for ext in rules.allowed_extensions)


def collect_project_files(root: str | Path, rules: UploadFilterRules) -> list[ProjectFile]:
    """Read every allowed file under root, sorted by path.

    Paths are relative to root and slash-separated. Files that cannot be read
    are skipped with a warning rather than aborting the whole upload.
    """
    root = Path(root)
    files: list[ProjectFile] = []
    for dirpath, dirnames, filenames in os.walk(root):
        # Prune ignored directories so they are never descended into.
        dirnames[:] = [d for d in dirnames if d not in rules.ignored_dirs]
        for name in filenames:
            file_path = Path(dirpath) / name
            rel = file_path.relative_to(root).as_posix()
            if not is_allowed_file(rel, rules):
                continue
            try:
                content = file_path.read_text(encoding="utf-8", errors="replace")
            except OSError as e:
                logger.warning("Error reading file %s: %s", rel, e)
                continue
            files.append(ProjectFile(path=rel, content=content))
    return sorted(files, key=lambda f: f.path)
