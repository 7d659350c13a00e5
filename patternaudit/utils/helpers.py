"""Helper utility functions for patternaudit."""

import json
from pathlib import Path
from typing import Any

from .logging import logger


def relative_posix(path: Path | str, project_root: Path | str) -> str:
    """Express ``path`` relative to ``project_root`` with forward slashes.

    Paths outside the project root are returned as given, normalized to
    forward slashes, so reports never depend on the host separator.
    """
    path = Path(path)
    project_root = Path(project_root)
    try:
        return path.relative_to(project_root).as_posix()
    except ValueError:
        pass
    try:
        return path.resolve().relative_to(project_root.resolve()).as_posix()
    except ValueError:
        return str(path).replace("\\", "/")


def resolve_within(project_root: Path | str, target: str) -> Path | None:
    """Join ``target`` onto ``project_root`` and keep it inside the root.

    Leading separators are stripped, so ``/src`` means ``<root>/src``. Returns
    None when the target escapes the root (``..`` segments, symlinks out of
    the tree). The returned path keeps ``project_root`` as given.
    """
    project_root = Path(project_root)
    relative = target.lstrip("/\\") or "."
    resolved_root = project_root.resolve()
    resolved = (resolved_root / relative).resolve()
    if not resolved.is_relative_to(resolved_root):
        return None
    return project_root / resolved.relative_to(resolved_root)


def save_json_file(data: Any, file_path: str | Path, indent: int = 2) -> None:
    """Save data to a JSON file, creating parent directories as needed."""
    file_path = Path(file_path)
    file_path.parent.mkdir(parents=True, exist_ok=True)
    with open(file_path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=indent, sort_keys=True)
    logger.debug(f"Wrote {file_path}")
