"""Filesystem operations for project files.

INVARIANT: a config file on disk is either its previous content or its new
content, never a mix. All writes go through :func:`atomic_write_text`
(temp file + fsync + rename) or :func:`create_exclusive`.
"""

from __future__ import annotations

import os
import tempfile
from pathlib import Path

# Project-relative locations.
FLUENCE_DIR = ".fluence"
SCHEMAS_DIR = f"{FLUENCE_DIR}/schemas"
PLUGINS_DIR = f"{FLUENCE_DIR}/plugins"
AQUA_DIR = "src/aqua"
SERVICES_DIR = "src/services"
FRONTEND_DIR = "src/frontend"


# ---------------------------------------------------------------------------
# Writes
# ---------------------------------------------------------------------------


def atomic_write_text(path: Path, text: str) -> None:
    """Replace *path* with *text* atomically.

    Creates parent directories if they don't exist. Any leftover temp file
    is removed on failure and the exception propagates.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path: Path | None = None
    try:
        with tempfile.NamedTemporaryFile(
            "w",
            encoding="utf-8",
            dir=str(path.parent),
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
        ) as fh:
            tmp_path = Path(fh.name)
            fh.write(text)
            fh.flush()
            os.fsync(fh.fileno())
        os.replace(tmp_path, path)
        tmp_path = None
    finally:
        if tmp_path is not None:
            tmp_path.unlink(missing_ok=True)


def create_exclusive(path: Path, text: str) -> None:
    """Create *path* with *text*, failing if it already exists.

    Raises:
        FileExistsError: If another process created *path* first.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    try:
        with path.open("x", encoding="utf-8") as fh:
            fh.write(text)
    except FileExistsError:
        raise
    except OSError:
        path.unlink(missing_ok=True)
        raise


def write_text_file(path: Path, text: str) -> None:
    """Write a scaffolding file, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


# ---------------------------------------------------------------------------
# Path resolution
# ---------------------------------------------------------------------------


def resolve_project_path(project_root: Path, relative: str | Path) -> Path:
    """Resolve *relative* inside *project_root*.

    Raises:
        ValueError: If the result escapes the project root.
    """
    result = project_root / relative
    if not result.resolve().is_relative_to(project_root.resolve()):
        msg = f"Path escapes project root: {result}"
        raise ValueError(msg)
    return result


def is_empty_dir(path: Path) -> bool:
    """True if *path* does not exist or is an empty directory."""
    if not path.exists():
        return True
    return path.is_dir() and not any(path.iterdir())
