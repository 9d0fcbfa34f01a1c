"""Project root discovery.

Walk-up finder locates ``fluence.yaml``, similar to how git finds .git/.
Supports the FLUENCE_PROJECT_DIR env var and the -C/--project-dir flag.
"""

from __future__ import annotations

import os
from pathlib import Path

from fluencectl.domain.manifests.project import PROJECT_FILE_NAME

PROJECT_DIR_ENV_VAR = "FLUENCE_PROJECT_DIR"


def find_project_root(start: Path | None = None) -> Path | None:
    """Walk up from *start* (default: cwd) looking for fluence.yaml.

    Returns the directory containing it, or None if not found.
    Checks FLUENCE_PROJECT_DIR env var first.
    """
    env_path = os.environ.get(PROJECT_DIR_ENV_VAR)
    if env_path:
        p = Path(env_path)
        if (p / PROJECT_FILE_NAME).is_file():
            return p.resolve()
        return None

    current = (start or Path.cwd()).resolve()
    while True:
        if (current / PROJECT_FILE_NAME).is_file():
            return current
        parent = current.parent
        if parent == current:
            break
        current = parent
    return None
