"""JSON Schema files for editor integration.

``fluencectl init`` and ``fluencectl upgrade`` write the latest schema of
every config kind into ``.fluence/schemas/`` so YAML-aware editors can offer
completion and validation.
"""

from __future__ import annotations

import json
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from fluencectl.domain.kinds import ConfigKind
from fluencectl.infrastructure.filesystem import SCHEMAS_DIR, atomic_write_text


def schema_file_name(kind: ConfigKind[Any]) -> str:
    """``fluence.yaml`` -> ``fluence.json``."""
    return f"{Path(kind.file_name).stem}.json"


def write_schemas(project_root: Path, kinds: Iterable[ConfigKind[Any]]) -> list[Path]:
    """Write the latest schema document of each kind; returns the paths written."""
    target = project_root / SCHEMAS_DIR
    written: list[Path] = []
    for kind in kinds:
        path = target / schema_file_name(kind)
        document = kind.schema_document()
        atomic_write_text(path, json.dumps(document, indent=2, sort_keys=True) + "\n")
        written.append(path)
    return written
