"""Config kinds managed by the engine.

``PROJECT_KINDS`` lists the kinds stored at well-known project locations;
``service.yaml`` files live wherever the caller points.
"""

from __future__ import annotations

from typing import Any

from fluencectl.domain.kinds import ConfigKind
from fluencectl.domain.manifests.deals import DEALS
from fluencectl.domain.manifests.deployed_deals import DEPLOYED_DEALS
from fluencectl.domain.manifests.project import PROJECT
from fluencectl.domain.manifests.service import SERVICE
from fluencectl.domain.manifests.workers import WORKERS

PROJECT_KINDS: tuple[ConfigKind[Any], ...] = (PROJECT, WORKERS, DEALS, DEPLOYED_DEALS)
ALL_KINDS: tuple[ConfigKind[Any], ...] = (*PROJECT_KINDS, SERVICE)

_BY_NAME: dict[str, ConfigKind[Any]] = {kind.name: kind for kind in ALL_KINDS}


def get_kind(name: str) -> ConfigKind[Any]:
    """Look up a kind by its short name."""
    try:
        return _BY_NAME[name]
    except KeyError:
        msg = f"Unknown config kind: {name!r} (known: {', '.join(sorted(_BY_NAME))})"
        raise ValueError(msg) from None


__all__ = [
    "ALL_KINDS",
    "DEALS",
    "DEPLOYED_DEALS",
    "PROJECT",
    "PROJECT_KINDS",
    "SERVICE",
    "WORKERS",
    "get_kind",
]
