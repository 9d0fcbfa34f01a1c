"""Naming rules and value formats shared by the manifests."""

from __future__ import annotations

import re
from typing import Literal

# Service, worker and spell names end up as Aqua identifiers.
AQUA_NAME_PATTERN = re.compile(r"^[a-z][a-zA-Z0-9_]*$")

# e.g. 512MiB, 1.5 GB, 100kB, 64b
BYTES_PATTERN = r"^\d+(\.\d+)?\s?([kKmMgGtT][iI]?)?[bB]$"
BYTES_FORMAT = "[number][whitespace?][unit] where unit is B, kB, KiB, MB, MiB, GB or GiB"

DEAL_ADDRESS_PATTERN = r"^0x[0-9a-fA-F]{40}$"

Network = Literal["kras", "testnet", "stage", "local"]
NETWORKS: tuple[str, ...] = ("kras", "testnet", "stage", "local")
DEFAULT_NETWORK: Network = "kras"


def validate_aqua_name(name: str) -> Literal[True] | str:
    """Check *name* against the Aqua identifier rule.

    Examples:
        >>> validate_aqua_name("my_service1")
        True
        >>> validate_aqua_name("1service")
        'must start with a lowercase letter and contain only letters, numbers, and underscores'
    """
    if AQUA_NAME_PATTERN.match(name):
        return True
    return "must start with a lowercase letter and contain only letters, numbers, and underscores"


def comma_separated(value: str) -> list[str]:
    """Split a comma-separated CLI argument, dropping blanks.

    Examples:
        >>> comma_separated("a, b,,c ")
        ['a', 'b', 'c']
    """
    return [part.strip() for part in value.split(",") if part.strip()]
