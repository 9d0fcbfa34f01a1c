"""Interfaces of the external collaborators behind chain commands.

fluencectl does not speak to the network itself.  Plugins return objects
satisfying these protocols from the ``fluencectl_chain_client`` and
``fluencectl_worker_uploader`` hooks.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Protocol, runtime_checkable

from pydantic import BaseModel, Field


class ServiceSpec(BaseModel):
    """A service as handed to the uploader: its name and resolved directory."""

    model_config = {"frozen": True}

    name: str
    path: str
    modules: list[str] = Field(default_factory=list)


class WorkerSpec(BaseModel):
    """A worker and the services it runs."""

    model_config = {"frozen": True}

    name: str
    services: list[ServiceSpec] = Field(default_factory=list)


@runtime_checkable
class WorkerUploader(Protocol):
    def upload(self, workers: Sequence[WorkerSpec]) -> Mapping[str, str]:
        """Upload worker definitions; return ``{worker name: definition CID}``."""
        ...


@runtime_checkable
class ChainClient(Protocol):
    def create_deal(self, *, app_cid: str, min_workers: int, target_workers: int) -> str:
        """Create a deal and return its contract address."""
        ...

    def update_deal(self, *, deal_address: str, app_cid: str) -> None:
        """Point an existing deal at a new worker definition."""
        ...

    def withdraw_collateral(self, commitment_ids: Sequence[str]) -> None:
        ...

    def withdraw_rewards(self, commitment_ids: Sequence[str]) -> None:
        ...
