"""deals.yaml: deal parameters per worker.

Version history:

- v0: ``deals`` is a mapping keyed by worker name.
- v1: ``deals`` is a list of entries carrying ``workerName``.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import Field

from fluencectl.domain.errors import SemanticValidationError
from fluencectl.domain.kinds import ConfigKind
from fluencectl.domain.manifests.common import ManifestModel
from fluencectl.domain.names import Network

DEALS_FILE_NAME = "deals.yaml"
MIN_WORKERS = 1
TARGET_WORKERS = 3


class DealParamsV0(ManifestModel):
    min_workers: int | None = Field(default=None, ge=1)
    target_workers: int | None = Field(default=None, ge=1)


class DealsConfigV0(ManifestModel):
    version: Literal[0]
    network: Network | None = None
    deals: dict[str, DealParamsV0] = Field(default_factory=dict)


class Deal(ManifestModel):
    worker_name: str
    min_workers: int | None = Field(default=None, ge=1, description=f"Default: {MIN_WORKERS}")
    target_workers: int | None = Field(
        default=None, ge=1, description=f"Default: {TARGET_WORKERS}"
    )

    @property
    def effective_min_workers(self) -> int:
        return MIN_WORKERS if self.min_workers is None else self.min_workers

    @property
    def effective_target_workers(self) -> int:
        return TARGET_WORKERS if self.target_workers is None else self.target_workers


class DealsConfigV1(ManifestModel):
    version: Literal[1]
    network: Network | None = Field(default=None, description="Chain network to deploy to")
    deals: list[Deal] = Field(default_factory=list)

    def find(self, worker_name: str) -> Deal | None:
        return next((d for d in self.deals if d.worker_name == worker_name), None)


DealsConfig = DealsConfigV1


def migrate_deals_v0_to_v1(document: dict[str, Any]) -> dict[str, Any]:
    deals = document.get("deals") or {}
    document["deals"] = [{"workerName": name, **(params or {})} for name, params in deals.items()]
    return document


def check_deals(config: DealsConfig) -> None:
    seen: set[str] = set()
    for index, deal in enumerate(config.deals):
        if deal.worker_name in seen:
            raise SemanticValidationError(
                f"Duplicate deal for worker {deal.worker_name!r}",
                field_path=f"deals[{index}].workerName",
            )
        seen.add(deal.worker_name)
        if deal.effective_min_workers > deal.effective_target_workers:
            raise SemanticValidationError(
                f"Deal for worker {deal.worker_name!r}: minWorkers "
                f"({deal.effective_min_workers}) must not exceed targetWorkers "
                f"({deal.effective_target_workers})",
                field_path=f"deals[{index}].minWorkers",
            )


DEALS = ConfigKind[DealsConfig](
    name="deals",
    file_name=DEALS_FILE_NAME,
    schemas=(DealsConfigV0, DealsConfigV1),
    migrations=(migrate_deals_v0_to_v1,),
    semantic_check=check_deals,
    template="deals.yaml.j2",
    location=DEALS_FILE_NAME,
    description="Defines deals that are created when workers are deployed",
)
