""".fluence/deployed.yaml: record of deals created by ``deal deploy``."""

from __future__ import annotations

from typing import Literal

from pydantic import Field

from fluencectl.domain.kinds import ConfigKind
from fluencectl.domain.manifests.common import ManifestModel
from fluencectl.domain.names import DEAL_ADDRESS_PATTERN, Network

DEPLOYED_DEALS_FILE_NAME = "deployed.yaml"


class DeployedDeal(ManifestModel):
    worker_name: str
    deal_address: str = Field(pattern=DEAL_ADDRESS_PATTERN)
    timestamp: str = Field(description="ISO 8601 time of the last create/update")
    worker_cid: str = Field(alias="workerCID")
    network: Network


class DeployedDealsConfigV0(ManifestModel):
    version: Literal[0]
    deals: list[DeployedDeal] = Field(default_factory=list)

    def find(self, worker_name: str, *, network: str | None = None) -> DeployedDeal | None:
        """Record for *worker_name*, optionally restricted to one network."""
        return next(
            (
                d
                for d in self.deals
                if d.worker_name == worker_name and (network is None or d.network == network)
            ),
            None,
        )


DeployedDealsConfig = DeployedDealsConfigV0


DEPLOYED_DEALS = ConfigKind[DeployedDealsConfig](
    name="deployed-deals",
    file_name=DEPLOYED_DEALS_FILE_NAME,
    schemas=(DeployedDealsConfigV0,),
    template="deployed.yaml.j2",
    location=f".fluence/{DEPLOYED_DEALS_FILE_NAME}",
    description="Deals created or updated by fluencectl; managed automatically",
)
