"""DealService: deploy workers and create or update their deals.

Pipeline: RESOLVE NETWORK → COLLECT WORKERS → UPLOAD → CREATE/UPDATE → RECORD

Each deal is recorded in ``.fluence/deployed.yaml`` right after the chain
call succeeds, so a failure part way through keeps the deals already made.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING, Any

from fluencectl.domain.errors import ConfigError
from fluencectl.domain.manifests import DEALS, DEPLOYED_DEALS, PROJECT, SERVICE, WORKERS
from fluencectl.domain.manifests.deployed_deals import DeployedDeal
from fluencectl.services._helpers import now_iso
from fluencectl.services.base import BaseService
from fluencectl.services.chain import ServiceSpec, WorkerSpec
from fluencectl.services.result import ServiceResult

if TYPE_CHECKING:
    from fluencectl.domain.manifests.deals import DealsConfig
    from fluencectl.domain.manifests.project import ProjectConfig
    from fluencectl.domain.manifests.workers import WorkersConfig
    from fluencectl.domain.names import Network
    from fluencectl.services.chain import ChainClient, WorkerUploader

logger = logging.getLogger(__name__)

# Asked before an existing deal on the same network is updated in place.
ConfirmUpdate = Callable[[str], bool]


class _DeployError(Exception):
    def __init__(self, code: str, message: str, **detail: Any) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.detail = detail


class DealService(BaseService):
    """Deploys the workers described by ``workers.yaml`` and ``deals.yaml``."""

    def deploy(
        self,
        worker_names: Sequence[str] | None = None,
        *,
        network: Network | None = None,
        confirm_update: ConfirmUpdate | None = None,
    ) -> ServiceResult:
        """Upload workers and create (or update) one deal per worker.

        Args:
            worker_names: Workers to deploy; default all deals in deals.yaml.
            network: Overrides the network from deals.yaml and settings.
            confirm_update: Decides whether a previously deployed deal is
                updated; when None, existing deals are always updated.
        """
        op = "deal_deploy"
        warnings: list[str] = []
        deployed: list[dict[str, Any]] = []

        try:
            project = self._project.open_readonly(PROJECT).data
            workers = self._project.open_readonly(WORKERS).data
            deals = self._project.open_readonly(DEALS).data

            target = network or deals.network or self._project.network
            chain, uploader = self._collaborators(target)

            names = list(worker_names) if worker_names else [d.worker_name for d in deals.deals]
            if not names:
                raise _DeployError("NO_DEALS", "No deals to deploy: deals.yaml is empty")
            specs = [self._worker_spec(name, project, workers, deals) for name in names]

            logger.debug("Uploading %d worker(s) to %s", len(specs), target)
            cids = dict(uploader.upload(specs))
            for spec in specs:
                if spec.name not in cids:
                    raise _DeployError(
                        "UPLOAD_FAILED",
                        f"Uploader returned no definition CID for worker {spec.name!r}",
                    )

            for spec in specs:
                outcome = self._deploy_one(
                    spec.name, cids[spec.name], deals, chain, target, confirm_update
                )
                deployed.append(outcome)
                self._notify(
                    "post_deal_deploy",
                    warnings,
                    worker_name=spec.name,
                    deal_address=outcome["deal_address"],
                    network=target,
                    updated=outcome["updated"],
                )
        except ConfigError as exc:
            return ServiceResult.from_config_error(op, exc, warnings=warnings)
        except _DeployError as exc:
            detail = {**exc.detail, "deployed": deployed}
            return ServiceResult.failure(
                op, exc.code, exc.message, detail=detail, warnings=warnings
            )
        except Exception as exc:
            logger.debug("Chain operation failed", exc_info=True)
            return ServiceResult.failure(
                op,
                "CHAIN_ERROR",
                f"Deal deployment failed: {exc}",
                detail={"deployed": deployed},
                warnings=warnings,
            )

        return ServiceResult(
            ok=True,
            op=op,
            data={"network": target, "deals": deployed, "count": len(deployed)},
            warnings=warnings,
        )

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------

    def _collaborators(self, network: str) -> tuple[ChainClient, WorkerUploader]:
        plugins = self._project.plugins
        chain = plugins.chain_client(network) if plugins is not None else None
        if chain is None:
            raise _DeployError(
                "NO_CHAIN_CLIENT", f"No chain client plugin is installed for network {network!r}"
            )
        uploader = plugins.worker_uploader(network) if plugins is not None else None
        if uploader is None:
            raise _DeployError(
                "NO_UPLOADER", f"No worker uploader plugin is installed for network {network!r}"
            )
        return chain, uploader

    def _worker_spec(
        self,
        name: str,
        project: ProjectConfig,
        workers: WorkersConfig,
        deals: DealsConfig,
    ) -> WorkerSpec:
        if deals.find(name) is None:
            raise _DeployError(
                "UNKNOWN_WORKER", f"No deal for worker {name!r} in deals.yaml", field="deals"
            )
        definition = workers.workers.get(name)
        if definition is None:
            raise _DeployError(
                "UNKNOWN_WORKER",
                f"Worker {name!r} is not defined in workers.yaml",
                field="workers",
            )

        resolver = self._project.resolver()
        services: list[ServiceSpec] = []
        for service_name in definition.services:
            reference = (project.services or {}).get(service_name)
            if reference is None:
                raise _DeployError(
                    "UNKNOWN_SERVICE",
                    f"Worker {name!r} uses service {service_name!r} "
                    "which is not registered in fluence.yaml",
                    field=f"workers.{name}.services",
                )
            manifest = self._project.open_readonly(SERVICE, base=resolver.resolve(reference.get))
            services.append(
                ServiceSpec(
                    name=service_name,
                    path=str(manifest.path.parent),
                    modules=manifest.data.module_names(),
                )
            )
        return WorkerSpec(name=name, services=services)

    def _deploy_one(
        self,
        worker_name: str,
        worker_cid: str,
        deals: DealsConfig,
        chain: ChainClient,
        network: Network,
        confirm_update: ConfirmUpdate | None,
    ) -> dict[str, Any]:
        record = self._project.open(DEPLOYED_DEALS, create=True)
        previous = record.data.find(worker_name, network=network)

        if previous is not None and (confirm_update is None or confirm_update(worker_name)):
            logger.debug("Updating deal %s for worker %s", previous.deal_address, worker_name)
            chain.update_deal(deal_address=previous.deal_address, app_cid=worker_cid)
            deal_address = previous.deal_address
            updated = True
        else:
            deal = deals.find(worker_name)
            assert deal is not None
            logger.debug("Creating deal for worker %s", worker_name)
            deal_address = chain.create_deal(
                app_cid=worker_cid,
                min_workers=deal.effective_min_workers,
                target_workers=deal.effective_target_workers,
            )
            updated = False

        entry = DeployedDeal(
            worker_name=worker_name,
            deal_address=deal_address,
            timestamp=now_iso(),
            worker_cid=worker_cid,
            network=network,
        )
        # One record per (worker, network); a declined update is replaced too.
        entries = [
            e for e in record.data.deals if (e.worker_name, e.network) != (worker_name, network)
        ]
        entries.append(entry)
        record.update(deals=entries)
        record.commit()

        return {
            "worker_name": worker_name,
            "deal_address": deal_address,
            "worker_cid": worker_cid,
            "updated": updated,
        }
