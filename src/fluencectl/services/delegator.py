"""DelegatorService: capacity-commitment withdrawals.

These operations do not need a project; they only need the network and a
chain client plugin for it.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING

from fluencectl.services.result import ServiceResult

if TYPE_CHECKING:
    from fluencectl.plugins.manager import PluginManager

logger = logging.getLogger(__name__)


class DelegatorService:
    """Withdraws collateral and rewards through the chain client plugin."""

    def __init__(self, network: str, plugins: PluginManager | None) -> None:
        self._network = network
        self._plugins = plugins

    def withdraw_collateral(self, commitment_ids: Sequence[str]) -> ServiceResult:
        """Withdraw collateral from the given capacity commitments."""
        return self._run("withdraw_collateral", commitment_ids)

    def withdraw_rewards(self, commitment_ids: Sequence[str]) -> ServiceResult:
        """Withdraw rewards from the given capacity commitments."""
        return self._run("reward_withdraw", commitment_ids)

    def _run(self, op: str, commitment_ids: Sequence[str]) -> ServiceResult:
        ids = list(commitment_ids)
        if not ids:
            return ServiceResult.failure(
                op, "NO_COMMITMENT_IDS", "No capacity commitment IDs given"
            )

        client = self._plugins.chain_client(self._network) if self._plugins else None
        if client is None:
            return ServiceResult.failure(
                op,
                "NO_CHAIN_CLIENT",
                f"No chain client plugin is installed for network {self._network!r}",
            )

        try:
            if op == "withdraw_collateral":
                client.withdraw_collateral(ids)
            else:
                client.withdraw_rewards(ids)
        except Exception as exc:
            logger.debug("%s failed", op, exc_info=True)
            return ServiceResult.failure(
                op,
                "CHAIN_ERROR",
                f"Chain call failed: {exc}",
                detail={"commitment_ids": ids},
            )

        return ServiceResult(
            ok=True,
            op=op,
            data={"network": self._network, "commitment_ids": ids, "count": len(ids)},
        )
