"""Command group: deals (deploy)."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from fluencectl.commands._base import FluenceGroup
from fluencectl.domain.names import NETWORKS, comma_separated

if TYPE_CHECKING:
    from fluencectl.commands._context import AppContext


@click.group(
    cls=FluenceGroup,
    examples="""\
  fluencectl deal deploy
  fluencectl deal deploy defaultWorker,otherWorker
  fluencectl --no-interact deal deploy --network testnet""",
)
def deal() -> None:
    """Deploy workers as deals on chain."""


@deal.command(
    examples="""\
  fluencectl deal deploy
  fluencectl deal deploy defaultWorker
  fluencectl -q deal deploy --network local"""
)
@click.argument("worker_names", metavar="[WORKER-NAMES]", required=False, default=None)
@click.option(
    "--network",
    type=click.Choice(NETWORKS),
    default=None,
    help="Network to deploy to (overrides deals.yaml and --env).",
)
@click.pass_obj
def deploy(app: AppContext, worker_names: str | None, network: str | None) -> None:
    """Deploy workers from deals.yaml (comma-separated WORKER-NAMES, default all)."""
    from fluencectl.services.deal import DealService

    names = comma_separated(worker_names) if worker_names else None

    def confirm_update(worker_name: str) -> bool:
        return app.confirm(
            f"There is a previously deployed deal for worker {worker_name!r}. "
            "Do you want to update it?"
        )

    app.emit(
        DealService(app.project).deploy(
            names,
            network=network,  # type: ignore[arg-type]
            confirm_update=confirm_update if app.settings.interactive else None,
        )
    )
