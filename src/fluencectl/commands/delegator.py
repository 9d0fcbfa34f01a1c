"""Command group: delegator withdrawals (withdraw-collateral, reward-withdraw)."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from fluencectl.commands._base import FluenceGroup
from fluencectl.domain.names import comma_separated

if TYPE_CHECKING:
    from fluencectl.commands._context import AppContext
    from fluencectl.services.delegator import DelegatorService

_IDS_PROMPT = "Comma-separated capacity commitment IDs"


@click.group(
    cls=FluenceGroup,
    examples="""\
  fluencectl delegator withdraw-collateral 0xabc,0xdef
  fluencectl delegator wc 0xabc
  fluencectl --env testnet delegator reward-withdraw 0xabc""",
)
def delegator() -> None:
    """Manage delegated capacity commitments."""


def _commitment_ids(app: AppContext, ids: str | None) -> list[str]:
    if ids is None:
        ids = app.prompt(_IDS_PROMPT, default="")
    return comma_separated(ids)


def _service(app: AppContext) -> DelegatorService:
    from fluencectl.services.delegator import DelegatorService

    return DelegatorService(app.settings.env, app.plugins)


@delegator.command(
    "withdraw-collateral",
    examples="""\
  fluencectl delegator withdraw-collateral 0xabc,0xdef
  fluencectl delegator wc 0xabc""",
)
@click.argument("ids", metavar="[IDS]", required=False, default=None)
@click.pass_obj
def withdraw_collateral(app: AppContext, ids: str | None) -> None:
    """Withdraw collateral from capacity commitments (alias: wc)."""
    app.emit(_service(app).withdraw_collateral(_commitment_ids(app, ids)))


@delegator.command(
    "reward-withdraw",
    examples="""\
  fluencectl delegator reward-withdraw 0xabc
  fluencectl delegator rw 0xabc,0xdef""",
)
@click.argument("ids", metavar="[IDS]", required=False, default=None)
@click.pass_obj
def reward_withdraw(app: AppContext, ids: str | None) -> None:
    """Withdraw rewards from capacity commitments (alias: rw)."""
    app.emit(_service(app).withdraw_rewards(_commitment_ids(app, ids)))


delegator.add_alias("wc", "withdraw-collateral")
delegator.add_alias("rw", "reward-withdraw")
