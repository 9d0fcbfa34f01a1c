"""Command: config file upgrades."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from fluencectl.commands._base import FluenceCommand

if TYPE_CHECKING:
    from fluencectl.commands._context import AppContext


@click.command(
    cls=FluenceCommand,
    examples="""\
  fluencectl upgrade
  fluencectl upgrade --check
  fluencectl --json upgrade --check""",
)
@click.option(
    "--check", "check_only", is_flag=True, help="Show outdated config files without rewriting."
)
@click.pass_obj
def upgrade(app: AppContext, check_only: bool) -> None:
    """Migrate every config file in the project to its latest version."""
    from fluencectl.services.upgrade import UpgradeService

    svc = UpgradeService(app.project)
    app.emit(svc.check_pending() if check_only else svc.apply())
