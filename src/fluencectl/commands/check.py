"""Command: project config validation."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from fluencectl.commands._base import FluenceCommand

if TYPE_CHECKING:
    from fluencectl.commands._context import AppContext


@click.command(
    cls=FluenceCommand,
    examples="""\
  fluencectl check
  fluencectl -v check
  fluencectl --json check""",
)
@click.pass_obj
def check(app: AppContext) -> None:
    """Validate every config file and the references between them."""
    from fluencectl.services.check import CheckService

    app.emit(CheckService(app.project).check())
