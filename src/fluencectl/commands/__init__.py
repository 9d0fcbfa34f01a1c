"""Subcommand modules for fluencectl.

Provides register_commands() which uses deferred imports to keep
``fluencectl --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all command groups and standalone commands on the root CLI group."""
    # --- Groups ---
    from fluencectl.commands.deal import deal
    from fluencectl.commands.delegator import delegator
    from fluencectl.commands.service import service

    cli.add_command(service)
    cli.add_command(deal)
    cli.add_command(delegator)

    # --- Standalone commands ---
    from fluencectl.commands.check import check
    from fluencectl.commands.init_cmd import init_cmd
    from fluencectl.commands.upgrade import upgrade

    cli.add_command(init_cmd)
    cli.add_command(upgrade)
    cli.add_command(check)
