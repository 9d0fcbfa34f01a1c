"""AppContext: shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``.  Provides lazy plugin and project initialization,
prompts that honour ``--no-interact``, and centralized result emission
(stdout/stderr routing + exit codes).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from fluencectl.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from fluencectl.config.settings import FluenceSettings
    from fluencectl.infrastructure.project import Project
    from fluencectl.plugins.manager import PluginManager
    from fluencectl.services.result import ServiceResult


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    Plugins and the project are created on first use so ``--help`` and
    ``--version`` never touch the filesystem or import plugins.
    """

    def __init__(self, settings: FluenceSettings) -> None:
        self.settings = settings
        self._plugins: PluginManager | None = None
        self._project: Project | None = None

        from fluencectl.config.logging import configure_logging

        configure_logging(
            verbose=settings.verbose,
            quiet=settings.quiet,
            log_json=settings.log_json,
            network=settings.env,
        )

    @property
    def plugins(self) -> PluginManager:
        """Plugin manager with entry-point and project-local plugins loaded."""
        if self._plugins is None:
            from fluencectl.infrastructure.filesystem import PLUGINS_DIR
            from fluencectl.plugins.manager import PluginManager

            root = self.settings.project_root
            self._plugins = PluginManager()
            self._plugins.discover_and_load(
                local_dir=root / PLUGINS_DIR if root is not None else None
            )
        return self._plugins

    @property
    def project(self) -> Project:
        """The current project.

        Raises:
            click.ClickException: When not inside a Fluence project.
        """
        if self._project is None:
            root = self.settings.project_root
            if root is None:
                msg = (
                    f"No fluence.yaml found in {self.settings.cwd} or any parent directory. "
                    "Run `fluencectl init` to create a project."
                )
                raise click.ClickException(msg)

            from fluencectl.infrastructure.project import Project

            self._project = Project(root=root, network=self.settings.env, plugins=self.plugins)
        return self._project

    # ------------------------------------------------------------------
    # Interaction
    # ------------------------------------------------------------------

    def confirm(self, message: str, *, default: bool = True) -> bool:
        """Ask a yes/no question; non-interactive runs take *default*."""
        if not self.settings.interactive:
            return default
        return click.confirm(message, default=default, err=True)

    def prompt(self, message: str, *, default: str | None = None) -> str:
        """Ask for a value; non-interactive runs take *default* (or "")."""
        if not self.settings.interactive:
            return default or ""
        return str(click.prompt(message, default=default, err=True))

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success (``result.ok``): writes to stdout, returns normally.
          Warnings are emitted to stderr so they don't pollute piped output.
        * Failure: writes to stderr, exits with code 1.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            # In JSON mode, warnings are already in the serialized payload.
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)
