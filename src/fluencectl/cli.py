"""Root CLI group for fluencectl with global flags and command registration."""

from __future__ import annotations

from pathlib import Path

import click
from pydantic import ValidationError

from fluencectl import __version__
from fluencectl.commands import register_commands
from fluencectl.commands._context import AppContext
from fluencectl.config.settings import FluenceSettings
from fluencectl.domain.names import NETWORKS


def _settings_error(exc: ValidationError) -> click.UsageError:
    problems = "; ".join(
        f"{'.'.join(str(p) for p in err['loc']) or 'settings'}: {err['msg']}"
        for err in exc.errors()
    )
    return click.UsageError(f"Invalid settings ({problems}). Check FLUENCE_* env vars and .env")


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="fluencectl")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-q", "--quiet", is_flag=True, help="Minimal output.")
@click.option("-v", "--verbose", is_flag=True, help="Detailed output with debug info.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("--no-interact", is_flag=True, help="Non-interactive mode (no prompts).")
@click.option(
    "--env",
    type=click.Choice(NETWORKS),
    default=None,
    help="Network to use (overrides FLUENCE_ENV).",
)
@click.option(
    "-C",
    "--project-dir",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=None,
    help="Project directory (default: discovered from the cwd).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    no_interact: bool,
    env: str | None,
    project_dir: Path | None,
) -> None:
    """fluencectl: manage Fluence projects, services and deals."""
    ctx.ensure_object(dict)
    try:
        settings = FluenceSettings.from_cli(
            project_dir=project_dir,
            env=env,
            json_output=json_output,
            quiet=quiet,
            verbose=verbose,
            log_json=log_json,
            no_interact=no_interact,
        )
    except ValidationError as exc:
        raise _settings_error(exc) from exc
    ctx.obj = AppContext(settings)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
