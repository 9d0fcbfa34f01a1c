"""Unified settings: CLI flags, env vars and ``.env`` in one object.

Priority chain (highest to lowest):
  1. Init kwargs: CLI flags passed by Click
  2. Env vars: ``FLUENCE_*`` prefix (``FLUENCE_ENV`` selects the network)
  3. ``.env`` file in the project root (or cwd outside a project)
  4. Code defaults

The network is resolved exactly once here and then passed explicitly to
services and plugin hooks; nothing writes it back into ``os.environ``.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings

from fluencectl.config.discovery import find_project_root
from fluencectl.domain.names import DEFAULT_NETWORK, Network

ENV_FILE_NAME = ".env"


class FluenceSettings(BaseSettings):
    """Settings for the entire fluencectl CLI.

    Stored in :class:`~fluencectl.commands._context.AppContext` at the CLI
    root level.

    Attributes:
        project_root: Directory holding ``fluence.yaml``, or None outside a
            project.
        cwd: Directory the CLI was invoked from; base for new projects.
        env: Network commands talk to.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "FLUENCE_",
        "extra": "ignore",
    }

    project_root: Path | None = None
    cwd: Path = Field(default_factory=Path.cwd)
    env: Network = DEFAULT_NETWORK

    # --- CLI flags ---
    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False
    no_interact: bool = False

    @property
    def interactive(self) -> bool:
        return not self.no_interact

    @classmethod
    def from_cli(
        cls,
        *,
        project_dir: Path | None = None,
        env: str | None = None,
        **cli_flags: Any,
    ) -> FluenceSettings:
        """Construct settings from a CLI invocation.

        An explicit *project_dir* wins over discovery; otherwise the project
        root is found by walking up from the cwd.  *env* overrides
        ``FLUENCE_ENV`` only when given.
        """
        cwd = Path.cwd()
        root = project_dir.resolve() if project_dir is not None else find_project_root(cwd)
        overrides: dict[str, Any] = dict(cli_flags)
        if env is not None:
            overrides["env"] = env
        env_file = (root or cwd) / ENV_FILE_NAME
        return cls(
            project_root=root,
            cwd=cwd,
            _env_file=env_file,  # type: ignore[call-arg]
            **overrides,
        )
