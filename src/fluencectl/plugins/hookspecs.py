"""Pluggy hook specifications for fluencectl.

Provider hooks (``firstresult``) supply the external collaborators that
commands need: a chain client, a worker uploader and a downloader for remote
service archives.  Lifecycle hooks are notified after a command succeeds.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pluggy

if TYPE_CHECKING:
    from pathlib import Path

    from fluencectl.services.chain import ChainClient, WorkerUploader

hookspec = pluggy.HookspecMarker("fluencectl")


class FluencectlHookSpec:
    """Hook specifications for the fluencectl plugin system."""

    # ------------------------------------------------------------------
    # Providers
    # ------------------------------------------------------------------

    @hookspec(firstresult=True)
    def fluencectl_chain_client(self, network: str) -> ChainClient | None:
        """Return a chain client for *network*, or None to let another plugin answer."""

    @hookspec(firstresult=True)
    def fluencectl_worker_uploader(self, network: str) -> WorkerUploader | None:
        """Return a worker uploader for *network*, or None."""

    @hookspec(firstresult=True)
    def fluencectl_download(self, url: str, dest_dir: Path) -> Path | None:
        """Materialize *url* under *dest_dir* and return the local path, or None."""

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @hookspec
    def post_init(self, project_path: str, template: str) -> None:
        """Called after a project is scaffolded."""

    @hookspec
    def post_deal_deploy(
        self,
        worker_name: str,
        deal_address: str,
        network: str,
        updated: bool,
    ) -> None:
        """Called after a deal is created (``updated=False``) or updated."""
