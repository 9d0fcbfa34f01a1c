"""Resolve user-supplied service locators to local paths.

A locator is either a filesystem path (absolute, or relative to the project
root) or an ``http(s)://`` URL.  URLs are materialized by a downloader,
normally the ``fluencectl_download`` plugin hook, into
``.fluence/downloads/<digest>/`` before the config engine sees them.
"""

from __future__ import annotations

import hashlib
import logging
from collections.abc import Callable
from pathlib import Path

from fluencectl.domain.errors import NotFound
from fluencectl.infrastructure.filesystem import FLUENCE_DIR

logger = logging.getLogger(__name__)

# (url, dest_dir) -> local path, or None when the URL is not handled.
Downloader = Callable[[str, Path], Path | str | None]

DOWNLOADS_DIR = f"{FLUENCE_DIR}/downloads"
_URL_SCHEMES = ("http://", "https://")


def is_url(locator: str) -> bool:
    """True if *locator* is a remote URL rather than a filesystem path."""
    return locator.lower().startswith(_URL_SCHEMES)


class LocationResolver:
    """Turns service locators into local paths.

    Args:
        project_root: Base for relative paths and the download cache.
        downloader: Fetches remote locators; without one URLs are NotFound.
    """

    def __init__(self, project_root: Path, *, downloader: Downloader | None = None) -> None:
        self._root = project_root
        self._downloader = downloader

    def resolve(self, locator: str) -> Path:
        """Return a local file or directory for *locator*.

        Raises:
            NotFound: The path does not exist, or a URL cannot be fetched.
        """
        if is_url(locator):
            return self._download(locator)
        path = Path(locator).expanduser()
        if not path.is_absolute():
            path = self._root / path
        if not path.exists():
            raise NotFound(f"Nothing found at {locator!r}", path=path)
        return path

    def cache_dir_for(self, url: str) -> Path:
        """Download directory for *url*; stable across invocations."""
        digest = hashlib.sha256(url.encode("utf-8")).hexdigest()[:16]
        return self._root / DOWNLOADS_DIR / digest

    def _download(self, url: str) -> Path:
        if self._downloader is None:
            raise NotFound(f"Cannot fetch {url}: no downloader plugin is installed")
        dest = self.cache_dir_for(url)
        dest.mkdir(parents=True, exist_ok=True)
        logger.debug("Downloading %s into %s", url, dest)
        result = self._downloader(url, dest)
        if result is None:
            raise NotFound(f"Cannot fetch {url}: no downloader plugin handled it")
        path = Path(result)
        if not path.exists():
            raise NotFound(f"Downloader returned a missing path for {url}", path=path)
        return path
