"""BaseService: foundation for project-bound fluencectl services.

Every project service receives a :class:`Project` at construction time and
reaches config files only through it.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from fluencectl.infrastructure.project import Project

logger = logging.getLogger(__name__)


class BaseService:
    """Base for service-layer classes that operate on one project.

    Usage::

        class UpgradeService(BaseService):
            def apply(self) -> ServiceResult:
                handle = self._project.open(PROJECT)
                ...
    """

    def __init__(self, project: Project) -> None:
        self._project = project

    def _notify(self, hook_name: str, warnings: list[str], **payload: Any) -> None:
        """Dispatch a lifecycle hook. No-op without plugins.

        INVARIANT: Plugin failures are warnings, never errors.
        """
        plugins = self._project.plugins
        if plugins is None:
            return
        plugins.notify(hook_name, warnings, **payload)
