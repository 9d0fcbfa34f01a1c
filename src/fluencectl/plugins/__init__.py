"""Extension layer: plugin system via pluggy.

Plugins supply the chain client, worker uploader and downloader, and
observe lifecycle events.  Implement hooks with :data:`hookimpl`.
INVARIANT: Plugin failures while loading or notifying are warnings, never errors.
"""

import pluggy

from fluencectl.plugins.manager import PluginManager

hookimpl = pluggy.HookimplMarker("fluencectl")

__all__ = ["PluginManager", "hookimpl"]
