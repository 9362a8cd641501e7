"""Extension layer — plugin system via pluggy.

INVARIANT: Plugin failures are warnings, never errors.
"""

import pluggy

from wargo.plugins.manager import PluginManager

hookimpl = pluggy.HookimplMarker("wargo")

__all__ = ["PluginManager", "hookimpl"]
