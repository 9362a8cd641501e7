"""BaseService — abstract foundation for wargo services.

Every service receives the resolved :class:`WargoSettings` and, optionally,
a loaded :class:`PluginManager` for lifecycle hooks.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from wargo.config.settings import WargoSettings
    from wargo.plugins.manager import PluginManager


class BaseService:
    """Abstract base for service-layer classes.

    Usage::

        class BuildService(BaseService):
            def build(self, ...) -> ServiceResult:
                ...
    """

    def __init__(
        self,
        settings: WargoSettings,
        plugins: PluginManager | None = None,
    ) -> None:
        self._settings = settings
        self._plugins = plugins

    def _dispatch_event(
        self,
        hook_name: str,
        payload: dict[str, Any],
        warnings: list[str],
    ) -> None:
        """Dispatch a lifecycle event. No-op without a plugin manager.

        INVARIANT: Plugin failures are warnings, never errors.
        """
        if self._plugins is not None:
            warnings.extend(self._plugins.notify(hook_name, payload))
