"""Plugin loading and isolated hook dispatch.

Plugins come from the ``wargo.plugins`` entry-point group and from
single-file modules in a project's ``.wargo/plugins/`` directory. A plugin
that fails to load, or raises from a hook, becomes a warning; it never
fails a build or init.
"""

from __future__ import annotations

import importlib.util
import logging
import sys
from pathlib import Path
from types import ModuleType
from typing import Any

import pluggy

from wargo.plugins.hookspecs import WargoHookSpec

PROJECT_NAME = "wargo"
ENTRY_POINT_GROUP = "wargo.plugins"
LOCAL_MODULE_PREFIX = "wargo_local_plugin_"

HOOK_NAMES = frozenset(name for name in vars(WargoHookSpec) if not name.startswith("_"))

logger = logging.getLogger(__name__)


def _import_file(module_name: str, path: Path) -> ModuleType:
    spec = importlib.util.spec_from_file_location(module_name, path)
    if spec is None or spec.loader is None:
        raise ImportError(f"cannot import {path}")
    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)
    except Exception:
        sys.modules.pop(module_name, None)
        raise
    return module


def implements_hooks(cls: type) -> bool:
    """Whether *cls* marks at least one wargo hook with ``@hookimpl``."""
    marker = f"{PROJECT_NAME}_impl"
    return any(getattr(getattr(cls, hook, None), marker, None) for hook in HOOK_NAMES)


class PluginManager:
    """Loads wargo plugins and calls their lifecycle hooks.

    ``warnings`` collects every load failure so the CLI can report them
    next to the operation's own warnings.
    """

    def __init__(self) -> None:
        self._pm = pluggy.PluginManager(PROJECT_NAME)
        self._pm.add_hookspecs(WargoHookSpec)
        self.warnings: list[str] = []

    @property
    def names(self) -> list[str]:
        return [name for name, plugin in self._pm.list_name_plugin() if plugin is not None]

    def register_plugin(self, plugin: object, name: str | None = None) -> None:
        name = name or type(plugin).__name__
        self._pm.register(plugin, name=name)
        logger.debug("Registered plugin %s", name)

    def load(self, *, local_dir: Path | None = None) -> list[str]:
        """Load entry-point plugins, then the ``*.py`` files in *local_dir*.

        Files whose name starts with ``_`` are helpers and are not imported.
        Returns the names of all registered plugins.
        """
        try:
            self._pm.load_setuptools_entrypoints(ENTRY_POINT_GROUP)
        except Exception as exc:
            logger.debug("Entry-point plugin loading failed", exc_info=True)
            self.warnings.append(f"Plugin discovery failed: {exc}")

        if local_dir is not None and local_dir.is_dir():
            for path in sorted(local_dir.glob("*.py")):
                if not path.name.startswith("_"):
                    self._load_file(path)
        return self.names

    def notify(self, hook_name: str, payload: dict[str, Any]) -> list[str]:
        """Call *hook_name* on every plugin and return one warning per failure.

        Plugins run in pluggy's call order, and a plugin that raises does
        not stop the ones after it.
        """
        caller = getattr(self._pm.hook, hook_name)
        failures: list[str] = []
        for impl in reversed(caller.get_hookimpls()):
            try:
                impl.function(**{arg: payload[arg] for arg in impl.argnames})
            except Exception:
                logger.debug("Plugin %s failed in %s", impl.plugin_name, hook_name, exc_info=True)
                failures.append(f"Plugin {impl.plugin_name} failed in {hook_name}")
        return failures

    def _load_file(self, path: Path) -> None:
        module_name = f"{LOCAL_MODULE_PREFIX}{path.stem}"
        try:
            module = _import_file(module_name, path)
        except Exception as exc:
            logger.debug("Could not import %s", path, exc_info=True)
            self.warnings.append(f"Skipped local plugin {path.name}: {exc}")
            return

        for obj in list(vars(module).values()):
            if not isinstance(obj, type) or obj.__module__ != module_name:
                continue
            if not implements_hooks(obj):
                continue
            try:
                self.register_plugin(obj(), name=f"{module_name}.{obj.__name__}")
            except Exception as exc:
                logger.debug("Could not register %s from %s", obj.__name__, path, exc_info=True)
                self.warnings.append(f"Skipped plugin {obj.__name__} in {path.name}: {exc}")
