"""Plugin discovery and converter registration.

Discovery: entry_points (pip-installed) via pluggy setuptools entrypoints
in the ``propbind.converters`` group, plus plugin instances registered
directly with :meth:`PluginManager.register_plugin`.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING

import pluggy

from propbind.plugins.hookspecs import PropbindHookSpec

if TYPE_CHECKING:
    from propbind.binding.converters import ConverterRegistry

PROJECT_NAME = "propbind"
ENTRY_POINT_GROUP = "propbind.converters"

logger = logging.getLogger(__name__)


class PluginManager:
    """Manages plugin discovery, loading, and converter registration."""

    def __init__(self) -> None:
        self._pm = pluggy.PluginManager(PROJECT_NAME)
        self._pm.add_hookspecs(PropbindHookSpec)
        self._loaded: bool = False

    def discover_and_load(self) -> list[str]:
        """Load plugins from the ``propbind.converters`` entry-point group.

        Returns a list of loaded plugin names.
        """
        self._pm.load_setuptools_entrypoints(ENTRY_POINT_GROUP)
        self._normalize_plugin_instances()
        self._loaded = True
        return self.list_plugin_names()

    def register_plugin(self, plugin: object, name: str | None = None) -> None:
        """Register a plugin instance directly."""
        resolved_name = name or plugin.__class__.__name__
        self._pm.register(plugin, name=resolved_name)
        logger.debug("Registered plugin: %s", resolved_name)

    def unregister(self, plugin: object) -> None:
        self._pm.unregister(plugin)

    @property
    def is_loaded(self) -> bool:
        """Whether discover_and_load() has been called."""
        return self._loaded

    def list_plugin_names(self) -> list[str]:
        """Return names of all registered plugins."""
        return [self._pm.get_name(p) or p.__class__.__name__ for p in self._pm.get_plugins()]

    def apply_converters(self, registry: ConverterRegistry) -> list[str]:
        """Register every plugin-provided converter into *registry*.

        Each plugin is asked separately so one broken plugin cannot hide
        the others. Returns the names of the registered types.
        """
        from propbind.binding.converters import Converter, type_name

        registered: list[str] = []
        for plugin in self._pm.get_plugins():
            plugin_name = self._pm.get_name(plugin) or plugin.__class__.__name__
            hook = getattr(plugin, "register_converters", None)
            if hook is None:
                continue
            try:
                converters = hook()
            except Exception:
                logger.warning("Failed to collect converters from plugin %s", plugin_name, exc_info=True)
                continue
            if converters is None:
                continue
            if not isinstance(converters, Mapping):
                logger.warning("Plugin %s returned non-mapping converter registrations", plugin_name)
                continue
            for tp, converter in converters.items():
                if not isinstance(tp, type) or not isinstance(converter, Converter):
                    logger.warning("Plugin %s returned an invalid converter for %r", plugin_name, tp)
                    continue
                registry.register(tp, converter)
                registered.append(type_name(tp))
                logger.debug("Plugin %s registered converter for %s", plugin_name, type_name(tp))
        return registered

    def _normalize_plugin_instances(self) -> None:
        """Replace registered plugin classes with instantiated objects.

        Entry-point loading may register a plugin class directly. Hook dispatch
        against class objects leaves ``self`` unbound and fails at runtime.
        """
        for plugin in list(self._pm.get_plugins()):
            if not inspect.isclass(plugin):
                continue
            plugin_name = self._pm.get_name(plugin) or plugin.__name__
            self._pm.unregister(plugin)
            try:
                instance = plugin()
            except Exception:
                logger.warning("Failed to instantiate entry-point plugin %s", plugin_name, exc_info=True)
                continue
            self._pm.register(instance, name=plugin_name)
            logger.debug("Instantiated entry-point plugin: %s", plugin_name)
