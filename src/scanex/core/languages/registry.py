from __future__ import annotations

"""
Language Plugin Registry.

Discovers every plugin module of the languages package, indexes plugins
by the extensions they own and keeps the ordered resolver chain used when
a reference is not a plain relative path.
"""

import importlib
import logging
import os
import pkgutil
from typing import Dict, Iterable, List, Optional

from scanex.core.languages.base import LanguagePlugin

logger = logging.getLogger(__name__)

DEFAULT_PLUGIN_PACKAGE = "scanex.core.languages"

# Base name whose variants (Dockerfile.dev, Dockerfile.prod, ...) map to one pseudo extension
RESERVED_BASE_NAME = "Dockerfile"

_NON_PLUGIN_MODULES = {"base", "registry"}


class PluginRegistry:
    """
    Extension index over a set of language plugins.

    Attributes:
        scanners: Extension to owning plugin (last registration wins).
        resolvers: Plugins with a resolver, in registration order.
        all_extensions: Every registered extension, first-seen order.
    """

    def __init__(self) -> None:
        self.scanners: Dict[str, LanguagePlugin] = {}
        self.resolvers: List[LanguagePlugin] = []
        self.all_extensions: List[str] = []
        self._by_length: List[str] = []
        self._plugins: List[LanguagePlugin] = []

    @classmethod
    def from_plugins(cls, plugins: Iterable[LanguagePlugin]) -> PluginRegistry:
        """Build a registry from already instantiated plugins."""
        registry = cls()
        for plugin in plugins:
            registry.register(plugin)
        return registry

    def register(self, plugin: LanguagePlugin) -> None:
        """
        Add a plugin under each of its extensions.

        Args:
            plugin: Plugin instance to index.
        """
        for ext in plugin.extensions:
            previous = self.scanners.get(ext)
            if previous is not None and previous is not plugin:
                logger.debug(f"Extension '{ext}' reassigned from {previous.name} to {plugin.name}")
            self.scanners[ext] = plugin
            if ext not in self.all_extensions:
                self.all_extensions.append(ext)

        if plugin not in self._plugins:
            self._plugins.append(plugin)
        if plugin.has_resolver and plugin not in self.resolvers:
            self.resolvers.append(plugin)

        # Composite extensions (.html.erb) must be tried before their suffixes (.erb)
        self._by_length = sorted(self.all_extensions, key=len, reverse=True)
        logger.debug(f"Plugin {plugin.name} ready")

    # -------------------------------------------------------------------------
    # LOOKUP
    # -------------------------------------------------------------------------

    @property
    def probe_extensions(self) -> List[str]:
        """Dotted extensions, in registry order, usable as path suffixes."""
        return [e for e in self.all_extensions if e.startswith(".")]

    def detect_extension(self, path: str) -> str:
        """
        Determine the registry extension of a file.

        Args:
            path: File path.

        Returns:
            str: Matching registered extension, else the plain trailing suffix.
        """
        base = os.path.basename(path)
        if RESERVED_BASE_NAME in self.scanners and (
                base == RESERVED_BASE_NAME or base.startswith(RESERVED_BASE_NAME + ".")
        ):
            return RESERVED_BASE_NAME

        for ext in self._by_length:
            if ext.startswith("."):
                if base.endswith(ext):
                    return ext
            elif base == ext:
                return ext

        return os.path.splitext(base)[1]

    def plugin_for(self, path: str) -> Optional[LanguagePlugin]:
        """Return the plugin owning the file's extension, if any."""
        return self.scanners.get(self.detect_extension(path))

    def is_recognized(self, path: str) -> bool:
        return self.plugin_for(path) is not None

    @property
    def plugins(self) -> List[LanguagePlugin]:
        """Distinct registered plugins in registration order."""
        return list(self._plugins)


# -----------------------------------------------------------------------------
# LOADING
# -----------------------------------------------------------------------------

def load_plugins(package: str = DEFAULT_PLUGIN_PACKAGE) -> PluginRegistry:
    """
    Import every plugin module of a package and register its PLUGIN.

    Modules are visited in name order. A module without a PLUGIN attribute
    is skipped; a module that fails to import is logged and skipped so one
    broken grammar does not disable the others.

    Args:
        package: Dotted name of the package holding plugin modules.

    Returns:
        PluginRegistry: Populated registry.
    """
    pkg = importlib.import_module(package)
    registry = PluginRegistry()

    module_names = sorted(
        info.name for info in pkgutil.iter_modules(pkg.__path__)
        if not info.name.startswith("_") and info.name not in _NON_PLUGIN_MODULES
    )

    for module_name in module_names:
        try:
            module = importlib.import_module(f"{package}.{module_name}")
        except Exception as e:
            logger.error(f"Failed to load language plugin '{module_name}': {e}")
            continue

        plugin = getattr(module, "PLUGIN", None)
        if not isinstance(plugin, LanguagePlugin):
            logger.debug(f"Module {module_name} exposes no PLUGIN, skipped")
            continue
        registry.register(plugin)

    logger.debug(f"Loaded {len(registry.plugins)} plugin(s): {len(registry.all_extensions)} extension(s)")
    return registry
