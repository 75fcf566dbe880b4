from __future__ import annotations

from .base import LanguagePlugin
from .registry import PluginRegistry, load_plugins

__all__ = [
    "LanguagePlugin",
    "PluginRegistry",
    "load_plugins",
]
