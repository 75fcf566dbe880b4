from __future__ import annotations

"""
JSON Plugin.

JSON documents are bundled when referenced or seeded but carry no
references of their own.
"""

from typing import List

from scanex.core.languages.base import LanguagePlugin
from scanex.domain.specifier_models import Specifier


class JsonPlugin(LanguagePlugin):
    name = "json"
    extensions = (".json",)

    def scan(self, content: str, file: str) -> List[Specifier]:
        return []


PLUGIN = JsonPlugin()
