from __future__ import annotations

"""Markdown Plugin: documentation is bundled, never scanned."""

from typing import List

from scanex.core.languages.base import LanguagePlugin
from scanex.domain.specifier_models import Specifier


class MarkdownPlugin(LanguagePlugin):
    name = "markdown"
    extensions = (".md", ".markdown")

    def scan(self, content: str, file: str) -> List[Specifier]:
        return []


PLUGIN = MarkdownPlugin()
