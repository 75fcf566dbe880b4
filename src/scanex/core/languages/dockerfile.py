from __future__ import annotations

"""
Dockerfile Plugin.

Dockerfiles (including Dockerfile.<stage> variants) are bundled for
context but never scanned for further references.
"""

from typing import List

from scanex.core.languages.base import LanguagePlugin
from scanex.domain.specifier_models import Specifier


class DockerfilePlugin(LanguagePlugin):
    name = "dockerfile"
    extensions = ("Dockerfile", ".dockerfile")

    def scan(self, content: str, file: str) -> List[Specifier]:
        return []


PLUGIN = DockerfilePlugin()
