from __future__ import annotations

"""
YAML Plugin.

Picks up file paths held in configuration values (file:, path:,
include:, template:, ...), in list entries and in embedded ERB calls.
"""

import os
import re
from typing import List, Optional

from scanex.core.languages.base import LanguagePlugin, dedupe, first_file, under_dirs
from scanex.domain.discovery_models import ResolutionContext
from scanex.domain.specifier_models import ClassifiedRef, Specifier

KIND_FILE = "file_reference"

CONFIG_DIRS = (
    "config", "config/environments", "config/initializers",
    "app/views", "app/views/layouts", "lib",
)

_TARGET_EXT = r"\.(?:yml|yaml|rb|json|html|erb)"
_PATTERNS = [
    re.compile(
        r"""(?:^|\s)(?:file|path|include|require|template|config):\s*["']?([^"'\s]+""" + _TARGET_EXT + r""")["']?""",
        re.IGNORECASE | re.MULTILINE,
    ),
    re.compile(r"""^\s*-\s*["']?([^"'\s]+""" + _TARGET_EXT + r""")["']?\s*$""", re.IGNORECASE | re.MULTILINE),
    re.compile(r"""<%=?\s*.*?["']([^"']+\.(?:html\.erb|erb))["'].*?%>"""),
]


class YamlPlugin(LanguagePlugin):
    name = "yaml"
    extensions = (".yml", ".yaml")
    kinds = (KIND_FILE,)

    def scan(self, content: str, file: str) -> List[Specifier]:
        if not content.strip():
            return []

        refs: List[Specifier] = []
        for pattern in _PATTERNS:
            for match in pattern.finditer(content):
                value = match.group(1)
                if value and not value.startswith(("http", "#")):
                    refs.append(ClassifiedRef(KIND_FILE, value))
        return dedupe(refs)

    def resolve(self, spec: Specifier, ctx: ResolutionContext) -> Optional[str]:
        if not self.owns(spec) or not ctx.current_file:
            return None
        value = spec.value
        root = ctx.project_root
        return first_file(
            [os.path.join(os.path.dirname(ctx.current_file), value), os.path.join(root, value)]
            + under_dirs(root, CONFIG_DIRS, value)
        )


PLUGIN = YamlPlugin()
