from __future__ import annotations

"""
Shell Script Plugin.

Finds scripts that are sourced or executed and configuration files read
by a shell script. References built from variables or command
substitution are skipped since their value is only known at runtime.
"""

import os
import re
from typing import List, Optional

from scanex.core.languages.base import LanguagePlugin, dedupe, first_file, under_dirs
from scanex.domain.discovery_models import ResolutionContext
from scanex.domain.specifier_models import ClassifiedRef, Specifier
from scanex.infra.fs import is_within

KIND_FILE = "file_reference"
KIND_SCRIPT = "script"
KIND_CONFIG = "config"

SCRIPT_DIRS = (
    "bin", "scripts", "tools", "config", "etc", ".env", "deploy", "ci",
    ".github/workflows", ".gitlab-ci", "docker",
)

_SHELLS = r"(?:sh|bash|zsh|fish|ksh|csh)"
_PATTERNS = [
    # source / . of scripts and env files
    re.compile(r"(?:^|\s)(?:source|\.)\s+([^\s#;]+\.(?:sh|bash|zsh|fish|ksh|csh|env|conf|config))", re.MULTILINE),
    # interpreter invocation
    re.compile(r"(?:^|\s)(?:bash|sh|zsh|fish|ksh|csh|\.)\s+([^\s#;]+\." + _SHELLS + r")", re.MULTILINE),
    # direct execution
    re.compile(r"(?:^|\s)(\./[^\s#;]+\." + _SHELLS + r")", re.MULTILINE),
    # sourced rc/config files
    re.compile(r"(?:^|\s)(?:source|\.)\s+([^\s#;]+\.(?:env|conf|config|rc))", re.MULTILINE),
    # files read by common tools
    re.compile(r"(?:cat|grep|awk|sed|head|tail|less|more|vim|nano|emacs)\s+([^\s#;|>]+\.(?:sh|env|conf|config|txt|log|md))", re.MULTILINE),
    # quoted paths
    re.compile(r"""(?:source|\.|bash|sh|zsh|fish|cat|grep)\s+["']([^"'#]+\.(?:sh|bash|zsh|fish|ksh|csh|env|conf|config|txt))["']""", re.MULTILINE),
]

_SYSTEM_PREFIXES = ("/dev/", "/proc/", "/sys/")
_SCRIPT_RE = re.compile(r"\." + _SHELLS + r"$", re.IGNORECASE)
_CONFIG_RE = re.compile(r"\.(?:env|conf|config|rc)$", re.IGNORECASE)


class ShellPlugin(LanguagePlugin):
    name = "shell"
    extensions = (".sh", ".bash", ".zsh", ".fish", ".ksh", ".csh")
    kinds = (KIND_FILE, KIND_SCRIPT, KIND_CONFIG)

    def scan(self, content: str, file: str) -> List[Specifier]:
        if not content.strip():
            return []

        refs: List[Specifier] = []
        for pattern in _PATTERNS:
            for match in pattern.finditer(content):
                value = match.group(1)
                if not value or "$" in value or value.startswith(_SYSTEM_PREFIXES):
                    continue
                refs.append(ClassifiedRef(_classify(value), value))
        return dedupe(refs)

    def resolve(self, spec: Specifier, ctx: ResolutionContext) -> Optional[str]:
        if not self.owns(spec) or not ctx.current_file:
            return None
        value = spec.value
        current_dir = os.path.dirname(ctx.current_file)
        root = ctx.project_root

        if value.startswith(("./", "../")):
            return first_file([os.path.join(current_dir, value)])

        if value.startswith("/"):
            # Absolute paths count only when they point inside the project
            if is_within(value, root):
                return first_file([value])
            return None

        return first_file(
            [os.path.join(current_dir, value), os.path.join(root, value)]
            + under_dirs(root, SCRIPT_DIRS, value)
        )


def _classify(value: str) -> str:
    if _SCRIPT_RE.search(value):
        return KIND_SCRIPT
    if _CONFIG_RE.search(value):
        return KIND_CONFIG
    return KIND_FILE


PLUGIN = ShellPlugin()
