from __future__ import annotations

"""
Python Language Plugin.

Uses the standard library AST to collect absolute and relative imports.
Module paths are resolved to 'module.py' or 'module/__init__.py' next to
the importing file, at the project root, or under a 'src' directory.
"""

import ast
import logging
import os
from typing import List, Optional

from scanex.core.languages.base import LanguagePlugin, dedupe, first_file
from scanex.domain.discovery_models import ResolutionContext
from scanex.domain.specifier_models import ClassifiedRef, Specifier, spec_kind

logger = logging.getLogger(__name__)

KIND_MODULE = "module"
KIND_RELATIVE = "relative_module"

# Extra search roots, relative to the project root, for absolute imports
SOURCE_ROOTS = ("", "src")


class PythonPlugin(LanguagePlugin):
    name = "python"
    extensions = (".py",)
    kinds = (KIND_MODULE, KIND_RELATIVE)

    def scan(self, content: str, file: str) -> List[Specifier]:
        if not content.strip():
            return []
        try:
            tree = ast.parse(content, filename=file)
        except (SyntaxError, ValueError) as e:
            logger.debug(f"Cannot parse {os.path.basename(file)}: {e}")
            return []

        imports = [n for n in ast.walk(tree) if isinstance(n, (ast.Import, ast.ImportFrom))]
        imports.sort(key=lambda n: (n.lineno, n.col_offset))

        refs: List[Specifier] = []
        for node in imports:
            if isinstance(node, ast.Import):
                for alias in node.names:
                    refs.append(ClassifiedRef(KIND_MODULE, alias.name))

            elif isinstance(node, ast.ImportFrom):
                refs.extend(_from_import_refs(node))

        return dedupe(refs)

    def resolve(self, spec: Specifier, ctx: ResolutionContext) -> Optional[str]:
        if not self.owns(spec) or not ctx.current_file:
            return None

        if spec_kind(spec) == KIND_RELATIVE:
            return _resolve_relative(spec.value, ctx.current_file)

        rel = spec.value.replace(".", os.sep)
        roots = [os.path.dirname(ctx.current_file)]
        roots.extend(os.path.join(ctx.project_root, r) for r in SOURCE_ROOTS)
        for root in roots:
            hit = _module_file(os.path.join(root, rel))
            if hit:
                return hit
        return None


def _from_import_refs(node: ast.ImportFrom) -> List[Specifier]:
    """References introduced by one 'from ... import ...' statement."""
    level = node.level or 0
    module = node.module or ""
    kind = KIND_RELATIVE if level else KIND_MODULE
    prefix = "." * level + module

    refs: List[Specifier] = []
    if module or level:
        refs.append(ClassifiedRef(kind, prefix))

    # Imported names may themselves be submodules
    for alias in node.names:
        if alias.name == "*":
            continue
        joiner = "." if module else ""
        refs.append(ClassifiedRef(kind, f"{prefix}{joiner}{alias.name}"))
    return refs


def _resolve_relative(value: str, current_file: str) -> Optional[str]:
    level = len(value) - len(value.lstrip("."))
    base_dir = os.path.dirname(current_file)
    for _ in range(level - 1):
        base_dir = os.path.dirname(base_dir)

    remainder = value[level:]
    if not remainder:
        return first_file([os.path.join(base_dir, "__init__.py")])
    return _module_file(os.path.join(base_dir, remainder.replace(".", os.sep)))


def _module_file(base: str) -> Optional[str]:
    return first_file([base + ".py", os.path.join(base, "__init__.py")])


PLUGIN = PythonPlugin()
