from __future__ import annotations

"""
JavaScript / TypeScript Language Plugin.

Extracts module sources from import and export-from statements, dynamic
import() calls and CommonJS require() calls using the tree-sitter
JavaScript and TypeScript grammars. Resolves bare specifiers through the
compilerOptions.paths aliases and baseUrl of tsconfig/jsconfig, and
directory imports through their index file.
"""

import logging
import os
from typing import Any, Dict, List, Optional

import tree_sitter_javascript as tsjavascript
import tree_sitter_typescript as tstypescript
from tree_sitter import Language, Parser

from scanex.core.components.syntax import (
    compile_queries,
    iter_matches,
    node_text,
    parse_source,
    strip_quotes,
)
from scanex.core.languages.base import LanguagePlugin, first_file
from scanex.domain.discovery_models import ResolutionContext
from scanex.domain.specifier_models import PlainRef, Specifier

logger = logging.getLogger(__name__)

EXTENSIONS = (".js", ".jsx", ".mjs", ".cjs", ".ts", ".tsx")

_QUERY_PATTERNS: Dict[str, str] = {
    "import": "(import_statement source: (string) @dep)",
    "export": "(export_statement source: (string) @dep)",
    "require": """
        (call_expression
          function: (identifier) @fn
          arguments: (arguments . (string) @dep))
    """,
    "dynamic_import": """
        (call_expression
          function: (import)
          arguments: (arguments . (string) @dep))
    """,
}

_CALL_FUNCTIONS = {"require"}


class _Dialect:
    """Parser and compiled queries for one grammar."""

    def __init__(self, language: Language) -> None:
        self.parser = Parser(language)
        self.queries = compile_queries(language, _QUERY_PATTERNS)


class JavaScriptPlugin(LanguagePlugin):
    name = "javascript"
    extensions = EXTENSIONS

    def __init__(self) -> None:
        self._js = _Dialect(Language(tsjavascript.language()))
        self._ts = _Dialect(Language(tstypescript.language_typescript()))
        self._tsx = _Dialect(Language(tstypescript.language_tsx()))

    # -------------------------------------------------------------------------
    # SCAN
    # -------------------------------------------------------------------------

    def scan(self, content: str, file: str) -> List[Specifier]:
        if not content.strip():
            return []

        dialect = self._dialect_for(file)
        tree = parse_source(dialect.parser, content)
        if tree is None:
            logger.warning(f"Skipping {os.path.basename(file)}: parsing failed")
            return []

        found: List[str] = []
        for name, query in dialect.queries.items():
            for captures in iter_matches(query, tree.root_node):
                if name == "require":
                    fn_nodes = captures.get("fn", [])
                    if not fn_nodes or node_text(fn_nodes[0]) not in _CALL_FUNCTIONS:
                        continue
                for dep in captures.get("dep", []):
                    value = strip_quotes(node_text(dep))
                    if value and value not in found:
                        found.append(value)

        if found:
            logger.debug(f"Found {len(found)} import(s) in {os.path.basename(file)}")
        return [PlainRef(v) for v in found]

    def _dialect_for(self, file: str) -> _Dialect:
        if file.endswith(".tsx"):
            return self._tsx
        if file.endswith(".ts"):
            return self._ts
        return self._js

    # -------------------------------------------------------------------------
    # RESOLVE
    # -------------------------------------------------------------------------

    def resolve(self, spec: Specifier, ctx: ResolutionContext) -> Optional[str]:
        if not isinstance(spec, PlainRef) or not spec.value:
            return None
        value = spec.value

        # Directory imports the suffix probe cannot reach
        if value.startswith("."):
            base = os.path.normpath(os.path.join(os.path.dirname(ctx.current_file), value))
            return self._probe(base)

        options = _compiler_options(ctx.alias_config)
        if not options:
            return None

        base_url = options.get("baseUrl") or "."
        anchor = os.path.join(ctx.alias_base, base_url)

        paths = options.get("paths") or {}
        if isinstance(paths, dict):
            for alias, targets in paths.items():
                remainder = _match_alias(alias, value)
                if remainder is None or not isinstance(targets, list):
                    continue
                for target in targets:
                    if not isinstance(target, str):
                        continue
                    mapped = target.replace("*", remainder, 1) if "*" in target else target
                    hit = self._probe(os.path.normpath(os.path.join(anchor, mapped)))
                    if hit:
                        return hit

        if "baseUrl" in options:
            return self._probe(os.path.normpath(os.path.join(anchor, value)))
        return None

    def _probe(self, base: str) -> Optional[str]:
        """Try base as a file, with each extension, then as a directory index."""
        candidates = []
        if base.endswith(EXTENSIONS):
            candidates.append(base)
        candidates.extend(base + ext for ext in EXTENSIONS)
        candidates.extend(os.path.join(base, "index" + ext) for ext in EXTENSIONS)
        return first_file(candidates)


def _compiler_options(alias_config: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    if not alias_config:
        return {}
    options = alias_config.get("compilerOptions")
    return options if isinstance(options, dict) else {}


def _match_alias(alias: str, value: str) -> Optional[str]:
    """
    Match a specifier against a paths key.

    Returns:
        Optional[str]: Text captured by the wildcard ("" for exact keys),
        or None when the key does not apply.
    """
    if "*" not in alias:
        return "" if value == alias else None
    prefix, _, suffix = alias.partition("*")
    if value.startswith(prefix) and value.endswith(suffix) and len(value) >= len(prefix) + len(suffix):
        return value[len(prefix):len(value) - len(suffix)]
    return None


PLUGIN = JavaScriptPlugin()
