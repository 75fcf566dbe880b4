from __future__ import annotations

"""
Ruby Language Plugin.

Scans Ruby sources with the tree-sitter Ruby grammar for require and
require_relative calls and for referenced constants, which are mapped to
files through Rails autoload conventions (Admin::UserPolicy ->
admin/user_policy.rb under the usual app/ and lib/ directories). Gemfile,
.gemspec and Gemfile.lock are scanned for gem declarations, resolved only
when the gem is vendored inside the project.
"""

import logging
import os
import re
from typing import Dict, FrozenSet, Iterable, List, Optional, Sequence

import tree_sitter_ruby as tsruby
from tree_sitter import Language, Node, Parser

from scanex.core.components.syntax import compile_queries, iter_matches, node_text, parse_source
from scanex.core.languages.base import LanguagePlugin, dedupe, first_file, under_dirs
from scanex.domain.discovery_models import ResolutionContext
from scanex.domain.specifier_models import ClassifiedRef, Specifier, spec_kind

logger = logging.getLogger(__name__)

KIND_REQUIRE = "require"
KIND_REQUIRE_RELATIVE = "require_relative"
KIND_CONSTANT = "constant"
KIND_GEM = "gem"

IGNORED_CONSTANTS: FrozenSet[str] = frozenset({
    "ApplicationController", "ActionController::Base", "ApplicationRecord",
    "ActiveRecord::Base", "ActiveRecord::RecordInvalid", "ActiveStorage::Blob",
    "ActiveSupport::TimeZone", "Pagy::Backend", "Current", "self", "true",
    "false", "nil", "Rails", "ENV",
})

SEARCH_DIRS = (
    "app/models", "app/controllers", "app/helpers", "app/jobs", "app/mailers",
    "app/services", "app/workers", "app/channels", "app/policies",
    "app/controllers/concerns", "app/models/concerns",
    "lib",
    "test", "test/models", "test/controllers", "test/helpers", "test/jobs",
    "test/mailers", "test/services", "test/workers", "test/channels", "test/policies",
)

_GEM_METHODS = {"gem", "add_dependency", "add_runtime_dependency", "add_development_dependency"}
_LOCK_SECTION_END = {"PLATFORMS", "DEPENDENCIES", "BUNDLED WITH", "RUBY VERSION"}
_LOCK_SPEC_RE = re.compile(r"^([A-Za-z0-9_.-]+)\s*\(")

_QUERY_PATTERNS = {
    "call": """
        (call
          method: (identifier) @method
          arguments: (argument_list . (string (string_content) @path)))
    """,
    "constant": "(constant) @const",
    "scoped": "(scope_resolution) @const",
}

# -----------------------------------------------------------------------------
# SHARED RUBY EXTRACTION
# -----------------------------------------------------------------------------

_LANGUAGE = Language(tsruby.language())
_PARSER = Parser(_LANGUAGE)
_QUERIES = compile_queries(_LANGUAGE, _QUERY_PATTERNS)


def extract_ruby_refs(source: str, call_kinds: Dict[str, str], with_constants: bool = True) -> List[Specifier]:
    """
    Collect method-call string arguments and constants from Ruby code.

    Args:
        source: Ruby code.
        call_kinds: Method name to emitted kind (e.g. {"require": "require"}).
        with_constants: Also emit referenced constants.

    Returns:
        List[Specifier]: Classified references, deduplicated, in match order.
    """
    tree = parse_source(_PARSER, source)
    if tree is None:
        return []

    refs: List[Specifier] = []
    call_query = _QUERIES.get("call")
    if call_query is not None:
        for captures in iter_matches(call_query, tree.root_node):
            methods = captures.get("method", [])
            paths = captures.get("path", [])
            if not methods or not paths:
                continue
            kind = call_kinds.get(node_text(methods[0]))
            if kind:
                refs.append(ClassifiedRef(kind, node_text(paths[0])))

    if with_constants:
        for name in ("scoped", "constant"):
            query = _QUERIES.get(name)
            if query is None:
                continue
            for captures in iter_matches(query, tree.root_node):
                for node in captures.get("const", []):
                    if _is_nested_constant(node):
                        continue
                    value = node_text(node).lstrip(":")
                    if value and not _is_ignored_constant(value):
                        refs.append(ClassifiedRef(KIND_CONSTANT, value))

    return dedupe(refs)


def underscore(value: str) -> str:
    """Convert a constant path to its conventional file path (no extension)."""
    s = value.replace("::", "/")
    s = re.sub(r"([A-Z]+)([A-Z][a-z])", r"\1_\2", s)
    s = re.sub(r"([a-z\d])([A-Z])", r"\1_\2", s)
    return s.lower()


def resolve_constant(value: str, project_root: str, search_dirs: Sequence[str] = SEARCH_DIRS) -> Optional[str]:
    """
    Map a constant to a file under the conventional autoload directories.

    A plural constant with no match is retried in singular form
    (Rooms -> room.rb).
    """
    hit = first_file(under_dirs(project_root, search_dirs, underscore(value) + ".rb"))
    if hit or not value.endswith("s"):
        return hit
    return first_file(under_dirs(project_root, search_dirs, underscore(value[:-1]) + ".rb"))


def _is_nested_constant(node: Node) -> bool:
    """True when the constant is part of a larger scope_resolution."""
    parent = node.parent
    return parent is not None and parent.type == "scope_resolution"


def _is_ignored_constant(value: str) -> bool:
    return value in IGNORED_CONSTANTS or value.split("::")[0] in IGNORED_CONSTANTS


def _with_rb(value: str) -> str:
    return value if value.endswith(".rb") else value + ".rb"

# -----------------------------------------------------------------------------
# PLUGIN
# -----------------------------------------------------------------------------

class RubyPlugin(LanguagePlugin):
    name = "ruby"
    extensions = (".rb", "Gemfile", ".gemspec", "Gemfile.lock")
    kinds = (KIND_REQUIRE, KIND_REQUIRE_RELATIVE, KIND_CONSTANT, KIND_GEM)

    def scan(self, content: str, file: str) -> List[Specifier]:
        if not content.strip():
            return []

        base = os.path.basename(file)
        if base == "Gemfile.lock":
            return scan_lockfile(content)
        if base == "Gemfile" or base.endswith(".gemspec"):
            return extract_ruby_refs(content, {m: KIND_GEM for m in _GEM_METHODS}, with_constants=False)

        return extract_ruby_refs(
            content,
            {"require": KIND_REQUIRE, "require_relative": KIND_REQUIRE_RELATIVE},
        )

    def resolve(self, spec: Specifier, ctx: ResolutionContext) -> Optional[str]:
        if not self.owns(spec):
            return None
        kind, value = spec_kind(spec), spec.value
        root = ctx.project_root

        if kind == KIND_REQUIRE_RELATIVE:
            if not ctx.current_file:
                return None
            return first_file([os.path.join(os.path.dirname(ctx.current_file), _with_rb(value))])

        if kind == KIND_REQUIRE:
            return first_file([
                os.path.join(root, "lib", _with_rb(value)),
                os.path.join(root, _with_rb(value)),
            ])

        if kind == KIND_CONSTANT:
            return resolve_constant(value, root)

        if kind == KIND_GEM:
            return first_file(_gem_candidates(root, value))

        return None


def scan_lockfile(content: str) -> List[Specifier]:
    """Extract gem names from the GEM section of a Gemfile.lock."""
    refs: List[Specifier] = []
    in_gems = False
    for line in content.splitlines():
        stripped = line.strip()
        if stripped == "GEM":
            in_gems = True
            continue
        if stripped in _LOCK_SECTION_END:
            in_gems = False
            continue
        if not in_gems or not stripped or stripped.startswith(("remote:", "specs:")):
            continue
        match = _LOCK_SPEC_RE.match(stripped)
        if match:
            refs.append(ClassifiedRef(KIND_GEM, match.group(1)))
    return dedupe(refs)


def _gem_candidates(root: str, gem: str) -> Iterable[str]:
    names = [gem]
    if "-" in gem:
        names.append(gem.replace("-", "_"))
    for name in names:
        yield os.path.join(root, "lib", f"{name}.rb")
        yield os.path.join(root, "lib", name, "init.rb")
        yield os.path.join(root, "lib", name, f"{name}.rb")
        if name == gem:
            yield os.path.join(root, "app", "models", f"{name}.rb")
            yield os.path.join(root, "app", "controllers", f"{name}_controller.rb")
            yield os.path.join(root, "app", "helpers", f"{name}_helper.rb")


PLUGIN = RubyPlugin()
