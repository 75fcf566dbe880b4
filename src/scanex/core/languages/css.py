from __future__ import annotations

"""
Stylesheet Plugin (CSS, SCSS, Sass, Less, Stylus).

Pattern-based extraction of @import, @use, @forward and url() references.
"""

import os
import re
from typing import List, Optional

from scanex.core.languages.base import LanguagePlugin, dedupe, first_file, is_external, under_dirs
from scanex.domain.discovery_models import ResolutionContext
from scanex.domain.specifier_models import ClassifiedRef, Specifier, spec_kind

KIND_STYLESHEET = "stylesheet_import"
KIND_FONT = "font"
KIND_IMAGE = "image"
KIND_ASSET = "asset_reference"

STYLE_EXTENSIONS = (".css", ".scss", ".sass", ".less", ".styl")

WEB_ROOTS = ("public", "static", "assets", "www", "dist", "build", "src")

ASSET_DIRS = (
    "assets", "styles", "css", "scss", "sass", "stylesheets",
    "src/assets", "src/styles", "app/assets/stylesheets",
    "public/css", "static/css", "dist/css", "build/css",
)

# Directives whose target is always another stylesheet
_IMPORT_PATTERNS = [
    re.compile(r"""@import\s+['"]([^'"]+)['"]""", re.IGNORECASE),
    re.compile(r"""@import\s+url\s*\(\s*['"]?([^)'"]+)['"]?\s*\)""", re.IGNORECASE),
    re.compile(r"""@use\s+['"]([^'"]+)['"]""", re.IGNORECASE),
    re.compile(r"""@forward\s+['"]([^'"]+)['"]""", re.IGNORECASE),
]

_URL_PATTERN = re.compile(r"""(?<!@import\s)url\s*\(\s*['"]?([^)'"]+)['"]?\s*\)""", re.IGNORECASE)

_FONT_RE = re.compile(r"\.(?:woff2?|ttf|otf|eot)$", re.IGNORECASE)
_IMAGE_RE = re.compile(r"\.(?:png|jpe?g|gif|svg|webp|ico)$", re.IGNORECASE)


class CssPlugin(LanguagePlugin):
    name = "css"
    extensions = STYLE_EXTENSIONS
    kinds = (KIND_STYLESHEET, KIND_FONT, KIND_IMAGE, KIND_ASSET)

    def scan(self, content: str, file: str) -> List[Specifier]:
        if not content.strip():
            return []

        refs: List[Specifier] = []
        for pattern in _IMPORT_PATTERNS:
            for match in pattern.finditer(content):
                value = match.group(1).strip()
                if value and not is_external(value):
                    refs.append(ClassifiedRef(_classify(value, directive=True), value))

        for match in _URL_PATTERN.finditer(content):
            value = match.group(1).strip()
            if value and not is_external(value):
                refs.append(ClassifiedRef(_classify(value, directive=False), value))

        return dedupe(refs)

    def resolve(self, spec: Specifier, ctx: ResolutionContext) -> Optional[str]:
        if not self.owns(spec) or not ctx.current_file:
            return None
        value = spec.value.split("?", 1)[0].split("#", 1)[0]
        if not value:
            return None

        names = _candidate_names(value, spec_kind(spec))
        root = ctx.project_root

        if value.startswith("/"):
            candidates = []
            for name in names:
                rel = name.lstrip("/")
                candidates.append(os.path.join(root, rel))
                candidates.extend(under_dirs(root, WEB_ROOTS, rel))
            return first_file(candidates)

        current_dir = os.path.dirname(ctx.current_file)
        candidates = []
        for name in names:
            candidates.append(os.path.join(current_dir, name))
            candidates.append(os.path.join(root, name))
            candidates.extend(under_dirs(root, ASSET_DIRS, name))
        return first_file(candidates)


def _classify(value: str, directive: bool) -> str:
    lower = value.lower()
    if lower.endswith(STYLE_EXTENSIONS):
        return KIND_STYLESHEET
    if _FONT_RE.search(lower):
        return KIND_FONT
    if _IMAGE_RE.search(lower):
        return KIND_IMAGE
    # Extensionless @import/@use targets are stylesheet modules
    if directive and not os.path.splitext(lower)[1]:
        return KIND_STYLESHEET
    return KIND_ASSET


def _candidate_names(value: str, kind: str) -> List[str]:
    """File names to probe, adding stylesheet extensions and Sass partials."""
    if kind != KIND_STYLESHEET or os.path.splitext(value)[1]:
        return [value]

    directory, _, base = value.rpartition("/")
    prefix = f"{directory}/" if directory else ""
    names = [value + ext for ext in STYLE_EXTENSIONS]
    names.extend(f"{prefix}_{base}{ext}" for ext in STYLE_EXTENSIONS)
    return names


PLUGIN = CssPlugin()
