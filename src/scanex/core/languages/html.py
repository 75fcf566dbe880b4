from __future__ import annotations

"""
HTML Plugin.

Pattern-based extraction of the local files an HTML page loads or links
to: scripts, stylesheets, media, frames, embedded objects, form targets
and anchors to other local pages.
"""

import os
import re
from typing import List, Optional

from scanex.core.languages.base import LanguagePlugin, dedupe, first_file, is_external, under_dirs
from scanex.domain.discovery_models import ResolutionContext
from scanex.domain.specifier_models import ClassifiedRef, Specifier

KIND_FILE = "file_reference"
KIND_SCRIPT = "script"
KIND_STYLESHEET = "stylesheet"
KIND_IMAGE = "image"
KIND_PAGE = "html_page"

WEB_ROOTS = ("public", "static", "assets", "www", "dist", "build")

ASSET_DIRS = (
    "public", "static", "assets", "src",
    "app/assets", "app/assets/javascripts", "app/assets/stylesheets", "app/assets/images",
    "dist", "build",
)

_ATTR = r"""=["']([^"']+)["']"""
_PATTERNS = [
    re.compile(r"<script[^>]+src" + _ATTR, re.IGNORECASE),
    re.compile(r"<link[^>]+href" + _ATTR, re.IGNORECASE),
    re.compile(r"<img[^>]+src" + _ATTR, re.IGNORECASE),
    re.compile(r"<(?:audio|video)[^>]+src" + _ATTR, re.IGNORECASE),
    re.compile(r"<source[^>]+src" + _ATTR, re.IGNORECASE),
    re.compile(r"<iframe[^>]+src" + _ATTR, re.IGNORECASE),
    re.compile(r"<object[^>]+data" + _ATTR, re.IGNORECASE),
    re.compile(r"<embed[^>]+src" + _ATTR, re.IGNORECASE),
    re.compile(r"<form[^>]+action" + _ATTR, re.IGNORECASE),
    re.compile(r"""<a[^>]+href=["']([^"'#][^"']*\.(?:html|htm|php|jsp|asp))["']""", re.IGNORECASE),
]

_SCRIPT_RE = re.compile(r"\.(?:js|mjs|ts)$", re.IGNORECASE)
_STYLE_RE = re.compile(r"\.css$", re.IGNORECASE)
_IMAGE_RE = re.compile(r"\.(?:png|jpe?g|gif|svg|webp|ico)$", re.IGNORECASE)
_PAGE_RE = re.compile(r"\.html?$", re.IGNORECASE)


class HtmlPlugin(LanguagePlugin):
    name = "html"
    extensions = (".html", ".htm")
    kinds = (KIND_FILE, KIND_SCRIPT, KIND_STYLESHEET, KIND_IMAGE, KIND_PAGE)

    def scan(self, content: str, file: str) -> List[Specifier]:
        if not content.strip():
            return []

        refs: List[Specifier] = []
        for pattern in _PATTERNS:
            for match in pattern.finditer(content):
                value = match.group(1)
                if value and not is_external(value):
                    refs.append(ClassifiedRef(_classify(value), value))
        return dedupe(refs)

    def resolve(self, spec: Specifier, ctx: ResolutionContext) -> Optional[str]:
        if not self.owns(spec) or not ctx.current_file:
            return None
        value = spec.value.split("?", 1)[0]
        if not value:
            return None
        root = ctx.project_root

        if value.startswith("/"):
            rel = value.lstrip("/")
            return first_file([os.path.join(root, rel)] + under_dirs(root, WEB_ROOTS, rel))

        return first_file(
            [os.path.join(os.path.dirname(ctx.current_file), value), os.path.join(root, value)]
            + under_dirs(root, ASSET_DIRS, value)
        )


def _classify(value: str) -> str:
    if _SCRIPT_RE.search(value):
        return KIND_SCRIPT
    if _STYLE_RE.search(value):
        return KIND_STYLESHEET
    if _IMAGE_RE.search(value):
        return KIND_IMAGE
    if _PAGE_RE.search(value):
        return KIND_PAGE
    return KIND_FILE


PLUGIN = HtmlPlugin()
