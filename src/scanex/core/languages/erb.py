from __future__ import annotations

"""
ERB Template Plugin.

Runs the Ruby extraction over the code embedded in <% %> tags of
.html.erb views, and resolves render calls to templates and partials
under app/views.
"""

import logging
import os
import re
from typing import List, Optional

from scanex.core.languages.base import LanguagePlugin, dedupe, first_file
from scanex.core.languages.ruby import KIND_REQUIRE, KIND_REQUIRE_RELATIVE, extract_ruby_refs
from scanex.domain.discovery_models import ResolutionContext
from scanex.domain.specifier_models import Specifier

logger = logging.getLogger(__name__)

KIND_RENDER = "render"

TEMPLATE_SUFFIX = ".html.erb"

# <%# comments %> are skipped by requiring the tag not to start with '#'
_ERB_TAG_RE = re.compile(r"<%[-=]?(?!#)\s*(.*?)\s*-?%>", re.DOTALL)

_CALL_KINDS = {
    "require": KIND_REQUIRE,
    "require_relative": KIND_REQUIRE_RELATIVE,
    "render": KIND_RENDER,
}


class ErbPlugin(LanguagePlugin):
    name = "erb"
    extensions = (TEMPLATE_SUFFIX,)
    kinds = (KIND_RENDER,)

    def scan(self, content: str, file: str) -> List[Specifier]:
        if not content.strip():
            return []

        refs: List[Specifier] = []
        for match in _ERB_TAG_RE.finditer(content):
            code = match.group(1).strip()
            if code:
                # Blocks are often fragments ("if x", "end"); the grammar tolerates them
                refs.extend(extract_ruby_refs(code, _CALL_KINDS))
        return dedupe(refs)

    def resolve(self, spec: Specifier, ctx: ResolutionContext) -> Optional[str]:
        if not self.owns(spec) or not ctx.current_file:
            return None
        return resolve_render(spec.value, ctx.project_root, ctx.current_file)


def resolve_render(render_path: str, project_root: str, current_file: str) -> Optional[str]:
    """
    Locate the template rendered by 'render "<path>"'.

    Paths containing '/' are looked up under app/views; bare names are
    looked up next to the current template, then in the view directory
    the current template belongs to. Each location is tried as a full
    template and as a partial ('_name').
    """
    views_dir = os.path.join(project_root, "app", "views")

    if "/" in render_path:
        directory, _, name = render_path.rpartition("/")
        return first_file([
            os.path.join(views_dir, render_path + TEMPLATE_SUFFIX),
            os.path.join(views_dir, directory, f"_{name}{TEMPLATE_SUFFIX}"),
        ])

    current_dir = os.path.dirname(current_file)
    candidates = [
        os.path.join(current_dir, render_path + TEMPLATE_SUFFIX),
        os.path.join(current_dir, f"_{render_path}{TEMPLATE_SUFFIX}"),
    ]

    rel_dir = os.path.relpath(current_dir, views_dir)
    if rel_dir != "." and not rel_dir.startswith(".."):
        candidates.append(os.path.join(views_dir, rel_dir, render_path + TEMPLATE_SUFFIX))
        candidates.append(os.path.join(views_dir, rel_dir, f"_{render_path}{TEMPLATE_SUFFIX}"))

    return first_file(candidates)


PLUGIN = ErbPlugin()
