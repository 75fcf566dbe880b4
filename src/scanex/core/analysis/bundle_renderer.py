from __future__ import annotations

"""
Codebase Bundle Renderer.

Assembles the final document: an optional <directory_tree> block
followed by a <codebase> block holding every file as a fenced section
labelled with its language.
"""

import logging
import os
from typing import Dict, List, Optional

from scanex.domain.constants import BINARY_PLACEHOLDER
from scanex.infra.fs import read_text, to_posix_rel

logger = logging.getLogger(__name__)

# Fence labels, longest suffix first so composite extensions win
LANGUAGE_BY_SUFFIX: Dict[str, str] = {
    ".html.erb": "erb",
    ".yaml": "yaml",
    ".html": "html",
    ".scss": "scss",
    ".json": "json",
    ".tsx": "tsx",
    ".jsx": "jsx",
    ".mjs": "javascript",
    ".cjs": "javascript",
    ".css": "css",
    ".sql": "sql",
    ".yml": "yaml",
    ".rb": "ruby",
    ".ts": "typescript",
    ".js": "javascript",
    ".py": "python",
    ".sh": "bash",
    ".md": "markdown",
}

DOCKERFILE_LANGUAGE = "dockerfile"


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def bundle(files: List[str], root: str, tree_str: str, include_tree: bool = True) -> str:
    """
    Render the codebase document.

    Args:
        files: Absolute file paths, already in output order.
        root: Project root used for the '// path' headers.
        tree_str: Pre-rendered directory tree.
        include_tree: Emit the <directory_tree> block.

    Returns:
        str: Complete document ending with a newline.
    """
    parts: List[str] = []
    if include_tree:
        parts.append(f"<directory_tree>\n{tree_str}\n</directory_tree>\n\n")

    parts.append("<codebase>\n")
    for path in files:
        content = _file_content(path)
        if content is None:
            continue
        rel = to_posix_rel(path, root)
        parts.append(f"// {rel}\n```{fence_language(path)}\n{content.rstrip()}\n```\n\n")
    parts.append("</codebase>\n")
    return "".join(parts)


def fence_language(path: str) -> str:
    """
    Map a file name to its code fence label.

    Args:
        path: File path.

    Returns:
        str: Known language name, else the bare extension (may be empty).
    """
    base = os.path.basename(path)
    if base == "Dockerfile" or base.startswith("Dockerfile."):
        return DOCKERFILE_LANGUAGE

    lower = base.lower()
    for suffix, language in LANGUAGE_BY_SUFFIX.items():
        if lower.endswith(suffix):
            return language
    return os.path.splitext(base)[1].lstrip(".")


def _file_content(path: str) -> Optional[str]:
    try:
        content = read_text(path)
    except OSError as e:
        logger.warning(f"Skipping unreadable file {path}: {e}")
        return None
    if "\x00" in content:
        logger.debug(f"Binary content in {path}")
        return BINARY_PLACEHOLDER
    return content
