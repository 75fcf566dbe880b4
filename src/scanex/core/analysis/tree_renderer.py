from __future__ import annotations

"""
Tree Renderer.

Folds project-relative paths into a TreeNode hierarchy and renders it as
an ASCII tree. Entries appear in the order their first path was given;
callers sort beforehand when a stable listing is wanted.
"""

from typing import Iterable, List

from scanex.domain.constants import TREE_ROOT_LABEL
from scanex.domain.tree_models import TreeNode

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def make_tree(rel_paths: Iterable[str]) -> str:
    """
    Render '/'-separated relative paths as a directory tree.

    Args:
        rel_paths: Paths relative to the project root.

    Returns:
        str: '.' on the first line followed by one line per entry.
    """
    root = build_tree(rel_paths)
    lines: List[str] = [TREE_ROOT_LABEL]
    render_tree_structure(root, lines)
    return "\n".join(lines)


def build_tree(rel_paths: Iterable[str]) -> TreeNode:
    """Fold paths into a trie of path segments."""
    root = TreeNode(TREE_ROOT_LABEL)
    for rel in rel_paths:
        node = root
        for segment in rel.split("/"):
            if segment:
                node = node.child(segment)
    return root


def render_tree_structure(node: TreeNode, lines: List[str], prefix: str = "") -> None:
    """
    Recursively append the children of node to lines.

    Args:
        node: Node whose children are rendered.
        lines: Accumulator list for output strings.
        prefix: Indentation prefix for the current recursion level.
    """
    entries = list(node.children.values())
    total = len(entries)

    for i, entry in enumerate(entries):
        is_last = (i == total - 1)
        connector = "└── " if is_last else "├── "
        lines.append(f"{prefix}{connector}{entry.name}")
        if entry.children:
            render_tree_structure(entry, lines, prefix + ("    " if is_last else "│   "))
