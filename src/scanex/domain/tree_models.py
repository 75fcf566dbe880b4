from __future__ import annotations

"""
Directory Tree Structure Data Models.

Provides the recursive node used while folding relative paths into a
hierarchy before ASCII rendering.
"""

from dataclasses import dataclass, field
from typing import Dict

# -----------------------------------------------------------------------------
# STRUCTURAL COMPONENTS
# -----------------------------------------------------------------------------

@dataclass
class TreeNode:
    """
    Directory or file entry of the rendered tree.

    Children keep insertion order so the rendered tree mirrors the order of
    the input paths.

    Attributes:
        name: Path segment of this entry.
        children: Nested entries keyed by segment name.
    """
    name: str
    children: Dict[str, "TreeNode"] = field(default_factory=dict)

    def child(self, name: str) -> TreeNode:
        """Return the named child, creating it on first access."""
        node = self.children.get(name)
        if node is None:
            node = TreeNode(name)
            self.children[name] = node
        return node
