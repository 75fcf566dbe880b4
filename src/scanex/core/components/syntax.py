from __future__ import annotations

"""
Tree-sitter Query Helpers.

Thin layer over the tree-sitter bindings shared by the grammar-backed
language plugins: compiling query patterns one by one (a pattern the
installed grammar does not support is dropped, not fatal), parsing text
and iterating captures.
"""

import logging
from typing import Dict, Iterator, List, Optional

from tree_sitter import Language, Node, Parser, Query, QueryCursor, Tree

logger = logging.getLogger(__name__)


def compile_queries(language: Language, patterns: Dict[str, str]) -> Dict[str, Query]:
    """
    Compile named query patterns against a grammar.

    Args:
        language: Loaded tree-sitter language.
        patterns: Query name to S-expression source.

    Returns:
        Dict[str, Query]: Successfully compiled queries.
    """
    compiled: Dict[str, Query] = {}
    for name, source in patterns.items():
        try:
            compiled[name] = Query(language, source)
        except Exception as e:
            logger.warning(f"Query '{name}' not supported by the installed grammar: {e}")
    return compiled


def parse_source(parser: Parser, content: str) -> Optional[Tree]:
    """Parse text, returning None when the parser rejects it."""
    try:
        return parser.parse(content.encode("utf-8"))
    except (ValueError, TypeError) as e:
        logger.debug(f"Parser rejected input: {e}")
        return None


def iter_matches(query: Query, node: Node) -> Iterator[Dict[str, List[Node]]]:
    """Yield the capture dictionaries of every match of query under node."""
    for _, captures in QueryCursor(query).matches(node):
        yield captures


def node_text(node: Node) -> str:
    """Decoded source text of a node."""
    raw = node.text or b""
    return raw.decode("utf-8", errors="replace")


def strip_quotes(text: str) -> str:
    """Remove surrounding string delimiters from a literal."""
    return text.strip("'\"`")
