from __future__ import annotations

"""
Path Ignore Matching Component.

Combines the user supplied exclusion regex with directory-scoped
.gitignore rules. Ignore-file lines are translated into anchored Python
regexes relative to the project root so a rule declared in a nested
directory only ever applies to that subtree.
"""

import logging
import os
import re
from dataclasses import dataclass
from typing import Iterable, List, Optional, Pattern

from scanex.domain.constants import IGNORE_FILE_NAME
from scanex.infra.fs import to_posix_rel

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# RULE MODEL
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class IgnoreRule:
    """
    Compiled ignore-file line.

    Attributes:
        source: Original line text.
        regex: Compiled matcher over root-relative POSIX paths.
        base_dir: Root-relative directory of the declaring ignore file ("" for the root).
        rooted: Pattern anchored to base_dir only (leading '/').
        dir_only: Pattern applies to directories only (trailing '/').
        negated: Line started with '!' (recognized, never applied).
    """
    source: str
    regex: Optional[Pattern[str]]
    base_dir: str
    rooted: bool = False
    dir_only: bool = False
    negated: bool = False

    def matches(self, rel_path: str) -> bool:
        if self.negated or self.regex is None:
            return False
        return self.regex.search(rel_path) is not None

# -----------------------------------------------------------------------------
# RULE COMPILATION
# -----------------------------------------------------------------------------

def compile_ignore_line(line: str, rel_dir: str = "") -> Optional[IgnoreRule]:
    """
    Translate one ignore-file line into an IgnoreRule.

    Blank lines and comments yield None. Negation lines are returned as
    inert rules so callers can still count and report them.

    Args:
        line: Raw line from the ignore file.
        rel_dir: Root-relative POSIX directory of the ignore file.

    Returns:
        Optional[IgnoreRule]: Compiled rule, or None for non-rule lines.
    """
    text = line.strip()
    if not text or text.startswith("#"):
        return None

    rel_dir = rel_dir.strip("/")
    if rel_dir == ".":
        rel_dir = ""

    if text.startswith("!"):
        return IgnoreRule(source=text, regex=None, base_dir=rel_dir, negated=True)

    pattern = text
    dir_only = pattern.endswith("/")
    pattern = pattern.rstrip("/")
    rooted = pattern.startswith("/")
    pattern = pattern.lstrip("/")
    if not pattern:
        return None

    body = _glob_to_regex(pattern)
    prefix = re.escape(rel_dir + "/") if rel_dir else ""

    if rooted:
        head = f"^{prefix}({body})"
    else:
        head = f"^{prefix}(?:.*/)?({body})"

    # Directories are matched with a trailing '/', files without
    tail = "/.*$" if dir_only else "(?:/.*)?$"

    try:
        regex = re.compile(head + tail)
    except re.error as e:
        logger.debug(f"Skipping uncompilable ignore rule '{text}': {e}")
        return None

    return IgnoreRule(
        source=text,
        regex=regex,
        base_dir=rel_dir,
        rooted=rooted,
        dir_only=dir_only,
    )


def load_rules(directory: str, project_root: str) -> List[IgnoreRule]:
    """
    Parse the ignore file of a directory into rules scoped to that directory.

    Args:
        directory: Absolute directory that may contain an ignore file.
        project_root: Root the rule anchors are expressed against.

    Returns:
        List[IgnoreRule]: Active and negated rules; empty if absent or unreadable.
    """
    ignore_path = os.path.join(directory, IGNORE_FILE_NAME)
    if not os.path.isfile(ignore_path):
        return []

    rel_dir = to_posix_rel(directory, project_root)
    rules: List[IgnoreRule] = []
    try:
        with open(ignore_path, "r", encoding="utf-8", errors="replace") as f:
            for line in f:
                rule = compile_ignore_line(line, rel_dir)
                if rule:
                    rules.append(rule)
    except OSError as e:
        logger.warning(f"Cannot read {ignore_path}: {e}")
        return []

    negated = sum(1 for r in rules if r.negated)
    if negated:
        logger.debug(f"{negated} negation rule(s) in {ignore_path} are not applied")
    logger.debug(f"Loaded {len(rules) - negated} ignore rule(s) from {ignore_path}")
    return rules

# -----------------------------------------------------------------------------
# MATCHER
# -----------------------------------------------------------------------------

class IgnoreMatcher:
    """
    Predicate deciding whether a path is left out of discovery.

    The global exclude pattern is searched case-insensitively in the
    root-relative path; ignore-file rules are case-sensitive.
    """

    def __init__(self, exclude_pattern: Optional[str], project_root: str) -> None:
        """
        Args:
            exclude_pattern: User regex; empty or None disables global exclusion.
            project_root: Absolute directory relative paths are computed from.

        Raises:
            ValueError: If the exclude pattern is not a valid regex.
        """
        self.project_root = project_root
        self.exclude_pattern = exclude_pattern or ""
        try:
            self._exclude = re.compile(self.exclude_pattern, re.IGNORECASE) if self.exclude_pattern else None
        except re.error as e:
            raise ValueError(f"Invalid exclude pattern '{exclude_pattern}': {e}") from e

    def relative(self, path: str, is_dir: bool = False) -> str:
        """Root-relative POSIX form, with a trailing '/' for directories."""
        rel = to_posix_rel(path, self.project_root) if os.path.isabs(path) else path.replace(os.sep, "/")
        if is_dir and not rel.endswith("/"):
            rel += "/"
        return rel

    def is_excluded(self, path: str, is_dir: bool = False) -> bool:
        """Apply only the global exclude pattern."""
        if self._exclude is None:
            return False
        return self._exclude.search(self.relative(path, is_dir=is_dir)) is not None

    def matches(self, path: str, rules: Iterable[IgnoreRule] = (), is_dir: bool = False) -> bool:
        """
        Decide whether a path is ignored.

        Args:
            path: Absolute or root-relative path.
            rules: Inherited plus local ignore-file rules.
            is_dir: Whether the path names a directory.

        Returns:
            bool: True if the global pattern or any rule matches.
        """
        if self.is_excluded(path, is_dir=is_dir):
            return True
        rel = self.relative(path, is_dir=is_dir)
        return any(rule.matches(rel) for rule in rules)

# -----------------------------------------------------------------------------
# HELPERS
# -----------------------------------------------------------------------------

def _glob_to_regex(pattern: str) -> str:
    """Translate gitignore glob syntax into a regex body."""
    escaped = re.escape(pattern)
    # re.escape leaves '/' untouched and escapes '*' and '?'
    escaped = escaped.replace(r"\*\*/", "(?:.*/)?")
    escaped = escaped.replace(r"/\*\*", "(?:/.*)?")
    escaped = escaped.replace(r"\*\*", ".*")
    escaped = escaped.replace(r"\*", "[^/]*")
    escaped = escaped.replace(r"\?", "[^/]")
    return escaped
