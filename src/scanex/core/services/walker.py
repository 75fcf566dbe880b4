from __future__ import annotations

"""
Filesystem Walker Service.

Enumerates the files under an input path. Directories are walked top-down
so that ignored subtrees are pruned before they are ever listed, and each
directory inherits the ignore rules of its ancestors up to the project
root.
"""

import logging
import os
from typing import Dict, List, Optional

from scanex.core.components.ignore import IgnoreMatcher, IgnoreRule, load_rules
from scanex.domain.constants import VCS_DIRECTORIES
from scanex.domain.discovery_models import (
    EVENT_MISSING_INPUT,
    EVENT_UNREADABLE_DIRECTORY,
    DiscoveryEvent,
    EventCallback,
)
from scanex.infra.fs import canonical_path, is_within

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def walk(
        root_path: str,
        matcher: IgnoreMatcher,
        on_event: Optional[EventCallback] = None,
) -> List[str]:
    """
    Collect the files under root_path that survive the ignore rules.

    A file input is returned as-is without consulting any rule. A missing
    input or an unreadable directory is reported and skipped; the walk
    itself never raises.

    Args:
        root_path: File or directory to enumerate.
        matcher: Ignore predicate bound to the project root.
        on_event: Optional observer receiving diagnostics.

    Returns:
        List[str]: Canonical absolute file paths in per-directory sorted order.
    """
    if not os.path.exists(root_path):
        logger.error(f"Input path does not exist: {root_path}")
        _emit(on_event, DiscoveryEvent(EVENT_MISSING_INPUT, root_path, "path does not exist"))
        return []

    if os.path.isfile(root_path):
        return [canonical_path(root_path)]

    root_dir = canonical_path(root_path)
    files: List[str] = []
    rules_by_dir: Dict[str, List[IgnoreRule]] = {
        root_dir: _inherited_rules(root_dir, matcher.project_root),
    }

    def _on_error(err: OSError) -> None:
        path = err.filename or root_dir
        logger.warning(f"Cannot read directory {path}: {err.strerror or err}")
        _emit(on_event, DiscoveryEvent(EVENT_UNREADABLE_DIRECTORY, path, str(err)))

    for dirpath, dirnames, filenames in os.walk(root_dir, topdown=True, onerror=_on_error):
        inherited = rules_by_dir.pop(dirpath, [])
        rules = inherited + load_rules(dirpath, matcher.project_root)

        kept_dirs: List[str] = []
        for name in sorted(dirnames):
            if name in VCS_DIRECTORIES:
                continue
            child = os.path.join(dirpath, name)
            if os.path.islink(child):
                continue
            if matcher.matches(child, rules, is_dir=True):
                logger.debug(f"Pruned directory: {matcher.relative(child)}")
                continue
            kept_dirs.append(name)
            rules_by_dir[child] = rules
        # In-place assignment drives os.walk pruning
        dirnames[:] = kept_dirs

        for name in sorted(filenames):
            child = os.path.join(dirpath, name)
            if matcher.matches(child, rules):
                continue
            if not os.path.isfile(child):
                continue
            files.append(canonical_path(child))

    logger.debug(f"Walked {root_dir}: {len(files)} file(s)")
    return files

# -----------------------------------------------------------------------------
# HELPERS
# -----------------------------------------------------------------------------

def _inherited_rules(directory: str, project_root: str) -> List[IgnoreRule]:
    """
    Load ignore rules declared by the ancestors of directory.

    Only directories from the project root down to (excluding) directory
    contribute; a directory outside the project inherits nothing.
    """
    if directory == project_root or not is_within(directory, project_root):
        return []

    chain: List[str] = []
    current = os.path.dirname(directory)
    while True:
        chain.append(current)
        if current == project_root:
            break
        parent = os.path.dirname(current)
        if parent == current:
            break
        current = parent

    rules: List[IgnoreRule] = []
    for ancestor in reversed(chain):
        rules.extend(load_rules(ancestor, project_root))
    return rules


def _emit(on_event: Optional[EventCallback], event: DiscoveryEvent) -> None:
    if on_event is not None:
        on_event(event)
