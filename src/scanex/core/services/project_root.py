from __future__ import annotations

"""
Project Root Locator.

Ascends from an input path looking for the directory that anchors the
project: a version-control root when there is one, otherwise the nearest
directory holding a package manifest.
"""

import logging
import os
from typing import Optional

from scanex.domain.constants import MANIFEST_MARKERS, VCS_ROOT_MARKER

logger = logging.getLogger(__name__)


def locate_project_root(start_path: str) -> str:
    """
    Determine the project root for a file or directory.

    Ancestors are visited from the start directory upward. The first one
    holding a '.git' entry wins and ends the search; failing that, the
    first one holding a manifest file; failing that, the start directory.

    Args:
        start_path: Input file or directory.

    Returns:
        str: Absolute path of the detected root. Never raises.
    """
    start_dir = os.path.abspath(start_path)
    if os.path.isfile(start_dir):
        start_dir = os.path.dirname(start_dir)

    vcs_root: Optional[str] = None
    manifest_root: Optional[str] = None

    current = start_dir
    while True:
        if os.path.exists(os.path.join(current, VCS_ROOT_MARKER)):
            vcs_root = current
            break
        if manifest_root is None and _has_manifest(current):
            manifest_root = current

        parent = os.path.dirname(current)
        if parent == current:
            break
        current = parent

    if vcs_root:
        logger.info(f"Repository root detected as: {vcs_root}")
        return vcs_root
    if manifest_root:
        logger.info(f"Project root detected as: {manifest_root}")
        return manifest_root

    logger.info(f"Using input directory as project root: {start_dir}")
    return start_dir


def _has_manifest(directory: str) -> bool:
    return any(os.path.isfile(os.path.join(directory, m)) for m in MANIFEST_MARKERS)
