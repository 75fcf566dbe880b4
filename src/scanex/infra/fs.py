from __future__ import annotations

"""
FileSystem Infrastructure Layer.

Path canonicalization, project-relative display paths and resilient file
I/O used by the walker, the discovery engine and the renderers.
"""

import os
from typing import Optional, Tuple

# -----------------------------------------------------------------------------
# PATH RESOLUTION API
# -----------------------------------------------------------------------------

def canonical_path(path: str) -> str:
    """
    Resolve symlinks and relative segments into the identity of a file.

    Two path strings naming the same file yield the same canonical path,
    which is what visited-set membership is keyed on.
    """
    return os.path.realpath(path)


def to_posix_rel(path: str, root: str) -> str:
    """
    Render a path relative to root using forward slashes.

    Args:
        path: Absolute path to display.
        root: Base directory.

    Returns:
        str: Relative POSIX path ("." for the root itself).
    """
    rel = os.path.relpath(path, root)
    return rel.replace(os.sep, "/")


def is_within(path: str, root: str) -> bool:
    """Check whether path lies inside (or equals) root."""
    try:
        return os.path.commonpath([os.path.abspath(path), os.path.abspath(root)]) == os.path.abspath(root)
    except ValueError:
        # Different drives on Windows
        return False

# -----------------------------------------------------------------------------
# FILE I/O API
# -----------------------------------------------------------------------------

def read_text(file_path: str) -> str:
    """
    Read a whole file as UTF-8 text.

    Undecodable byte sequences are substituted instead of raising, so mixed
    encodings never abort processing. OSError still propagates.

    Args:
        file_path: Absolute path to the target file.

    Returns:
        str: File content.
    """
    with open(file_path, "r", encoding="utf-8", errors="replace") as f:
        return f.read()


def write_text(file_path: str, content: str) -> Tuple[bool, Optional[str]]:
    """
    Write content to a file, creating parent directories as needed.

    Args:
        file_path: Target path.
        content: Text to persist.

    Returns:
        Tuple[bool, Optional[str]]: (Success flag, Error message if applicable).
    """
    try:
        parent = os.path.dirname(os.path.abspath(file_path))
        if parent:
            os.makedirs(parent, exist_ok=True)
        with open(file_path, "w", encoding="utf-8") as f:
            f.write(content)
        return True, None
    except OSError as e:
        return False, str(e)
