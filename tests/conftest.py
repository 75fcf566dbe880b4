from __future__ import annotations

"""
Global Pytest Configuration and Fixtures.

This module sets up the testing environment, including:
1. Path manipulation to ensure the 'src' directory is importable.
2. A factory that lays out throwaway projects (with a '.git' marker so the
   project root is pinned inside the temporary directory).
3. A session-wide plugin registry.
"""

import os
import sys
from pathlib import Path
from typing import Callable, Dict

import pytest

# -----------------------------------------------------------------------------
# Path Configuration
# -----------------------------------------------------------------------------
_SRC_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src"))
if _SRC_PATH not in sys.path:
    sys.path.insert(0, _SRC_PATH)

from scanex.core.languages.registry import PluginRegistry, load_plugins  # noqa: E402

ProjectFactory = Callable[[Dict[str, str]], Path]


# -----------------------------------------------------------------------------
# Shared Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
def make_project(tmp_path: Path) -> ProjectFactory:
    """
    Return a factory writing a file mapping into a fresh project directory.

    Keys are POSIX paths relative to the project root and values the file
    content. The returned path is canonical (symlinks resolved).
    """

    def _factory(files: Dict[str, str]) -> Path:
        root = tmp_path / "proj"
        (root / ".git").mkdir(parents=True, exist_ok=True)
        for rel, content in files.items():
            target = root / rel
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content, encoding="utf-8")
        return Path(os.path.realpath(root))

    return _factory


@pytest.fixture(scope="session")
def registry() -> PluginRegistry:
    """Plugin registry loaded once from the languages package."""
    return load_plugins()
