from __future__ import annotations

"""
Global Domain Constants.

Shared markers and defaults used by the discovery engine: project root
markers, ignore-file naming, alias configuration candidates and the
default exclusion pattern applied to every run.
"""

from typing import List, Tuple

# -----------------------------------------------------------------------------
# PROJECT ROOT MARKERS
# -----------------------------------------------------------------------------

# Presence of this entry marks a repository root and stops the upward search
VCS_ROOT_MARKER: str = ".git"

MANIFEST_MARKERS: Tuple[str, ...] = (
    "package.json",
    "pyproject.toml",
    "Cargo.toml",
    "go.mod",
    "pom.xml",
    "build.gradle",
    "composer.json",
    "Gemfile",
    "requirements.txt",
)

# Version-control metadata directories never walked
VCS_DIRECTORIES: Tuple[str, ...] = (".git", ".hg", ".svn")

# -----------------------------------------------------------------------------
# IGNORE RULES & EXCLUSION
# -----------------------------------------------------------------------------

IGNORE_FILE_NAME: str = ".gitignore"

# Dependency directories and test trees are left out unless overridden
DEFAULT_EXCLUDE_PATTERN: str = r"node_modules|test"

# -----------------------------------------------------------------------------
# PATH ALIAS CONFIGURATION
# -----------------------------------------------------------------------------

# Ordered by preference when both exist in the same directory
ALIAS_CONFIG_FILES: List[str] = ["tsconfig.json", "jsconfig.json"]

# -----------------------------------------------------------------------------
# RENDERING
# -----------------------------------------------------------------------------

TREE_ROOT_LABEL: str = "."
BINARY_PLACEHOLDER: str = "[binary content omitted]"

# -----------------------------------------------------------------------------
# VERSIONING
# -----------------------------------------------------------------------------
APP_VERSION: str = "0.1.0"
