from __future__ import annotations

"""
Path Alias Configuration Loader.

Finds and parses the tsconfig.json / jsconfig.json that declares import
path aliases. These files are JSON with comments and trailing commas in
practice, so parsing degrades step by step instead of failing: strict
JSON, then a cleaned-up copy, then just the compilerOptions block.
"""

import json
import logging
import os
import re
from dataclasses import dataclass
from typing import Any, Dict, Optional

from scanex.domain.constants import ALIAS_CONFIG_FILES
from scanex.infra.fs import is_within, read_text, to_posix_rel

logger = logging.getLogger(__name__)

_TRAILING_COMMA_RE = re.compile(r",(\s*[}\]])")
_COMPILER_OPTIONS_RE = re.compile(r'"compilerOptions"\s*:\s*\{')


@dataclass(frozen=True)
class AliasConfig:
    """
    Parsed alias configuration.

    Attributes:
        data: Decoded document (at least a 'compilerOptions' mapping when salvaged).
        base_path: Directory containing the configuration file.
        source: Absolute path of the configuration file.
    """
    data: Dict[str, Any]
    base_path: str
    source: str

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def load_alias_config(project_root: str, hint_file: Optional[str] = None) -> Optional[AliasConfig]:
    """
    Locate and parse the alias configuration for a run.

    The configuration nearest to hint_file (walking upward but never above
    the project root) is preferred; otherwise the one at the project root
    is used.

    Args:
        project_root: Detected project root.
        hint_file: First explicit file input, if any.

    Returns:
        Optional[AliasConfig]: Parsed configuration, or None when absent or unparsable.
    """
    candidates = []
    if hint_file and os.path.isfile(hint_file):
        nearest = find_nearest_config(hint_file, project_root)
        if nearest:
            candidates.append(nearest)

    root_config = _config_in(project_root)
    if root_config and root_config not in candidates:
        candidates.append(root_config)

    for path in candidates:
        try:
            content = read_text(path)
        except OSError as e:
            logger.warning(f"Cannot read {path}: {e}")
            continue

        data = parse_jsonc(content)
        if data is None:
            logger.warning(f"Could not parse {os.path.basename(path)}, path aliases will not work")
            continue

        logger.info(f"Loaded {to_posix_rel(path, project_root)} for path aliases")
        return AliasConfig(data=data, base_path=os.path.dirname(path), source=path)

    return None


def find_nearest_config(start_file: str, project_root: str) -> Optional[str]:
    """
    Walk upward from a file's directory to the project root for a config file.

    Args:
        start_file: File whose directory starts the search.
        project_root: Upper bound of the search (inclusive).

    Returns:
        Optional[str]: Absolute path of the nearest config file.
    """
    current = os.path.dirname(os.path.abspath(start_file))
    while is_within(current, project_root):
        found = _config_in(current)
        if found:
            return found
        parent = os.path.dirname(current)
        if parent == current:
            break
        current = parent
    return None


def parse_jsonc(content: str) -> Optional[Dict[str, Any]]:
    """
    Decode a JSON-with-comments document.

    Args:
        content: Raw file text.

    Returns:
        Optional[Dict[str, Any]]: Decoded object, or None on total failure.
    """
    # 1. As-is
    data = _try_load(content)
    if data is not None:
        return data

    # 2. Without comments and trailing commas
    cleaned = _strip_comments(content)
    cleaned = _TRAILING_COMMA_RE.sub(r"\1", cleaned)
    data = _try_load(cleaned)
    if data is not None:
        return data

    # 3. Salvage the compilerOptions object alone
    block = _extract_compiler_options(cleaned)
    if block is not None:
        options = _try_load(block)
        if options is not None:
            logger.debug("Recovered compilerOptions from a malformed config")
            return {"compilerOptions": options}

    return None

# -----------------------------------------------------------------------------
# HELPERS
# -----------------------------------------------------------------------------

def _config_in(directory: str) -> Optional[str]:
    for name in ALIAS_CONFIG_FILES:
        path = os.path.join(directory, name)
        if os.path.isfile(path):
            return path
    return None


def _try_load(text: str) -> Optional[Dict[str, Any]]:
    try:
        data = json.loads(text)
    except ValueError:
        return None
    return data if isinstance(data, dict) else None


def _strip_comments(text: str) -> str:
    """Remove // and /* */ comments outside of string literals."""
    out = []
    i, n = 0, len(text)
    in_string = False
    while i < n:
        ch = text[i]
        if in_string:
            out.append(ch)
            if ch == "\\" and i + 1 < n:
                out.append(text[i + 1])
                i += 2
                continue
            if ch == '"':
                in_string = False
            i += 1
            continue

        if ch == '"':
            in_string = True
            out.append(ch)
            i += 1
        elif text.startswith("//", i):
            end = text.find("\n", i)
            i = n if end == -1 else end
        elif text.startswith("/*", i):
            end = text.find("*/", i + 2)
            i = n if end == -1 else end + 2
        else:
            out.append(ch)
            i += 1
    return "".join(out)


def _extract_compiler_options(text: str) -> Optional[str]:
    """Return the balanced-brace compilerOptions object text, if present."""
    match = _COMPILER_OPTIONS_RE.search(text)
    if not match:
        return None

    start = match.end() - 1
    depth = 0
    in_string = False
    escaped = False
    for i in range(start, len(text)):
        ch = text[i]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return text[start:i + 1]
    return None
