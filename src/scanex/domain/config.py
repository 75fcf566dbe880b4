from __future__ import annotations

"""
Configuration Domain Management.

Dict-based run configuration: built-in defaults optionally overlaid with a
JSON configuration file. Command-line overrides are merged on top by the
interface layer.
"""

import json
import logging
import os
from typing import Any, Dict, Optional

from scanex.domain.constants import DEFAULT_EXCLUDE_PATTERN

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# Constants & Defaults
# -----------------------------------------------------------------------------
CONFIG_FILE_NAME = ".scanex.json"


# -----------------------------------------------------------------------------
# Configuration Models (Dict-based)
# -----------------------------------------------------------------------------
def get_default_config() -> Dict[str, Any]:
    """
    Generate the default runtime configuration.

    Returns:
        Dict[str, Any]: Default configuration values.
    """
    return {
        # IO
        "inputs": [],
        "output_path": None,

        # Discovery
        "exclude_pattern": DEFAULT_EXCLUDE_PATTERN,
        "follow_deps": True,

        # Rendering
        "include_tree": True,

        # Diagnostics
        "log_level": "INFO",
        "log_file": None,
    }


# -----------------------------------------------------------------------------
# Persistence Logic
# -----------------------------------------------------------------------------
def load_config(path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load configuration from a JSON file merged over the defaults.

    Without an explicit path, a '.scanex.json' in the working directory is
    used when present. Unknown keys are dropped and a malformed file falls
    back to the defaults.

    Args:
        path: Optional explicit path to the configuration file.

    Returns:
        Dict[str, Any]: The merged configuration.
    """
    defaults = get_default_config()
    config_path = path or os.path.join(os.getcwd(), CONFIG_FILE_NAME)

    if not os.path.exists(config_path):
        if path:
            logger.warning(f"Config file not found: {config_path}. Using defaults.")
        else:
            logger.debug("Config file not found. Returning defaults.")
        return defaults

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        logger.error(f"Failed to load config: {e}. Using defaults.")
        return defaults

    if not isinstance(data, dict):
        logger.warning("Corrupted config file. Using defaults.")
        return defaults

    for key, value in data.items():
        if key in defaults:
            defaults[key] = value
        else:
            logger.debug(f"Ignoring unknown config key: {key}")

    logger.debug(f"Configuration loaded from {config_path}")
    return defaults
