from __future__ import annotations

"""
Configuration Domain Management.

Holds the default build configuration and loads user overrides persisted as
JSON. Unknown keys are kept out of the session so that stale files cannot
pollute the builder options.
"""

import json
import logging
import os
from typing import Any, Dict, Optional

from symboltree.domain.constants import (
    ALL_SYMBOL_TYPES,
    DEFAULT_SNAPSHOT_INTERVAL,
    GROUP_BY_SOURCE_PATH,
)
from symboltree.infra.fs import get_user_data_dir

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = "config.json"

# -----------------------------------------------------------------------------
# Configuration Models (Dict-based)
# -----------------------------------------------------------------------------

def get_default_config() -> Dict[str, Any]:
    """
    Generate the default build configuration.

    Returns:
        Dict[str, Any]: Default configuration values.
    """
    return {
        # Grouping
        "group_by": GROUP_BY_SOURCE_PATH,

        # Filtering
        "method_count": False,
        "types": list(ALL_SYMBOL_TYPES),

        # Finalization
        "collapse_chains": False,

        # Streaming
        "snapshot_interval": DEFAULT_SNAPSHOT_INTERVAL,
    }


def get_default_config_path() -> str:
    """Resolve the persistent configuration file inside the user data dir."""
    return os.path.join(get_user_data_dir(), CONFIG_FILE_NAME)


# -----------------------------------------------------------------------------
# Persistence Logic
# -----------------------------------------------------------------------------

def load_config(path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load the build configuration from disk, merged over the defaults.

    Missing or corrupted files are not fatal: the defaults are returned and
    the problem is logged.

    Args:
        path: JSON file to read. Defaults to the user data directory file.

    Returns:
        Dict[str, Any]: The merged configuration.
    """
    config = get_default_config()
    config_path = path or get_default_config_path()

    if not os.path.exists(config_path):
        logger.debug(f"Config file not found at {config_path}. Using defaults.")
        return config

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        logger.error(f"Failed to load config from {config_path}: {e}. Using defaults.")
        return config

    if not isinstance(data, dict):
        logger.warning("Corrupted config file. Resetting to defaults.")
        return config

    for key in config:
        if key in data:
            config[key] = data[key]
    return config
