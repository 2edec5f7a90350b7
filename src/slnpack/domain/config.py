from __future__ import annotations

"""
Configuration Domain Management.

Provides the dict-based session configuration that drives both pipelines,
optional JSON file loading, and the conversion of a validated configuration
into an immutable traversal policy.
"""

import json
import logging
import os
from typing import Any, Dict, Optional

from slnpack.domain.constants import (
    DEFAULT_ENCODING,
    DEFAULT_EXTRACTION_DEPTH,
    DEFAULT_EXTRACTION_EXTENSIONS,
    DEFAULT_MAX_DEPTH,
    DEFAULT_MAX_FILE_SIZE_MB,
    DEFAULT_MAX_UNIT_WEIGHT,
    DEFAULT_TOKENIZER,
    DEFAULT_TREE_EXTENSIONS,
    EXTRACTION_BUILD_ARTIFACT_DIRS,
    EXTRACTION_HIDDEN_ALLOWLIST,
    TREE_BUILD_ARTIFACT_DIRS,
)
from slnpack.domain.tree_models import FilterPolicy

logger = logging.getLogger(__name__)

MODE_TREE = "tree"
MODE_EXTRACT = "extract"

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
        # IO Paths
        "solution_path": "",
        "output_path": "",
        "output_dir": "",
        "save_tree_path": "",

        # Traversal
        "max_depth": DEFAULT_MAX_DEPTH,
        "show_hidden_files": False,
        "show_build_artifacts": False,
        "show_file_size": False,

        # Filtering
        "include_extensions": [],
        "exclude_extensions": [],
        "file_types": [],
        "max_file_size_mb": DEFAULT_MAX_FILE_SIZE_MB,
        "skip_binary_files": True,

        # Extraction
        "encoding": DEFAULT_ENCODING,
        "max_unit_weight": DEFAULT_MAX_UNIT_WEIGHT,
        "enable_partitioning": True,
        "separate_projects": False,
        "tokenizer": DEFAULT_TOKENIZER,
        "include_timestamp": True,
    }

# -----------------------------------------------------------------------------
# Persistence Logic
# -----------------------------------------------------------------------------

def load_config(config_file: Optional[str] = None) -> Dict[str, Any]:
    """
    Load a configuration file merged over the defaults.

    Unknown keys are ignored. A missing or unreadable file yields the
    defaults and a logged diagnostic.

    Args:
        config_file: Path to a JSON configuration file.

    Returns:
        Dict[str, Any]: The merged configuration.
    """
    config = get_default_config()
    if not config_file:
        return config

    if not os.path.exists(config_file):
        logger.warning(f"Config file not found: {config_file}. Using defaults.")
        return config

    try:
        with open(config_file, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        logger.error(f"Failed to load config: {e}. Using defaults.")
        return config

    if not isinstance(data, dict):
        logger.warning("Corrupted config file. Using defaults.")
        return config

    for key, value in data.items():
        if key in config:
            config[key] = value
        else:
            logger.debug(f"Ignoring unknown config key: {key}")
    return config

# -----------------------------------------------------------------------------
# Policy Factory
# -----------------------------------------------------------------------------

def policy_from_config(config: Dict[str, Any], mode: str = MODE_TREE) -> FilterPolicy:
    """
    Build the traversal policy for a validated configuration.

    Tree mode honours the hidden/build-artifact flags and the depth limit.
    Extraction mode uses its own build-artifact table, the hidden allow-list
    and a fixed recursion guard instead of the display depth.

    Args:
        config: Validated configuration dictionary.
        mode: MODE_TREE or MODE_EXTRACT.

    Returns:
        FilterPolicy: Immutable policy.
    """
    include = frozenset(config.get("include_extensions") or [])
    exclude = frozenset(config.get("exclude_extensions") or [])
    max_size = config.get("max_file_size_bytes")
    if max_size is None:
        max_size = int(float(config.get("max_file_size_mb", DEFAULT_MAX_FILE_SIZE_MB)) * 1024 * 1024)

    if mode == MODE_EXTRACT:
        return FilterPolicy(
            include_extensions=include,
            exclude_extensions=exclude,
            default_extensions=frozenset(DEFAULT_EXTRACTION_EXTENSIONS),
            max_depth=DEFAULT_EXTRACTION_DEPTH,
            show_hidden=bool(config.get("show_hidden_files", False)),
            show_build_artifacts=bool(config.get("show_build_artifacts", False)),
            build_artifact_dirs=EXTRACTION_BUILD_ARTIFACT_DIRS,
            hidden_allowlist=EXTRACTION_HIDDEN_ALLOWLIST,
            max_unit_size_bytes=max_size,
        )

    file_types = config.get("file_types") or list(DEFAULT_TREE_EXTENSIONS)
    return FilterPolicy(
        include_extensions=include,
        exclude_extensions=exclude,
        default_extensions=frozenset(file_types),
        max_depth=int(config.get("max_depth", DEFAULT_MAX_DEPTH)),
        show_hidden=bool(config.get("show_hidden_files", False)),
        show_build_artifacts=bool(config.get("show_build_artifacts", False)),
        build_artifact_dirs=TREE_BUILD_ARTIFACT_DIRS,
        max_unit_size_bytes=max_size,
    )
