from __future__ import annotations

"""
Unit tests for the Configuration Domain.

Verifies defaults, JSON loading with fallbacks, and policy construction
for both modes.
"""

import json
from pathlib import Path

from slnpack.domain.config import (
    MODE_EXTRACT,
    MODE_TREE,
    get_default_config,
    load_config,
    policy_from_config,
)
from slnpack.domain.constants import (
    DEFAULT_EXTRACTION_DEPTH,
    DEFAULT_EXTRACTION_EXTENSIONS,
    DEFAULT_TREE_EXTENSIONS,
    EXTRACTION_BUILD_ARTIFACT_DIRS,
    EXTRACTION_HIDDEN_ALLOWLIST,
    TREE_BUILD_ARTIFACT_DIRS,
)


def test_default_config_values():
    cfg = get_default_config()
    assert cfg["max_depth"] == 10
    assert cfg["max_unit_weight"] == 190_000
    assert cfg["enable_partitioning"] is True
    assert cfg["encoding"] == "utf-8"


def test_load_config_without_file_returns_defaults():
    assert load_config(None) == get_default_config()


def test_load_config_merges_known_keys(tmp_path: Path):
    path = tmp_path / "cfg.json"
    path.write_text(json.dumps({"max_depth": 4, "unknown_key": 1}), encoding="utf-8")

    cfg = load_config(str(path))
    assert cfg["max_depth"] == 4
    assert "unknown_key" not in cfg


def test_load_config_missing_or_corrupt_file_falls_back(tmp_path: Path):
    assert load_config(str(tmp_path / "nope.json")) == get_default_config()

    bad = tmp_path / "bad.json"
    bad.write_text("{not json", encoding="utf-8")
    assert load_config(str(bad)) == get_default_config()

    listing = tmp_path / "list.json"
    listing.write_text("[1, 2]", encoding="utf-8")
    assert load_config(str(listing)) == get_default_config()


def test_tree_policy_from_defaults():
    policy = policy_from_config(get_default_config(), MODE_TREE)

    assert policy.max_depth == 10
    assert policy.default_extensions == frozenset(DEFAULT_TREE_EXTENSIONS)
    assert policy.build_artifact_dirs == TREE_BUILD_ARTIFACT_DIRS
    assert policy.hidden_allowlist == frozenset()


def test_tree_policy_file_types_replace_defaults():
    cfg = get_default_config()
    cfg["file_types"] = [".py"]
    assert policy_from_config(cfg, MODE_TREE).default_extensions == frozenset({".py"})


def test_extraction_policy_uses_extraction_tables():
    cfg = get_default_config()
    cfg["max_depth"] = 2
    policy = policy_from_config(cfg, MODE_EXTRACT)

    assert policy.max_depth == DEFAULT_EXTRACTION_DEPTH
    assert policy.default_extensions == frozenset(DEFAULT_EXTRACTION_EXTENSIONS)
    assert policy.build_artifact_dirs == EXTRACTION_BUILD_ARTIFACT_DIRS
    assert policy.hidden_allowlist == EXTRACTION_HIDDEN_ALLOWLIST


def test_policy_size_limit_prefers_bytes_key():
    cfg = get_default_config()
    cfg["max_file_size_bytes"] = 123
    assert policy_from_config(cfg).max_unit_size_bytes == 123

    del cfg["max_file_size_bytes"]
    cfg["max_file_size_mb"] = 2
    assert policy_from_config(cfg).max_unit_size_bytes == 2 * 1024 * 1024
