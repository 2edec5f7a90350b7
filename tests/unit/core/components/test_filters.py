from __future__ import annotations

"""
Unit tests for the File Filters module.

Verifies:
1. Extension normalization and dotfile extensions.
2. The include/exclude/default precedence rule.
3. Hidden and build-artifact directory pruning.
4. Binary classification by extension.
"""

from slnpack.core.pipeline.components.filters import (
    file_extension,
    is_binary_file,
    matches_extension_policy,
    normalize_extension,
    normalize_extensions,
    should_show_file,
    should_skip_directory,
)
from slnpack.domain.constants import EXTRACTION_BUILD_ARTIFACT_DIRS, EXTRACTION_HIDDEN_ALLOWLIST
from slnpack.domain.tree_models import FilterPolicy


def test_normalize_extension_forms():
    assert normalize_extension("CS") == ".cs"
    assert normalize_extension(" .Json ") == ".json"
    assert normalize_extension("   ") == ""
    assert normalize_extensions(["cs", ".CS", "", "md"]) == [".cs", ".md"]


def test_file_extension_handles_dotfiles():
    assert file_extension("Program.CS") == ".cs"
    assert file_extension(".gitignore") == ".gitignore"
    assert file_extension(".hidden.cs") == ".cs"
    assert file_extension("Makefile") == ""


def test_default_extensions_apply_without_lists():
    policy = FilterPolicy()
    assert matches_extension_policy("a.cs", policy) is True
    assert matches_extension_policy("a.py", policy) is False


def test_include_list_is_authoritative():
    policy = FilterPolicy(include_extensions=frozenset({".py"}), exclude_extensions=frozenset({".py"}))
    assert matches_extension_policy("a.py", policy) is True
    assert matches_extension_policy("a.cs", policy) is False


def test_exclude_list_rejects_members_only():
    policy = FilterPolicy(exclude_extensions=frozenset({".cs"}))
    assert matches_extension_policy("a.cs", policy) is False
    assert matches_extension_policy("a.anything", policy) is True


def test_directory_pruning_rules():
    policy = FilterPolicy()
    assert should_skip_directory("bin", policy) is True
    assert should_skip_directory("obj", policy) is True
    assert should_skip_directory(".git", policy) is True
    assert should_skip_directory("node_modules", policy) is False
    assert should_skip_directory("src", policy) is False

    shown = FilterPolicy(show_hidden=True, show_build_artifacts=True)
    assert should_skip_directory("bin", shown) is False
    assert should_skip_directory(".git", shown) is False


def test_extraction_build_dirs_include_node_modules():
    policy = FilterPolicy(build_artifact_dirs=EXTRACTION_BUILD_ARTIFACT_DIRS)
    assert should_skip_directory("node_modules", policy) is True


def test_hidden_files_rejected_before_extension_policy():
    policy = FilterPolicy(include_extensions=frozenset({".cs"}))
    assert should_show_file(".hidden.cs", policy) is False
    assert should_show_file(".hidden.cs", FilterPolicy(include_extensions=frozenset({".cs"}), show_hidden=True)) is True


def test_hidden_allowlist_still_needs_extension_match():
    policy = FilterPolicy(
        hidden_allowlist=EXTRACTION_HIDDEN_ALLOWLIST,
        default_extensions=frozenset({".cs", ".gitignore"}),
    )
    assert should_show_file(".gitignore", policy) is True
    assert should_show_file(".editorconfig", policy) is False
    assert should_show_file(".env", policy) is False


def test_binary_classification():
    assert is_binary_file("/x/app.DLL") is True
    assert is_binary_file("logo.png") is True
    assert is_binary_file("Program.cs") is False
