from __future__ import annotations

"""
File Filtering and Classification Engine.

Implements the extension allow/deny precedence rule, hidden-entry and
build-artifact directory checks, and the binary classification table used
by content collection.
"""

import os
from typing import Iterable, List, Optional

from slnpack.domain.constants import BINARY_EXTENSIONS, HIDDEN_MARKER
from slnpack.domain.tree_models import FilterPolicy

# -----------------------------------------------------------------------------
# EXTENSION NORMALIZATION
# -----------------------------------------------------------------------------

def normalize_extension(ext: str) -> str:
    """
    Normalize an extension to its leading-dot, lowercase form.

    Args:
        ext: Raw extension ('CS', '.Json', ' md ').

    Returns:
        str: e.g. '.cs'; empty string for blank input.
    """
    e = ext.strip().lower()
    if not e:
        return ""
    return e if e.startswith(".") else "." + e


def normalize_extensions(exts: Optional[Iterable[str]]) -> List[str]:
    """Normalize a sequence of extensions, dropping blanks and duplicates."""
    out: List[str] = []
    for ext in exts or []:
        e = normalize_extension(ext)
        if e and e not in out:
            out.append(e)
    return out


def file_extension(file_name: str) -> str:
    """
    Lowercase extension of a file name, including the dot.

    A dotfile without a further dot ('.gitignore') is its own extension.
    """
    base = os.path.basename(file_name)
    ext = os.path.splitext(base)[1]
    if not ext and is_hidden(base):
        ext = base
    return ext.lower()

# -----------------------------------------------------------------------------
# POLICY CHECKS
# -----------------------------------------------------------------------------

def is_hidden(name: str) -> bool:
    return name.startswith(HIDDEN_MARKER)


def matches_extension_policy(file_name: str, policy: FilterPolicy) -> bool:
    """
    Apply the extension precedence rule.

    A non-empty include list is authoritative. Otherwise a non-empty exclude
    list rejects its members. Otherwise the default extension set applies.

    Args:
        file_name: Base name of the file.
        policy: Active traversal policy.

    Returns:
        bool: True if the extension is accepted.
    """
    ext = file_extension(file_name)
    if policy.include_extensions:
        return ext in policy.include_extensions
    if policy.exclude_extensions:
        return ext not in policy.exclude_extensions
    return ext in policy.default_extensions


def should_skip_directory(dir_name: str, policy: FilterPolicy) -> bool:
    """
    Decide whether a directory is pruned from the walk.

    Args:
        dir_name: Base name of the directory.
        policy: Active traversal policy.

    Returns:
        bool: True if the directory must not be descended into.
    """
    if not policy.show_build_artifacts and dir_name in policy.build_artifact_dirs:
        return True
    if not policy.show_hidden and is_hidden(dir_name):
        return True
    return False


def should_show_file(file_name: str, policy: FilterPolicy) -> bool:
    """
    Decide whether a file entry is yielded.

    Hidden files are rejected before the extension policy is consulted,
    except for names on the policy's hidden allow-list.

    Args:
        file_name: Base name of the file.
        policy: Active traversal policy.

    Returns:
        bool: True if the file passes the hidden and extension checks.
    """
    if not policy.show_hidden and is_hidden(file_name) and file_name not in policy.hidden_allowlist:
        return False
    return matches_extension_policy(file_name, policy)

# -----------------------------------------------------------------------------
# FILE CLASSIFICATION LOGIC
# -----------------------------------------------------------------------------

def is_binary_file(file_path: str) -> bool:
    """
    Classify a file as binary from its extension alone.

    Args:
        file_path: Path or name of the file.

    Returns:
        bool: True if the extension is a well-known non-text format.
    """
    return file_extension(file_path) in BINARY_EXTENSIONS
