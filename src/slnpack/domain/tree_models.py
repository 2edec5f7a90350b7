from __future__ import annotations

"""
Directory Walk Data Models.

Provides the policy object that drives filesystem traversal and the entries
the walker yields for each visited node.
"""

from dataclasses import dataclass, field
from typing import FrozenSet, Optional

from slnpack.domain.constants import (
    DEFAULT_MAX_DEPTH,
    DEFAULT_TREE_EXTENSIONS,
    TREE_BUILD_ARTIFACT_DIRS,
)

ACCESS_DENIED = "access_denied"
LISTING_ERROR = "listing_error"

# -----------------------------------------------------------------------------
# TRAVERSAL POLICY
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class FilterPolicy:
    """
    Inclusion policy for directory walks.

    A non-empty include list is authoritative and the exclude list is then
    ignored. With neither list set, `default_extensions` applies.

    Attributes:
        include_extensions: Allow-list of normalized extensions ('.cs').
        exclude_extensions: Deny-list, consulted only without an allow-list.
        default_extensions: Fallback allow-list.
        max_depth: Deepest entry level produced (root children are level 1).
        show_hidden: Whether dot-entries are visited.
        show_build_artifacts: Whether build-output directories are visited.
        build_artifact_dirs: Directory names treated as build output.
        hidden_allowlist: Dotfiles shown even when `show_hidden` is off.
        max_unit_size_bytes: Per-file size ceiling before reading content.
    """
    include_extensions: FrozenSet[str] = field(default_factory=frozenset)
    exclude_extensions: FrozenSet[str] = field(default_factory=frozenset)
    default_extensions: FrozenSet[str] = frozenset(DEFAULT_TREE_EXTENSIONS)
    max_depth: int = DEFAULT_MAX_DEPTH
    show_hidden: bool = False
    show_build_artifacts: bool = False
    build_artifact_dirs: FrozenSet[str] = TREE_BUILD_ARTIFACT_DIRS
    hidden_allowlist: FrozenSet[str] = field(default_factory=frozenset)
    max_unit_size_bytes: int = 1024 * 1024

# -----------------------------------------------------------------------------
# WALK OUTPUT
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class WalkEntry:
    """
    A node produced by the walker.

    Error entries stand in for a directory whose listing failed; they carry
    the directory path and the level its children would have had.

    Attributes:
        path: Absolute path of the entry.
        name: Base name.
        is_dir: True for directories.
        depth: 1 for children of the walk root.
        is_last: True when no visible sibling follows.
        error: ACCESS_DENIED or LISTING_ERROR for failure markers.
        message: Failure detail for LISTING_ERROR markers.
    """
    path: str
    name: str
    is_dir: bool
    depth: int
    is_last: bool = False
    error: Optional[str] = None
    message: str = ""

    @property
    def is_error(self) -> bool:
        return self.error is not None
