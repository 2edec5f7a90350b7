from __future__ import annotations

"""
Policy-Driven Directory Walker.

Produces a lazy, depth-first sequence of entries below a project directory.
Each directory's visible entries are filtered first and then sorted by name
(case-insensitive), so the sequence is identical for an unchanged tree and
the same policy, and every entry knows whether it is the last sibling.
"""

import logging
import os
from typing import Iterator, List, Tuple

from slnpack.core.pipeline.components.filters import should_show_file, should_skip_directory
from slnpack.domain.tree_models import (
    ACCESS_DENIED,
    LISTING_ERROR,
    FilterPolicy,
    WalkEntry,
)

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def walk_directory(root: str, policy: FilterPolicy, depth: int = 0) -> Iterator[WalkEntry]:
    """
    Walk `root` depth-first under the given policy.

    Entries deeper than `policy.max_depth` are not produced; with a depth
    of 1 only the immediate children of `root` are yielded. A directory
    that cannot be listed yields a single error entry in place of its
    children and the walk continues with its siblings.
    Symbolic links to directories are listed but not followed, so a link
    cycle cannot make the walk revisit a directory.

    Args:
        root: Directory to walk.
        policy: Inclusion policy.
        depth: Level of `root` itself (0 for a project directory).

    Yields:
        WalkEntry: Visible entries and listing-failure markers.
    """
    level = depth + 1
    if level > policy.max_depth:
        return

    try:
        visible = _list_visible(root, policy)
    except PermissionError:
        logger.warning(f"Access denied: {root}")
        yield WalkEntry(path=root, name=os.path.basename(root), is_dir=True, depth=level, error=ACCESS_DENIED)
        return
    except OSError as e:
        logger.warning(f"Cannot list directory {root}: {e}")
        yield WalkEntry(
            path=root,
            name=os.path.basename(root),
            is_dir=True,
            depth=level,
            error=LISTING_ERROR,
            message=e.strerror or str(e),
        )
        return

    total = len(visible)
    for i, (name, path, is_dir, is_link) in enumerate(visible):
        yield WalkEntry(path=path, name=name, is_dir=is_dir, depth=level, is_last=(i == total - 1))
        if is_dir and not is_link:
            yield from walk_directory(path, policy, level)


def iter_accepted_files(root: str, policy: FilterPolicy) -> Iterator[str]:
    """
    Yield the paths of every accepted file below `root`, in walk order.

    Listing failures are logged by the walker and skipped here.

    Args:
        root: Directory to walk.
        policy: Inclusion policy.

    Yields:
        str: Absolute file paths.
    """
    for entry in walk_directory(root, policy):
        if not entry.is_dir and not entry.is_error:
            yield entry.path

# -----------------------------------------------------------------------------
# INTERNAL HELPERS
# -----------------------------------------------------------------------------

def _list_visible(directory: str, policy: FilterPolicy) -> List[Tuple[str, str, bool, bool]]:
    """
    List, filter and sort the entries of one directory.

    Each item is (name, path, is_dir, is_link). A symlinked directory is
    listed like any directory but never descended into.
    """
    visible: List[Tuple[str, str, bool, bool]] = []
    with os.scandir(directory) as it:
        for entry in it:
            is_dir = _safe_is_dir(entry)
            if is_dir:
                if should_skip_directory(entry.name, policy):
                    continue
            elif not should_show_file(entry.name, policy):
                continue
            visible.append((entry.name, entry.path, is_dir, is_dir and _safe_is_link(entry)))

    visible.sort(key=lambda item: (item[0].casefold(), item[0]))
    return visible


def _safe_is_dir(entry: os.DirEntry) -> bool:
    try:
        return entry.is_dir()
    except OSError:
        return False


def _safe_is_link(entry: os.DirEntry) -> bool:
    try:
        return entry.is_symlink()
    except OSError:
        return False
