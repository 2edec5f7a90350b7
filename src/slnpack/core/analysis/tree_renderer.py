from __future__ import annotations

"""
Solution Tree Renderer.

Prints the logical folder forest and, below each project, its physical
directory contents using box-drawing connectors (├──, └──, │). Each node
kind is emitted with its own role so the output sink can style it.
"""

import logging
import os
from typing import List, Optional, Set, Union

from slnpack.core.pipeline.components.walker import walk_directory
from slnpack.domain.solution_models import FolderNode, ProjectRecord, SolutionForest
from slnpack.domain.tree_models import ACCESS_DENIED, FilterPolicy, WalkEntry
from slnpack.infra.console import (
    ROLE_ERROR,
    ROLE_FILE,
    ROLE_FOLDER,
    ROLE_PROJECT,
    ROLE_SIZE,
    ROLE_SOLUTION_FOLDER,
    ROLE_STRUCTURE,
    Emitter,
)
from slnpack.infra.fs import format_file_size

logger = logging.getLogger(__name__)

BRANCH = "├── "
LAST_BRANCH = "└── "
PIPE = "│   "
SPACE = "    "

NOT_FOUND_SUFFIX = " (NOT FOUND)"
ACCESS_DENIED_MARKER = "[Access Denied]"

Child = Union[FolderNode, ProjectRecord]

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def render_solution_tree(
        solution_path: str,
        forest: SolutionForest,
        policy: FilterPolicy,
        emitter: Emitter,
        show_file_size: bool = False,
) -> None:
    """
    Render the header and the full solution tree.

    Root folders come first, then projects outside any folder, each group
    sorted by name (case-insensitive). A project directory shared by several
    projects is walked only under the first one rendered.

    Args:
        solution_path: Manifest path (its file name roots the tree).
        forest: Output of the tree builder.
        policy: Traversal policy for project directories.
        emitter: Output capability.
        show_file_size: Append each file's size.
    """
    renderer = _TreeRenderer(forest, policy, emitter, show_file_size)

    emitter.line(f"Solution: {os.path.basename(solution_path)}")
    emitter.line(f"Location: {os.path.dirname(os.path.abspath(solution_path))}")
    emitter.line()
    emitter.line("Solution Structure:")
    emitter.line(os.path.basename(solution_path), ROLE_PROJECT)

    children: List[Child] = [*forest.roots(), *forest.orphans()]
    renderer.render_children(children, prefix="")


def render_directory(
        directory: str,
        policy: FilterPolicy,
        emitter: Emitter,
        prefix: str = "",
        show_file_size: bool = False,
) -> None:
    """
    Render the walked contents of one directory below `prefix`.

    Args:
        directory: Directory to walk.
        policy: Traversal policy.
        emitter: Output capability.
        prefix: Indentation inherited from the parent node.
        show_file_size: Append each file's size.
    """
    # Is-last flags of the open ancestor directories, one per level
    open_levels: List[bool] = []

    for entry in walk_directory(directory, policy):
        del open_levels[entry.depth - 1:]
        indent = prefix + "".join(SPACE if last else PIPE for last in open_levels)

        if entry.is_error:
            emitter.emit(ROLE_STRUCTURE, indent)
            emitter.emit(ROLE_ERROR, _error_marker(entry))
            emitter.newline()
            continue

        emitter.emit(ROLE_STRUCTURE, indent + (LAST_BRANCH if entry.is_last else BRANCH))
        if entry.is_dir:
            emitter.emit(ROLE_FOLDER, f"{entry.name}/")
            open_levels.append(entry.is_last)
        else:
            emitter.emit(ROLE_FILE, entry.name)
            if show_file_size:
                size = _file_size(entry.path)
                if size is not None:
                    emitter.emit(ROLE_SIZE, f" ({format_file_size(size)})")
        emitter.newline()

# -----------------------------------------------------------------------------
# INTERNAL RENDERER
# -----------------------------------------------------------------------------

class _TreeRenderer:
    """Holds the per-pass state: processed directories and visited folders."""

    def __init__(self, forest: SolutionForest, policy: FilterPolicy, emitter: Emitter, show_file_size: bool) -> None:
        self.forest = forest
        self.policy = policy
        self.emitter = emitter
        self.show_file_size = show_file_size
        self.processed_paths: Set[str] = set()
        self.visited_folders: Set[str] = set()

    def render_children(self, children: List[Child], prefix: str) -> None:
        for i, child in enumerate(children):
            is_last = i == len(children) - 1
            if isinstance(child, FolderNode):
                self.render_folder(child, prefix, is_last)
            else:
                self.render_project(child, prefix, is_last)

    def render_folder(self, folder: FolderNode, prefix: str, is_last: bool) -> None:
        if folder.id in self.visited_folders:
            logger.warning(f"Folder '{folder.name}' reached twice; not rendering it again.")
            return
        self.visited_folders.add(folder.id)

        self.emitter.emit(ROLE_STRUCTURE, prefix + _connector(is_last))
        self.emitter.emit(ROLE_SOLUTION_FOLDER, f"{folder.name}/")
        self.emitter.newline()

        children: List[Child] = [
            *self.forest.child_folders(folder),
            *self.forest.child_projects(folder),
        ]
        self.render_children(children, prefix + _continuation(is_last))

    def render_project(self, project: ProjectRecord, prefix: str, is_last: bool) -> None:
        self.emitter.emit(ROLE_STRUCTURE, prefix + _connector(is_last))

        if not os.path.isfile(project.resolved_path):
            logger.warning(f"Project file not found: {project.resolved_path}")
            self.emitter.emit(ROLE_ERROR, f"{project.name}{NOT_FOUND_SUFFIX}")
            self.emitter.newline()
            return

        self.emitter.emit(ROLE_PROJECT, project.name)
        self.emitter.newline()

        project_dir = os.path.dirname(project.resolved_path)
        key = os.path.normcase(os.path.realpath(project_dir))
        if key in self.processed_paths:
            return
        self.processed_paths.add(key)

        render_directory(
            project_dir,
            self.policy,
            self.emitter,
            prefix=prefix + _continuation(is_last),
            show_file_size=self.show_file_size,
        )

# -----------------------------------------------------------------------------
# HELPERS
# -----------------------------------------------------------------------------

def _connector(is_last: bool) -> str:
    return LAST_BRANCH if is_last else BRANCH


def _continuation(is_last: bool) -> str:
    return SPACE if is_last else PIPE


def _error_marker(entry: WalkEntry) -> str:
    if entry.error == ACCESS_DENIED:
        return ACCESS_DENIED_MARKER
    return f"[Error: {entry.message}]"


def _file_size(path: str) -> Optional[int]:
    try:
        return os.path.getsize(path)
    except OSError:
        return None
