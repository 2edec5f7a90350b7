from __future__ import annotations

"""
Solution Tree Builder.

Assembles the flat records of a parsed manifest into a forest of logical
folders. Nodes live in id-keyed maps; relations are applied as set
insertions so their order never changes the resulting node contents.
Relations that would give a node a second parent or close a cycle are
rejected as malformed input.
"""

import logging
from typing import Dict, Iterable, List, Set

from slnpack.domain.solution_models import (
    DeclarationRecord,
    FolderNode,
    ManifestContents,
    NestingRelation,
    ProjectRecord,
    SolutionForest,
)

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def build_forest(contents: ManifestContents) -> SolutionForest:
    """
    Build the folder forest of a parsed manifest.

    Args:
        contents: Output of `parse_manifest`.

    Returns:
        SolutionForest: Folders, projects, roots and orphans.
    """
    return build_forest_from_records(
        contents.projects, contents.folder_candidates, contents.relations
    )


def build_forest_from_records(
        projects: Iterable[ProjectRecord],
        folder_candidates: Iterable[DeclarationRecord],
        relations: Iterable[NestingRelation],
) -> SolutionForest:
    """
    Reconstruct the forest from projects, folder candidates and relations.

    A relation attaches its child only when the parent is a known folder.
    A project child goes to the parent's project set, a folder child to the
    parent's folder set. Roots are folders never accepted as a child;
    orphans are projects never attached.

    Args:
        projects: Project records (ids unique).
        folder_candidates: Declarations classified as logical folders.
        relations: Raw nesting relations.

    Returns:
        SolutionForest: The assembled forest.
    """
    forest = SolutionForest()
    for project in projects:
        forest.projects.setdefault(project.id, project)

    for candidate in folder_candidates:
        if candidate.id in forest.projects:
            continue
        forest.folders.setdefault(candidate.id, FolderNode(name=candidate.name, id=candidate.id))

    # Parent of every accepted child, for both projects and folders
    parent_of: Dict[str, str] = {}

    for relation in relations:
        _apply_relation(forest, relation, parent_of)

    forest.root_ids = {fid for fid in forest.folders if fid not in parent_of}
    forest.orphan_ids = {pid for pid in forest.projects if pid not in parent_of}

    logger.debug(
        f"Forest built: {len(forest.folders)} folders ({len(forest.root_ids)} roots), "
        f"{len(forest.projects)} projects ({len(forest.orphan_ids)} orphans)"
    )
    return forest


def iter_descendant_folders(forest: SolutionForest, folder_id: str) -> List[str]:
    """
    List the ids of every folder below `folder_id`, depth-first.

    Repeated visits are skipped, so malformed graphs cannot loop.

    Args:
        forest: Forest to traverse.
        folder_id: Starting folder id.

    Returns:
        List[str]: Descendant folder ids (the start folder excluded).
    """
    seen: Set[str] = {folder_id}
    order: List[str] = []
    stack = [folder_id]
    while stack:
        node = forest.folders.get(stack.pop())
        if node is None:
            continue
        for child_id in sorted(node.folder_ids):
            if child_id in seen:
                continue
            seen.add(child_id)
            order.append(child_id)
            stack.append(child_id)
    return order

# -----------------------------------------------------------------------------
# INTERNAL HELPERS
# -----------------------------------------------------------------------------

def _apply_relation(forest: SolutionForest, relation: NestingRelation, parent_of: Dict[str, str]) -> None:
    """Attach one relation's child to its parent when the relation is sound."""
    child_id, parent_id = relation.child_id, relation.parent_id

    parent = forest.folders.get(parent_id)
    if parent is None:
        return

    existing = parent_of.get(child_id)
    if existing is not None:
        if existing != parent_id:
            logger.warning(
                f"Ignoring relation {child_id} -> {parent_id}: already nested under {existing}."
            )
        return

    if child_id in forest.projects:
        parent.project_ids.add(child_id)
        parent_of[child_id] = parent_id
        return

    if child_id in forest.folders:
        if _creates_cycle(forest, child_id, parent_id):
            logger.warning(f"Ignoring relation {child_id} -> {parent_id}: it would create a folder cycle.")
            return
        parent.folder_ids.add(child_id)
        parent_of[child_id] = parent_id


def _creates_cycle(forest: SolutionForest, child_id: str, parent_id: str) -> bool:
    """True when `parent_id` is `child_id` itself or one of its descendants."""
    if child_id == parent_id:
        return True
    return parent_id in iter_descendant_folders(forest, child_id)

