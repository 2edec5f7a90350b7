from __future__ import annotations

"""
Solution Graph Data Models.

Defines the records extracted from a solution manifest and the arena-style
forest assembled from them. Folders reference their children by identifier;
the forest owns every node through id-keyed maps, so no node holds a
back-reference to its parent.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Set


def normalize_id(raw_id: str) -> str:
    """
    Produce the comparison key of a manifest identifier.

    Identifiers are compared case-insensitively and with or without their
    surrounding braces.

    Args:
        raw_id: Identifier as written in the manifest (e.g. '{a1b2...}').

    Returns:
        str: Upper-case identifier without braces or padding.
    """
    return raw_id.strip().strip("{}").strip().upper()

# -----------------------------------------------------------------------------
# RAW MANIFEST RECORDS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class DeclarationRecord:
    """
    Raw name/path/id triple of any project declaration in the manifest.

    Attributes:
        type_id: Normalized project-type identifier.
        name: Declared display name.
        path: Declared relative path, verbatim.
        id: Normalized declaration identifier.
    """
    type_id: str
    name: str
    path: str
    id: str

    @property
    def is_logical_folder(self) -> bool:
        """Folders have no filesystem path: the manifest repeats the name."""
        return self.path == self.name


@dataclass(frozen=True)
class ProjectRecord:
    """
    A declared project whose path ends with the project-file extension.

    Attributes:
        name: Declared display name.
        relative_path: Manifest-declared path, verbatim.
        resolved_path: Absolute path of the project file on disk.
        id: Normalized identifier (case-insensitive key).
    """
    name: str
    relative_path: str
    resolved_path: str
    id: str


@dataclass(frozen=True)
class NestingRelation:
    """One `{child} = {parent}` pair of the nesting section."""
    child_id: str
    parent_id: str


@dataclass(frozen=True)
class ManifestContents:
    """
    Output of a manifest parse.

    Attributes:
        projects: Project records in declaration order.
        declarations: Every declaration (projects, folders, unknown types).
        relations: Nesting relations in manifest order.
    """
    projects: List[ProjectRecord] = field(default_factory=list)
    declarations: List[DeclarationRecord] = field(default_factory=list)
    relations: List[NestingRelation] = field(default_factory=list)

    @property
    def folder_candidates(self) -> List[DeclarationRecord]:
        return [d for d in self.declarations if d.is_logical_folder]

# -----------------------------------------------------------------------------
# ARENA FOREST
# -----------------------------------------------------------------------------

@dataclass
class FolderNode:
    """
    Logical grouping folder of the solution.

    Children are held as identifier sets; the owning `SolutionForest`
    resolves them. Ordering is applied at render time.
    """
    name: str
    id: str
    project_ids: Set[str] = field(default_factory=set)
    folder_ids: Set[str] = field(default_factory=set)


@dataclass
class SolutionForest:
    """
    Rooted forest of logical folders plus the projects outside any folder.

    Attributes:
        folders: Folder arena keyed by identifier.
        projects: Project index keyed by identifier.
        root_ids: Folders never accepted as a child.
        orphan_ids: Projects never attached to a folder.
    """
    folders: Dict[str, FolderNode] = field(default_factory=dict)
    projects: Dict[str, ProjectRecord] = field(default_factory=dict)
    root_ids: Set[str] = field(default_factory=set)
    orphan_ids: Set[str] = field(default_factory=set)

    def roots(self) -> List[FolderNode]:
        return sort_by_name(self.folders[i] for i in self.root_ids)

    def orphans(self) -> List[ProjectRecord]:
        return sort_by_name(self.projects[i] for i in self.orphan_ids)

    def child_folders(self, folder: FolderNode) -> List[FolderNode]:
        return sort_by_name(self.folders[i] for i in folder.folder_ids)

    def child_projects(self, folder: FolderNode) -> List[ProjectRecord]:
        return sort_by_name(self.projects[i] for i in folder.project_ids)


def sort_by_name(items: Iterable[Any]) -> List[Any]:
    """Order nodes alphabetically (case-insensitive), id as tie-breaker."""
    return sorted(items, key=lambda n: (n.name.casefold(), n.name, n.id))
