from __future__ import annotations

"""
Solution Manifest Parser.

Extracts project declarations and folder nesting relations from the text of
a solution manifest. Only the records needed to rebuild the solution graph
are read; the rest of the manifest is ignored.

Declaration lines look like:

    Project("{type-guid}") = "Name", "Relative\\Path.csproj", "{project-guid}"

Nesting relations live in the `GlobalSection(NestedProjects)` block as
`{child-guid} = {parent-guid}` lines.
"""

import logging
import os
import re
from typing import List, Set

from slnpack.domain.constants import (
    NESTING_SECTION_END,
    NESTING_SECTION_START,
    PROJECT_FILE_EXTENSION,
    SOURCE_ENCODING,
)
from slnpack.domain.solution_models import (
    DeclarationRecord,
    ManifestContents,
    NestingRelation,
    ProjectRecord,
    normalize_id,
)
from slnpack.infra.fs import to_host_separators

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# REGEX CONSTANTS
# -----------------------------------------------------------------------------

_DECLARATION_RX = re.compile(
    r'^[ \t]*Project\(\s*"(?P<type>\{?[^"}]*\}?)"\s*\)\s*=\s*'
    r'"(?P<name>[^"]*)"\s*,\s*'
    r'"(?P<path>[^"]*)"\s*,\s*'
    r'"(?P<id>\{?[^"}]*\}?)"',
    re.MULTILINE,
)

_NESTING_PAIR_RX = re.compile(r"^[ \t]*\{([^}\r\n]+)\}[ \t]*=[ \t]*\{([^}\r\n]+)\}", re.MULTILINE)

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def read_manifest_text(manifest_path: str) -> str:
    """
    Read a manifest from disk.

    Manifests are commonly saved with a UTF-8 byte order mark, which is
    stripped. Undecodable bytes are replaced rather than failing the run.

    Args:
        manifest_path: Path to the manifest file.

    Returns:
        str: Manifest text.

    Raises:
        OSError: If the file cannot be read.
    """
    with open(manifest_path, "r", encoding=SOURCE_ENCODING, errors="replace") as f:
        return f.read()


def parse_manifest(text: str, manifest_path: str) -> ManifestContents:
    """
    Parse manifest text into declarations, projects and nesting relations.

    Args:
        text: Full manifest content.
        manifest_path: Manifest location, used to resolve project paths.

    Returns:
        ManifestContents: Records in declaration/manifest order.
    """
    base_dir = os.path.dirname(os.path.abspath(manifest_path))

    declarations = parse_declarations(text)
    projects = _select_projects(declarations, base_dir)
    relations = parse_nesting_relations(text)

    logger.debug(
        f"Manifest parsed: {len(declarations)} declarations, "
        f"{len(projects)} projects, {len(relations)} nesting relations"
    )
    return ManifestContents(projects=projects, declarations=declarations, relations=relations)


def parse_declarations(text: str) -> List[DeclarationRecord]:
    """
    Extract the raw name/path/id triple of every declaration line.

    Args:
        text: Full manifest content.

    Returns:
        List[DeclarationRecord]: Declarations in manifest order.
    """
    records: List[DeclarationRecord] = []
    for match in _DECLARATION_RX.finditer(text):
        records.append(
            DeclarationRecord(
                type_id=normalize_id(match.group("type")),
                name=match.group("name"),
                path=match.group("path"),
                id=normalize_id(match.group("id")),
            )
        )
    return records


def parse_nesting_relations(text: str) -> List[NestingRelation]:
    """
    Extract `{child} = {parent}` pairs from the nesting section.

    Pairs outside the section are never read. A missing section, or one that
    is not terminated, yields an empty list.

    Args:
        text: Full manifest content.

    Returns:
        List[NestingRelation]: Relations in manifest order.
    """
    start = text.find(NESTING_SECTION_START)
    if start < 0:
        return []

    body_start = text.find("\n", start)
    end = text.find(NESTING_SECTION_END, start)
    if body_start < 0 or end < 0 or end < body_start:
        logger.warning("Nesting section is not terminated; ignoring folder relations.")
        return []

    body = text[body_start:end]
    return [
        NestingRelation(child_id=normalize_id(child), parent_id=normalize_id(parent))
        for child, parent in _NESTING_PAIR_RX.findall(body)
    ]

# -----------------------------------------------------------------------------
# INTERNAL HELPERS
# -----------------------------------------------------------------------------

def _select_projects(declarations: List[DeclarationRecord], base_dir: str) -> List[ProjectRecord]:
    """Keep declarations that point to a project file, first id wins."""
    projects: List[ProjectRecord] = []
    seen: Set[str] = set()

    for decl in declarations:
        if not decl.path.lower().endswith(PROJECT_FILE_EXTENSION):
            continue
        if decl.id in seen:
            logger.warning(f"Duplicate project id {decl.id} for '{decl.name}'; keeping the first declaration.")
            continue
        seen.add(decl.id)

        resolved = os.path.normpath(os.path.join(base_dir, to_host_separators(decl.path)))
        projects.append(
            ProjectRecord(
                name=decl.name,
                relative_path=decl.path,
                resolved_path=resolved,
                id=decl.id,
            )
        )
    return projects
