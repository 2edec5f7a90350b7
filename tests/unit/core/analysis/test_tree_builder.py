from __future__ import annotations

"""
Unit tests for the Tree Builder.

Verifies root/orphan detection, relation filtering, order independence,
the forest property and cycle rejection.
"""

import itertools
from typing import Dict, List

from slnpack.core.analysis.tree_builder import build_forest_from_records, iter_descendant_folders
from slnpack.domain.solution_models import DeclarationRecord, NestingRelation, ProjectRecord


def _project(name: str, pid: str) -> ProjectRecord:
    return ProjectRecord(name=name, relative_path=f"{name}\\{name}.csproj", resolved_path=f"/x/{name}.csproj", id=pid)


def _folder(name: str, fid: str) -> DeclarationRecord:
    return DeclarationRecord(type_id="T", name=name, path=name, id=fid)


def _rel(child: str, parent: str) -> NestingRelation:
    return NestingRelation(child_id=child, parent_id=parent)


def test_folder_with_one_project():
    """Folder 'Src' containing project 'App' via {G1} = {FolderG}."""
    forest = build_forest_from_records(
        [_project("App", "G1")],
        [_folder("Src", "FOLDERG")],
        [_rel("G1", "FOLDERG")],
    )

    roots = forest.roots()
    assert [f.name for f in roots] == ["Src"]
    assert [p.name for p in forest.child_projects(roots[0])] == ["App"]
    assert forest.orphans() == []


def test_orphans_are_projects_never_attached():
    forest = build_forest_from_records(
        [_project("App", "G1"), _project("Lib", "G2")],
        [_folder("Src", "F1")],
        [_rel("G1", "F1")],
    )
    assert [p.name for p in forest.orphans()] == ["Lib"]


def test_relation_to_unknown_parent_is_ignored():
    forest = build_forest_from_records(
        [_project("App", "G1")],
        [_folder("Src", "F1")],
        [_rel("G1", "NOPE"), _rel("F1", "G1")],
    )
    assert forest.root_ids == {"F1"}
    assert forest.orphan_ids == {"G1"}


def test_nested_folders_and_roots():
    forest = build_forest_from_records(
        [_project("App", "G1")],
        [_folder("Src", "F1"), _folder("Core", "F2"), _folder("Tests", "F3")],
        [_rel("F2", "F1"), _rel("G1", "F2")],
    )

    assert [f.name for f in forest.roots()] == ["Src", "Tests"]
    src = forest.folders["F1"]
    assert [f.name for f in forest.child_folders(src)] == ["Core"]
    assert iter_descendant_folders(forest, "F1") == ["F2"]


def _snapshot(relations: List[NestingRelation]) -> Dict[str, object]:
    forest = build_forest_from_records(
        [_project("A", "P1"), _project("B", "P2"), _project("C", "P3")],
        [_folder("X", "F1"), _folder("Y", "F2"), _folder("Z", "F3")],
        relations,
    )
    return {
        "roots": forest.root_ids,
        "orphans": forest.orphan_ids,
        "children": {fid: (n.folder_ids, n.project_ids) for fid, n in forest.folders.items()},
    }


def test_relation_order_does_not_change_node_contents():
    relations = [_rel("P1", "F1"), _rel("P2", "F1"), _rel("F2", "F1"), _rel("P3", "F2")]
    expected = _snapshot(relations)

    for perm in itertools.permutations(relations):
        assert _snapshot(list(perm)) == expected


def test_every_folder_reachable_from_exactly_one_root():
    forest = build_forest_from_records(
        [],
        [_folder(n, f"F{i}") for i, n in enumerate("ABCDE")],
        [_rel("F1", "F0"), _rel("F2", "F1"), _rel("F4", "F3")],
    )

    reach = {fid: 0 for fid in forest.folders}
    for root in forest.root_ids:
        reach[root] += 1
        for fid in iter_descendant_folders(forest, root):
            reach[fid] += 1

    assert all(count == 1 for count in reach.values())
    assert not (forest.root_ids & {"F1", "F2", "F4"})


def test_cycle_is_broken_and_no_folder_is_lost():
    forest = build_forest_from_records(
        [],
        [_folder("A", "F1"), _folder("B", "F2")],
        [_rel("F1", "F2"), _rel("F2", "F1")],
    )

    assert forest.root_ids == {"F2"}
    assert forest.folders["F2"].folder_ids == {"F1"}
    assert forest.folders["F1"].folder_ids == set()


def test_self_nesting_is_rejected():
    forest = build_forest_from_records([], [_folder("A", "F1")], [_rel("F1", "F1")])
    assert forest.root_ids == {"F1"}


def test_second_parent_is_ignored():
    forest = build_forest_from_records(
        [_project("App", "G1")],
        [_folder("A", "F1"), _folder("B", "F2")],
        [_rel("G1", "F1"), _rel("G1", "F2")],
    )
    assert forest.folders["F1"].project_ids == {"G1"}
    assert forest.folders["F2"].project_ids == set()


def test_children_sorted_case_insensitively_at_read_time():
    forest = build_forest_from_records(
        [_project("beta", "P1"), _project("Alpha", "P2"), _project("gamma", "P3")],
        [_folder("Root", "F1")],
        [_rel("P1", "F1"), _rel("P2", "F1"), _rel("P3", "F1")],
    )
    assert [p.name for p in forest.child_projects(forest.folders["F1"])] == ["Alpha", "beta", "gamma"]
