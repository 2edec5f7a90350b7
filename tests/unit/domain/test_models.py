from __future__ import annotations

"""
Unit tests for the Domain Models.

Verifies immutability, derived properties and result factories.
"""

import dataclasses

import pytest

from slnpack.domain.extraction_models import (
    UNIT_BINARY,
    FileUnit,
    PackingResult,
    Partition,
)
from slnpack.domain.pipeline_models import create_error_result, create_success_result
from slnpack.domain.solution_models import DeclarationRecord, FolderNode, sort_by_name


def test_file_unit_is_immutable():
    unit = FileUnit(path="/a.cs", content="x", weight=1)
    with pytest.raises(dataclasses.FrozenInstanceError):
        unit.weight = 2  # type: ignore[misc]


def test_binary_unit_is_not_extractable():
    assert FileUnit(path="/a.png", content="", weight=0, kind=UNIT_BINARY).extractable is False


def test_partition_and_packing_counts():
    units = (FileUnit("/a", "", 1), FileUnit("/b", "", 2))
    partition = Partition(index=1, units=units, total_weight=3)
    result = PackingResult(partitions=[partition, Partition(2, (FileUnit("/c", "", 1),), 1)])

    assert partition.file_count == 2
    assert result.unit_count == 3


def test_logical_folder_detection_is_textual():
    assert DeclarationRecord("T", "Src", "Src", "1").is_logical_folder is True
    assert DeclarationRecord("T", "Src", "src", "1").is_logical_folder is False


def test_sort_by_name_is_case_insensitive_and_stable():
    nodes = [FolderNode("b", "2"), FolderNode("A", "3"), FolderNode("a", "1")]
    assert [(n.name, n.id) for n in sort_by_name(nodes)] == [("A", "3"), ("a", "1"), ("b", "2")]


def test_result_factories():
    err = create_error_result("boom", "tree", "/x.sln")
    assert err.ok is False
    assert err.error == "boom"
    assert err.tree_lines == []

    ok = create_success_result("extract", "/x.sln", 2, output_files=["/o.txt"], file_count=5)
    assert ok.ok is True
    assert ok.output_files == ["/o.txt"]
    assert ok.summary == {}
