from __future__ import annotations

"""
Integration tests for the FileSystem Infrastructure.

Verifies manifest pre-flight checks, output naming, size formatting,
directory creation and codec resolution.
"""

import os
from pathlib import Path

import pytest

from slnpack.infra.fs import (
    check_manifest_path,
    format_file_size,
    normalize_path,
    part_file_path,
    resolve_encoding,
    safe_file_name,
    safe_mkdir,
    solution_name,
    to_host_separators,
)


def test_check_manifest_path(tmp_path: Path):
    sln = tmp_path / "App.SLN"
    sln.write_text("", encoding="utf-8")
    other = tmp_path / "App.txt"
    other.write_text("", encoding="utf-8")

    assert check_manifest_path(str(sln)) is None
    assert check_manifest_path(str(other)) == "The specified file is not a .sln file."
    assert "not found" in check_manifest_path(str(tmp_path / "missing.sln"))
    assert "not found" in check_manifest_path(str(tmp_path))


def test_normalize_path_uses_fallback_and_expands_user():
    assert normalize_path("", "/base") == os.path.abspath("/base")
    assert normalize_path("~", "/base") == os.path.abspath(os.path.expanduser("~"))


def test_solution_name_and_separators():
    assert solution_name("/x/My.App.sln") == "My.App"
    assert to_host_separators("Src\\App/App.csproj") == os.path.join("Src", "App", "App.csproj")


def test_part_file_path_numbering():
    base = os.path.join("out", "code.txt")
    assert part_file_path(base, 1, 1) == base
    assert part_file_path(base, 3, 12) == os.path.join("out", "code_part03.txt")


def test_safe_file_name():
    assert safe_file_name('My:Project/Name*?') == "My_Project_Name__"
    assert len(safe_file_name("x" * 300)) == 100


@pytest.mark.parametrize(
    "size, expected",
    [(0, "0 B"), (512, "512 B"), (1536, "1.5 KB"), (1024 * 1024, "1 MB"), (int(2.25 * 1024 ** 3), "2.25 GB")],
)
def test_format_file_size(size: int, expected: str):
    assert format_file_size(size) == expected


def test_safe_mkdir(tmp_path: Path):
    ok, err = safe_mkdir(str(tmp_path / "a" / "b"))
    assert ok is True and err is None

    blocker = tmp_path / "file"
    blocker.write_text("", encoding="utf-8")
    ok, err = safe_mkdir(str(blocker / "child"))
    assert ok is False
    assert err


def test_resolve_encoding():
    assert resolve_encoding("UTF8") == "utf-8"
    assert resolve_encoding("ascii") == "ascii"
    assert resolve_encoding("latin-1") == "iso8859-1"
    assert resolve_encoding("") == "utf-8"
    assert resolve_encoding("klingon-42") == "utf-8"
