from __future__ import annotations

"""
Unit tests for the Content Collector.

Verifies that binary files are tagged without being opened, oversized files
are excluded, and read failures become placeholder units carrying their
diagnostic instead of aborting collection.
"""

from pathlib import Path
from unittest.mock import patch

from slnpack.core.pipeline.components.reader import collect_unit, read_text_content
from slnpack.domain.constants import BINARY_PLACEHOLDER
from slnpack.domain.extraction_models import (
    UNIT_BINARY,
    UNIT_ERROR,
    UNIT_TEXT,
    FileUnit,
    ReadFailure,
    UnitExclusion,
)


def test_text_file_is_read_and_weighed(tmp_path: Path):
    f = tmp_path / "a.cs"
    f.write_text("one two three", encoding="utf-8")

    unit = collect_unit(str(f), max_unit_size_bytes=1024)

    assert isinstance(unit, FileUnit)
    assert unit.kind == UNIT_TEXT
    assert unit.content == "one two three"
    assert unit.weight == 3
    assert unit.extractable is True


def test_binary_file_not_opened(tmp_path: Path):
    f = tmp_path / "app.dll"
    f.write_bytes(b"\x00\x01")

    with patch("builtins.open") as mocked_open:
        unit = collect_unit(str(f), max_unit_size_bytes=1)

    mocked_open.assert_not_called()
    assert isinstance(unit, FileUnit)
    assert unit.kind == UNIT_BINARY
    assert unit.content == BINARY_PLACEHOLDER
    assert unit.extractable is False


def test_binary_file_read_when_skip_disabled(tmp_path: Path):
    f = tmp_path / "data.bin"
    f.write_text("plain", encoding="utf-8")

    unit = collect_unit(str(f), max_unit_size_bytes=1024, skip_binary=False)
    assert isinstance(unit, FileUnit)
    assert unit.content == "plain"


def test_oversized_file_is_excluded(tmp_path: Path):
    f = tmp_path / "big.cs"
    f.write_text("x" * 100, encoding="utf-8")

    result = collect_unit(str(f), max_unit_size_bytes=10)

    assert isinstance(result, UnitExclusion)
    assert result.size_bytes == 100


def test_read_failure_becomes_error_unit(tmp_path: Path):
    f = tmp_path / "locked.cs"
    f.write_text("secret", encoding="utf-8")

    with patch("builtins.open", side_effect=PermissionError(13, "Permission denied")):
        unit = collect_unit(str(f), max_unit_size_bytes=1024)

    assert isinstance(unit, FileUnit)
    assert unit.kind == UNIT_ERROR
    assert unit.content == "# [Error reading file: Permission denied]"
    assert unit.failure == ReadFailure(path=str(f), reason="Permission denied")


def test_undecodable_bytes_are_replaced(tmp_path: Path):
    f = tmp_path / "latin.cs"
    f.write_bytes(b"caf\xe9")

    content = read_text_content(str(f))
    assert isinstance(content, str)
    assert content.startswith("caf")


def test_custom_weight_function_is_used(tmp_path: Path):
    f = tmp_path / "a.cs"
    f.write_text("abc", encoding="utf-8")

    unit = collect_unit(str(f), max_unit_size_bytes=1024, weigh=lambda text: 42)
    assert isinstance(unit, FileUnit)
    assert unit.weight == 42


def test_utf8_bom_is_stripped(tmp_path: Path):
    f = tmp_path / "bom.cs"
    f.write_bytes(b"\xef\xbb\xbfclass A {}")

    assert read_text_content(str(f)) == "class A {}"


def test_decode_failure_becomes_error_unit(tmp_path: Path):
    f = tmp_path / "odd.cs"
    f.write_text("x", encoding="utf-8")
    error = UnicodeDecodeError("utf-8", b"\xff", 0, 1, "invalid start byte")

    with patch("builtins.open", side_effect=error):
        unit = collect_unit(str(f), max_unit_size_bytes=1024)

    assert isinstance(unit, FileUnit)
    assert unit.kind == UNIT_ERROR
    assert unit.failure is not None
    assert "invalid start byte" in unit.failure.reason
