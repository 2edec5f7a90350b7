from __future__ import annotations

"""
Resilient Content Collection Component.

Turns accepted file paths into weighted units. Binary files are tagged
without being opened, oversized files are excluded before reading, and read
failures become explicit `ReadFailure` values embedded in a placeholder unit
so that one unreadable file never stops the collection.
"""

import logging
import os
from typing import Callable, Optional, Union

from slnpack.core.pipeline.components.filters import is_binary_file
from slnpack.core.processing.tokenizer import estimate_tokens
from slnpack.domain.constants import (
    BINARY_PLACEHOLDER,
    READ_ERROR_PLACEHOLDER,
    SOURCE_ENCODING,
)
from slnpack.domain.extraction_models import (
    UNIT_BINARY,
    UNIT_ERROR,
    UNIT_TEXT,
    FileUnit,
    ReadFailure,
    UnitExclusion,
)
from slnpack.infra.fs import format_file_size

logger = logging.getLogger(__name__)

CollectionResult = Union[FileUnit, UnitExclusion]
WeightFunc = Callable[[str], int]

# -----------------------------------------------------------------------------
# READING OPERATIONS
# -----------------------------------------------------------------------------

def read_text_content(file_path: str) -> Union[str, ReadFailure]:
    """
    Read the full text of a source file as UTF-8.

    A byte order mark is stripped and undecodable byte sequences are
    replaced, so a file in another codec degrades to replacement characters
    instead of failing the run.

    Args:
        file_path: Absolute path to the target file.

    Returns:
        Union[str, ReadFailure]: The content, or the failure diagnostic.
    """
    try:
        with open(file_path, "r", encoding=SOURCE_ENCODING, errors="replace") as f:
            return f.read()
    except (OSError, UnicodeError) as e:
        return ReadFailure(path=file_path, reason=getattr(e, "strerror", None) or str(e))

# -----------------------------------------------------------------------------
# COLLECTION API
# -----------------------------------------------------------------------------

def collect_unit(
        file_path: str,
        max_unit_size_bytes: int,
        skip_binary: bool = True,
        weigh: Optional[WeightFunc] = None,
) -> CollectionResult:
    """
    Collect one accepted file.

    Args:
        file_path: Absolute path of the file.
        max_unit_size_bytes: Size ceiling checked before reading.
        skip_binary: Tag binary-classified files instead of reading them.
        weigh: Weight function, the heuristic estimate by default.

    Returns:
        CollectionResult: A `FileUnit`, or a `UnitExclusion` for oversized
        files.
    """
    weigh = weigh or estimate_tokens

    if skip_binary and is_binary_file(file_path):
        return FileUnit(
            path=file_path,
            content=BINARY_PLACEHOLDER,
            weight=weigh(BINARY_PLACEHOLDER),
            kind=UNIT_BINARY,
        )

    try:
        size = os.path.getsize(file_path)
    except OSError as e:
        return _error_unit(ReadFailure(path=file_path, reason=e.strerror or str(e)), weigh)

    if size > max_unit_size_bytes:
        logger.info(f"Skipping large file: {file_path} ({format_file_size(size)})")
        return UnitExclusion(path=file_path, reason="exceeds maximum file size", size_bytes=size)

    content = read_text_content(file_path)
    if isinstance(content, ReadFailure):
        return _error_unit(content, weigh)

    return FileUnit(path=file_path, content=content, weight=weigh(content), kind=UNIT_TEXT)


def _error_unit(failure: ReadFailure, weigh: WeightFunc) -> FileUnit:
    """Wrap a read failure into a placeholder unit."""
    logger.warning(f"Could not read file {failure.path}: {failure.reason}")
    placeholder = READ_ERROR_PLACEHOLDER.format(reason=failure.reason)
    return FileUnit(
        path=failure.path,
        content=placeholder,
        weight=weigh(placeholder),
        kind=UNIT_ERROR,
        failure=failure,
    )
