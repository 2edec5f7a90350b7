from __future__ import annotations

"""
Extraction Output Formatting and Persistence.

Serializes packed partitions into text artifacts. Each artifact starts with
a header block (title, optional timestamp, file count and, when packing is
active, the ceiling) followed by one block per unit: the path, an underline
of the same length, then the content or its placeholder.
"""

import logging
from datetime import datetime
from typing import Iterable, List, Optional, Sequence

from slnpack.domain.constants import EXTRACTION_TITLE, HEADER_RULE_WIDTH
from slnpack.domain.extraction_models import FileUnit, PackingResult, Partition
from slnpack.infra.fs import part_file_path

logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

# -----------------------------------------------------------------------------
# FORMATTING
# -----------------------------------------------------------------------------

def generation_timestamp(now: Optional[datetime] = None) -> str:
    """Format the 'Generated on' value."""
    return (now or datetime.now()).strftime(TIMESTAMP_FORMAT)


def part_title(title: str, part_number: int, total_parts: int) -> str:
    """Append ' - Part i of n' when there is more than one partition."""
    if total_parts > 1:
        return f"{title} - Part {part_number} of {total_parts}"
    return title


def format_header(
        title: str,
        file_count: Optional[int] = None,
        ceiling: Optional[int] = None,
        generated_on: Optional[str] = None,
        extra_lines: Sequence[str] = (),
) -> str:
    """
    Build the header block of an output artifact.

    Args:
        title: First header line.
        file_count: Units in this artifact; omitted when None.
        ceiling: Partition ceiling; omitted when packing is disabled.
        generated_on: Timestamp text; omitted when None.
        extra_lines: Lines inserted right after the title.

    Returns:
        str: The header, rule included, ending with a blank line.
    """
    lines: List[str] = [title, *extra_lines]
    if generated_on:
        lines.append(f"# Generated on: {generated_on}")
    if file_count is not None:
        lines.append(f"# Files in this part: {file_count}")
    if ceiling is not None:
        lines.append(f"# Max tokens per file: {ceiling:,}")
    lines.extend(["", "=" * HEADER_RULE_WIDTH, ""])
    return "\n".join(lines) + "\n"


def format_unit_block(unit: FileUnit) -> str:
    """Render one unit: path, underline, blank line, content, two blank lines."""
    return f"{unit.path}\n{'-' * len(unit.path)}\n\n{unit.content}\n\n\n"

# -----------------------------------------------------------------------------
# PERSISTENCE
# -----------------------------------------------------------------------------

def write_artifact(output_path: str, header: str, units: Iterable[FileUnit], encoding: str) -> int:
    """
    Create or overwrite one artifact.

    Args:
        output_path: Target file.
        header: Pre-formatted header block.
        units: Units to serialize in order.
        encoding: Output codec.

    Returns:
        int: Number of unit blocks written.

    Raises:
        OSError: If the file cannot be written.
    """
    count = 0
    with open(output_path, "w", encoding=encoding, errors="replace") as out:
        out.write(header)
        for unit in units:
            out.write(format_unit_block(unit))
            count += 1
    return count


def write_partitions(
        base_path: str,
        packing: PackingResult,
        encoding: str,
        title: str = EXTRACTION_TITLE,
        extra_lines: Sequence[str] = (),
        include_timestamp: bool = True,
) -> List[str]:
    """
    Write every partition of a packing result.

    One partition is written to `base_path`; several use the `_partNN`
    naming convention next to it.

    Args:
        base_path: Requested output path.
        packing: Packer output.
        encoding: Output codec.
        title: Header title before the part suffix.
        extra_lines: Additional header lines (e.g. project path).
        include_timestamp: Emit the 'Generated on' line.

    Returns:
        List[str]: Paths written, in partition order.

    Raises:
        OSError: If an artifact cannot be written.
    """
    total = len(packing.partitions)
    generated_on = generation_timestamp() if include_timestamp else None
    written: List[str] = []

    for partition in packing.partitions:
        path = part_file_path(base_path, partition.index, total)
        header = format_header(
            part_title(title, partition.index, total),
            file_count=partition.file_count,
            ceiling=packing.ceiling,
            generated_on=generated_on,
            extra_lines=extra_lines,
        )
        write_artifact(path, header, partition.units, encoding)
        logger.info(f"Extracted {partition.file_count} files to: {path}")
        written.append(path)

    return written


def partition_weights(partitions: Iterable[Partition]) -> List[int]:
    """Total weight of each partition, in order."""
    return [p.total_weight for p in partitions]
