from __future__ import annotations

"""
Extraction Domain Data Models.

Defines the units produced by content collection, the explicit failure and
exclusion values that replace swallowed exceptions, and the partitions
produced by the packer.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

UNIT_TEXT = "text"
UNIT_BINARY = "binary"
UNIT_ERROR = "error"

# -----------------------------------------------------------------------------
# COLLECTION RESULTS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class ReadFailure:
    """
    Diagnostic of a file whose content could not be read.

    Attributes:
        path: Absolute path of the file.
        reason: Human-readable failure reason.
    """
    path: str
    reason: str


@dataclass(frozen=True)
class FileUnit:
    """
    One collected file plus its packing weight.

    Attributes:
        path: Absolute path of the file.
        content: Text content, or the binary/error placeholder.
        weight: Token estimate of `content`.
        kind: One of 'text', 'binary', 'error'.
        failure: Read diagnostic when `kind` is 'error'.
    """
    path: str
    content: str
    weight: int
    kind: str = UNIT_TEXT
    failure: Optional[ReadFailure] = None

    @property
    def extractable(self) -> bool:
        return self.kind == UNIT_TEXT


@dataclass(frozen=True)
class UnitExclusion:
    """
    A file left out of collection by policy (not an error).

    Attributes:
        path: Absolute path of the file.
        reason: Why it was excluded.
        size_bytes: On-disk size when known.
    """
    path: str
    reason: str
    size_bytes: int = 0

# -----------------------------------------------------------------------------
# PACKING RESULTS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class Partition:
    """
    A closed, weight-bounded group of consecutive units.

    Attributes:
        index: 1-based position among sibling partitions.
        units: Member units in path order.
        total_weight: Sum of member weights.
    """
    index: int
    units: Tuple[FileUnit, ...]
    total_weight: int

    @property
    def file_count(self) -> int:
        return len(self.units)


@dataclass(frozen=True)
class PackingResult:
    """
    Output of a packing run.

    Attributes:
        partitions: Closed partitions in order.
        dropped: Units heavier than the ceiling, in input order.
        ceiling: Effective ceiling, None when partitioning is disabled.
    """
    partitions: List[Partition] = field(default_factory=list)
    dropped: List[FileUnit] = field(default_factory=list)
    ceiling: Optional[int] = None

    @property
    def unit_count(self) -> int:
        return sum(p.file_count for p in self.partitions)
