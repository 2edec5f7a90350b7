from __future__ import annotations

"""
Partition Packing Stage.

Greedily groups an ordered unit sequence into consecutive partitions whose
total weight stays within a ceiling. Units are never reordered, so each
partition covers a contiguous run of the path-sorted input. This is
first-fit-in-order packing, not optimal bin packing.
"""

import logging
from typing import Iterable, List, Optional

from slnpack.domain.extraction_models import FileUnit, PackingResult, Partition

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def pack_units(
        units: Iterable[FileUnit],
        ceiling: Optional[int],
        enabled: bool = True,
) -> PackingResult:
    """
    Pack units into ordered, weight-bounded partitions.

    A unit heavier than the ceiling can never fit and is dropped. A unit
    whose weight equals the ceiling is packed alone. With packing disabled
    the whole sequence forms one unbounded partition.

    Args:
        units: Units in their final (path) order.
        ceiling: Maximum total weight per partition.
        enabled: Whether partitioning is active.

    Returns:
        PackingResult: Partitions, dropped units and the effective ceiling.

    Raises:
        ValueError: If packing is enabled without a positive ceiling.
    """
    ordered = list(units)

    if not enabled:
        if not ordered:
            return PackingResult()
        total = sum(u.weight for u in ordered)
        return PackingResult(partitions=[Partition(index=1, units=tuple(ordered), total_weight=total)])

    if ceiling is None or ceiling < 1:
        raise ValueError(f"Invalid partition ceiling: {ceiling!r}")

    logger.info(f"Splitting {len(ordered)} files with max {ceiling:,} tokens per part:")

    partitions: List[Partition] = []
    dropped: List[FileUnit] = []
    current: List[FileUnit] = []
    current_weight = 0

    for unit in ordered:
        if unit.weight > ceiling:
            logger.warning(f"  Skipping oversized file: {unit.path} ({unit.weight:,} tokens)")
            dropped.append(unit)
            continue

        if current and current_weight + unit.weight > ceiling:
            partitions.append(_close(current, current_weight, len(partitions) + 1))
            current = []
            current_weight = 0

        current.append(unit)
        current_weight += unit.weight

    if current:
        partitions.append(_close(current, current_weight, len(partitions) + 1))

    return PackingResult(partitions=partitions, dropped=dropped, ceiling=ceiling)

# -----------------------------------------------------------------------------
# INTERNAL HELPERS
# -----------------------------------------------------------------------------

def _close(units: List[FileUnit], weight: int, index: int) -> Partition:
    logger.info(f"  Part {index}: {len(units)} files, {weight:,} tokens")
    return Partition(index=index, units=tuple(units), total_weight=weight)
