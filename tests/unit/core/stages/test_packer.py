from __future__ import annotations

"""
Unit tests for the Partition Packing Stage.

Verifies greedy first-fit-in-order behavior, the ceiling boundary,
oversized-unit dropping, order preservation and the disabled mode.
"""

import random
from typing import List

import pytest

from slnpack.core.pipeline.stages.packer import pack_units
from slnpack.domain.extraction_models import FileUnit


def _units(*weights: int) -> List[FileUnit]:
    return [FileUnit(path=f"/f{i:03d}.cs", content="", weight=w) for i, w in enumerate(weights)]


def _weights(result) -> List[List[int]]:
    return [[u.weight for u in p.units] for p in result.partitions]


def test_600_and_700_against_1000_make_two_partitions():
    result = pack_units(_units(600, 700), ceiling=1000)

    assert _weights(result) == [[600], [700]]
    assert [p.total_weight for p in result.partitions] == [600, 700]
    assert [p.index for p in result.partitions] == [1, 2]


def test_oversized_unit_is_dropped_and_reported():
    units = _units(100, 5000, 200)
    result = pack_units(units, ceiling=1000)

    assert result.dropped == [units[1]]
    assert _weights(result) == [[100, 200]]
    assert all(u.weight != 5000 for p in result.partitions for u in p.units)


def test_unit_equal_to_ceiling_is_packed_alone():
    result = pack_units(_units(300, 1000, 300), ceiling=1000)

    assert _weights(result) == [[300], [1000], [300]]
    assert result.dropped == []


def test_units_fill_until_ceiling_exactly():
    result = pack_units(_units(400, 600, 1), ceiling=1000)
    assert _weights(result) == [[400, 600], [1]]


def test_empty_input_yields_no_partitions():
    result = pack_units([], ceiling=10)
    assert result.partitions == []
    assert result.unit_count == 0


def test_disabled_packing_makes_one_unbounded_partition():
    result = pack_units(_units(5000, 7000), ceiling=10, enabled=False)

    assert _weights(result) == [[5000, 7000]]
    assert result.partitions[0].total_weight == 12000
    assert result.ceiling is None
    assert result.dropped == []


def test_invalid_ceiling_rejected_when_enabled():
    with pytest.raises(ValueError):
        pack_units(_units(1), ceiling=0)
    with pytest.raises(ValueError):
        pack_units(_units(1), ceiling=None)


@pytest.mark.parametrize("seed", range(20))
def test_order_preserved_and_ceiling_respected(seed: int):
    rng = random.Random(seed)
    ceiling = rng.randint(1, 500)
    units = _units(*[rng.randint(0, 700) for _ in range(rng.randint(0, 60))])

    result = pack_units(units, ceiling=ceiling)

    packed = [u for p in result.partitions for u in p.units]
    kept = [u for u in units if u.weight <= ceiling]
    assert packed == kept
    assert result.dropped == [u for u in units if u.weight > ceiling]
    assert all(0 < len(p.units) and p.total_weight <= ceiling for p in result.partitions)
    assert all(p.total_weight == sum(u.weight for u in p.units) for p in result.partitions)
