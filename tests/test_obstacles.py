import random
from collections import Counter

import pytest

from roomhub.services.obstacles import partition_obstacles

CATALOG = ["laser", "spikes", "pendulum", "trapdoor", "fire", "ice", "wall"]


def test_no_guides_no_slices():
    assert partition_obstacles(0, CATALOG) == []


def test_single_guide_gets_whole_catalog():
    (only,) = partition_obstacles(1, CATALOG, random.Random(3))
    assert sorted(only) == sorted(CATALOG)


@pytest.mark.parametrize("guides", [2, 3, 4, 6, 7, 9])
def test_partition_covers_catalog_fairly(guides):
    rng = random.Random(guides)
    slices = partition_obstacles(guides, CATALOG, rng)

    assert len(slices) == guides
    flat = [kind for share in slices for kind in share]
    assert Counter(flat) == Counter(CATALOG)
    sizes = [len(share) for share in slices]
    assert max(sizes) - min(sizes) <= 1
    # les plus grosses parts vont aux premiers arrivés
    assert sizes == sorted(sizes, reverse=True)


def test_two_guides_split_three_four():
    slices = partition_obstacles(2, CATALOG, random.Random(0))
    assert [len(s) for s in slices] == [4, 3]
    assert not set(slices[0]) & set(slices[1])


def test_catalog_is_not_mutated():
    catalog = list(CATALOG)
    partition_obstacles(3, catalog, random.Random(1))
    assert catalog == CATALOG


def test_seeded_rng_is_reproducible():
    first = partition_obstacles(3, CATALOG, random.Random(42))
    second = partition_obstacles(3, CATALOG, random.Random(42))
    assert first == second
