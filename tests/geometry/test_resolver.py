import pytest

from circuit_weave.core.errors import SiteRangeError
from circuit_weave.geometry import (
    AdjacentPair,
    AllSites,
    Bricklayer,
    SingleSite,
    StaircaseLeft,
    StaircaseRight,
    check_sites,
    resolve,
)


def test_static_ignores_step_index():
    for step in (1, 2, 17):
        assert resolve(SingleSite(2), step, 4, "open") == [(2,)]
        assert resolve(AdjacentPair(4), step, 4, "periodic") == [(4, 1)]


def test_compound_returns_every_group_in_order():
    assert resolve(Bricklayer("even"), 1, 6, "periodic") == [(2, 3), (4, 5), (6, 1)]
    assert resolve(AllSites(), 3, 3, "open") == [(1,), (2,), (3,)]


def test_staircase_advances_once_per_call():
    stair = StaircaseRight(3)
    assert resolve(stair, 1, 4, "periodic") == [(3, 4)]
    assert stair.position == 4
    assert resolve(stair, 2, 4, "periodic") == [(4, 1)]
    assert stair.position == 1


def test_positions_table_leaves_staircase_untouched():
    stair = StaircaseLeft(2)
    positions = {}
    assert resolve(stair, 1, 4, "periodic", positions) == [(2, 3)]
    assert resolve(stair, 2, 4, "periodic", positions) == [(1, 2)]
    assert resolve(stair, 3, 4, "periodic", positions) == [(4, 1)]
    assert positions[stair] == 3
    assert stair.position == 2


def test_positions_table_starts_from_current_position():
    stair = StaircaseRight(1)
    resolve(stair, 1, 4, "periodic")
    positions = {}
    assert resolve(stair, 1, 4, "periodic", positions) == [(2, 3)]


def test_out_of_range_sites():
    with pytest.raises(SiteRangeError):
        resolve(SingleSite(5), 1, 4, "open")
    with pytest.raises(SiteRangeError):
        resolve(AdjacentPair(4), 1, 4, "open")
    with pytest.raises(SiteRangeError):
        resolve(SingleSite(0), 1, 4, "periodic")


def test_out_of_range_staircase_does_not_advance():
    stair = StaircaseRight(7)
    with pytest.raises(SiteRangeError):
        resolve(stair, 1, 4, "periodic")
    assert stair.position == 7


def test_check_sites_passes_through():
    groups = [(1, 2), (3,)]
    assert check_sites(groups, 3) is groups
