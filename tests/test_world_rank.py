import pytest

from population import MILESTONES, WORLD_POPULATION
from tiers import TIERS, validate_tiers, current_tier, next_tier
from world_rank import (
    rank_from_tgi, rank_from_total_tgi, overtaken_count,
    crossed_milestones, next_milestone, people_to_overtake,
)


# ---------- tier interpolation ----------
def test_zero_tgi_is_the_whole_world() -> None:
    assert rank_from_tgi(0) == 8_232_000_000


def test_midpoint_of_first_bracket() -> None:
    assert rank_from_tgi(50) == 5_716_000_000


def test_tier_threshold_returns_reference_rank() -> None:
    assert rank_from_tgi(100) == 3_200_000_000
    assert rank_from_tgi(3000) == 82_000_000


@pytest.mark.parametrize("tgi", [10_000, 25_000, 1e9])
def test_saturates_at_last_tier(tgi) -> None:
    assert rank_from_tgi(tgi) == 8_000


def test_below_first_threshold_uses_first_tier() -> None:
    assert rank_from_tgi(-5) == TIERS[0]["rank"]


def test_rank_never_increases_with_tgi() -> None:
    ranks = [rank_from_tgi(t) for t in range(0, 12_000, 7)]
    assert all(a >= b for a, b in zip(ranks, ranks[1:]))
    assert min(ranks) >= 1


def test_custom_table_floors_at_one() -> None:
    table = [
        {"name": "a", "min_tgi": 0, "rank": 10},
        {"name": "b", "min_tgi": 10, "rank": 1},
    ]
    assert rank_from_tgi(9.99, table) == 1
    assert rank_from_tgi(5, table) == 5


def test_malformed_table_is_rejected() -> None:
    with pytest.raises(AssertionError):
        validate_tiers([
            {"name": "a", "min_tgi": 0, "rank": 100},
            {"name": "b", "min_tgi": 0, "rank": 50},
        ])
    with pytest.raises(AssertionError):
        validate_tiers([
            {"name": "a", "min_tgi": 0, "rank": 100},
            {"name": "b", "min_tgi": 10, "rank": 100},
        ])


def test_current_and_next_tier() -> None:
    assert current_tier(0)["name"] == "Blunt"
    assert current_tier(999)["name"] == "Sharp"
    assert current_tier(10_000)["name"] == "Divine"
    assert next_tier(999)["name"] == "Master"
    assert next_tier(10_000) is None


# ---------- grinding rank ----------
def test_no_grind_is_the_whole_world() -> None:
    assert rank_from_total_tgi(0) == WORLD_POPULATION


def test_ten_thousand_tgi_lands_in_the_thousands() -> None:
    assert 1_000 < rank_from_total_tgi(10_000) < 10_000


def test_grind_rank_strictly_decreasing() -> None:
    ranks = [rank_from_total_tgi(t) for t in range(0, 12_000, 100)]
    assert all(a > b for a, b in zip(ranks, ranks[1:]))


def test_grind_rank_never_below_one() -> None:
    assert rank_from_total_tgi(1e7) == 1


def test_overtaken_never_negative() -> None:
    assert overtaken_count(1_000, 400) == 600
    assert overtaken_count(400, 401) == 0


# ---------- milestones ----------
def test_crossing_between_ten_and_five_million() -> None:
    crossed = crossed_milestones(10_000_000, 5_000_000)
    expected = sorted(
        (m for m in MILESTONES if 5_000_000 <= m["population"] < 10_000_000),
        key=lambda m: m["population"], reverse=True,
    )
    assert crossed == expected
    assert [m["name"] for m in crossed] == ["Singapore"]


def test_crossing_is_sorted_largest_first() -> None:
    names = [m["name"] for m in crossed_milestones(WORLD_POPULATION, 100_000_000)]
    assert names == [
        "India", "China", "United States", "Indonesia", "Brazil", "Russia", "Japan",
    ]


def test_crossing_boundaries() -> None:
    # already at Japan's size: nothing new
    assert crossed_milestones(124_000_000, 124_000_000) == []
    # landing exactly on it counts once
    assert [m["name"] for m in crossed_milestones(124_000_001, 124_000_000)] == ["Japan"]
    # next session starting there does not report it again
    assert [m["name"] for m in crossed_milestones(124_000_000, 100_000_000)] == []


def test_next_milestone() -> None:
    assert next_milestone(WORLD_POPULATION)["name"] == "India"
    assert next_milestone(1_400_000_000)["name"] == "United States"
    assert next_milestone(800)["name"] == "Vatican City"
    assert next_milestone(5)["name"] == "Vatican City"


def test_people_to_overtake() -> None:
    target = next_milestone(130_000_000)
    assert target["name"] == "Japan"
    assert people_to_overtake(130_000_000, target) == 6_000_000
    assert people_to_overtake(5, next_milestone(5)) == 0
