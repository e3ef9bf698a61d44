import pytest

from keystone.services import progression


def test_cost_curve():
    assert progression.xp_for_level(1) == 100
    assert progression.xp_for_level(2) == 282
    assert progression.xp_for_level(3) == 519
    assert progression.xp_for_level(4) == 800


@pytest.mark.parametrize(
    "xp, level",
    [(0, 1), (99, 1), (100, 2), (381, 2), (382, 3), (900, 3), (901, 4)],
)
def test_level_from_xp(xp, level):
    assert progression.level_from_xp(xp) == level


def test_total_xp_for_level():
    assert progression.total_xp_for_level(1) == 0
    assert progression.total_xp_for_level(2) == 100
    assert progression.total_xp_for_level(3) == 382


def test_level_is_monotonic_and_affordable():
    previous = 1
    for xp in range(0, 20000, 37):
        level = progression.level_from_xp(xp)
        assert level >= previous
        assert progression.total_xp_for_level(level) <= xp
        assert progression.total_xp_for_level(level + 1) > xp
        previous = level


def test_progress_is_fraction_of_current_level():
    assert progression.level_progress(0) == 0.0
    assert progression.level_progress(50) == 0.5
    assert progression.level_progress(100) == 0.0
    assert progression.level_progress(-10) == 0.0


@pytest.mark.parametrize(
    "level, rank",
    [
        (1, "BRONZE"),
        (9, "BRONZE"),
        (10, "SILVER"),
        (20, "GOLD"),
        (35, "PLATINUM"),
        (50, "DIAMOND"),
        (75, "MASTER"),
        (100, "GRANDMASTER"),
        (140, "GRANDMASTER"),
    ],
)
def test_rank_from_level(level, rank):
    assert progression.rank_from_level(level) == rank


def test_progression_for_xp_bundle():
    result = progression.progression_for_xp(150)
    assert result["level"] == 2
    assert result["rank"] == "BRONZE"
    assert result["rank_info"]["color"] == "#CD7F32"
    assert result["xp_for_next_level"] == 282
    assert result["xp_into_level"] == 50
