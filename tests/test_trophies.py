import pytest

from keystone.services import trophies


@pytest.mark.parametrize(
    "percentage, tier",
    [
        (0, trophies.NONE),
        (59.99, trophies.NONE),
        (60, trophies.BRONZE),
        (74.9, trophies.BRONZE),
        (75, trophies.SILVER),
        (84.99, trophies.SILVER),
        (85, trophies.GOLD),
        (100, trophies.GOLD),
    ],
)
def test_tier_thresholds_are_inclusive(percentage, tier):
    assert trophies.get_trophy_tier(percentage) == tier


def test_tier_is_monotonic_in_percentage():
    ranks = [trophies.tier_rank(trophies.get_trophy_tier(p / 4)) for p in range(0, 401)]
    assert ranks == sorted(ranks)


def test_twenty_one_of_thirty_five_is_bronze():
    percentage = 100 * 21 / 35
    assert percentage == 60.0
    assert trophies.get_trophy_tier(percentage) == trophies.BRONZE


class TestNextTrophy:
    def test_next_is_smallest_threshold_above(self):
        nxt = trophies.get_next_trophy(60)
        assert nxt.tier == trophies.SILVER
        assert nxt.threshold == 75
        assert nxt.percentage_needed == 15

    def test_none_once_gold(self):
        assert trophies.get_next_trophy(85) is None

    def test_completions_needed_rounds_up(self):
        # bronze needs ceil(0.6 * 35) = 21
        gap = trophies.completions_needed_for_next_trophy(10, 35)
        assert gap.tier == trophies.BRONZE
        assert gap.completions_needed == 11

    def test_completions_needed_for_silver(self):
        # silver needs ceil(0.75 * 35) = 27
        gap = trophies.completions_needed_for_next_trophy(21, 35)
        assert gap.tier == trophies.SILVER
        assert gap.completions_needed == 6

    def test_empty_week_needs_zero_for_bronze(self):
        gap = trophies.completions_needed_for_next_trophy(0, 0)
        assert gap == trophies.TrophyGap(tier=trophies.BRONZE, completions_needed=0)

    def test_no_gap_at_gold(self):
        assert trophies.completions_needed_for_next_trophy(30, 35) is None


def test_trophy_info_carries_display_fields():
    info = trophies.trophy_info(80)
    assert info == {"tier": "silver", "name": "Silver", "color": "#C0C0C0", "threshold": 75}
