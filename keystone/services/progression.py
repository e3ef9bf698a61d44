import math
from typing import Any, Dict

from keystone.models.enums import RankTier

RANK_LEVELS = [
    (100, RankTier.GRANDMASTER),
    (75, RankTier.MASTER),
    (50, RankTier.DIAMOND),
    (35, RankTier.PLATINUM),
    (20, RankTier.GOLD),
    (10, RankTier.SILVER),
]

RANK_INFO: Dict[str, Dict[str, Any]] = {
    RankTier.BRONZE.value: {"name": "Bronze", "color": "#CD7F32", "min_level": 1},
    RankTier.SILVER.value: {"name": "Silver", "color": "#C0C0C0", "min_level": 10},
    RankTier.GOLD.value: {"name": "Gold", "color": "#FFD700", "min_level": 20},
    RankTier.PLATINUM.value: {"name": "Platinum", "color": "#E5E4E2", "min_level": 35},
    RankTier.DIAMOND.value: {"name": "Diamond", "color": "#B9F2FF", "min_level": 50},
    RankTier.MASTER.value: {"name": "Master", "color": "#FF6B6B", "min_level": 75},
    RankTier.GRANDMASTER.value: {"name": "Grandmaster", "color": "#9B59B6", "min_level": 100},
}


def xp_for_level(level: int) -> int:
    """XP needed to clear ``level`` and reach the next one."""
    return math.floor(100 * level**1.5)


def total_xp_for_level(level: int) -> int:
    return sum(xp_for_level(i) for i in range(1, level))


def level_from_xp(total_xp: int) -> int:
    level = 1
    spent = xp_for_level(level)
    while spent <= total_xp:
        level += 1
        spent += xp_for_level(level)
    return level


def level_progress(total_xp: int) -> float:
    level = level_from_xp(total_xp)
    into_level = total_xp - total_xp_for_level(level)
    return max(0.0, min(1.0, into_level / xp_for_level(level)))


def rank_from_level(level: int) -> str:
    for min_level, rank in RANK_LEVELS:
        if level >= min_level:
            return rank.value
    return RankTier.BRONZE.value


def progression_for_xp(total_xp: int) -> Dict[str, Any]:
    level = level_from_xp(total_xp)
    rank = rank_from_level(level)
    return {
        "level": level,
        "rank": rank,
        "rank_info": RANK_INFO[rank],
        "progress": level_progress(total_xp),
        "xp_for_next_level": xp_for_level(level),
        "xp_into_level": total_xp - total_xp_for_level(level),
    }
