from dataclasses import dataclass
from typing import Any, Optional

NONE = "none"
BRONZE = "bronze"
SILVER = "silver"
GOLD = "gold"

TIER_ORDER = [NONE, BRONZE, SILVER, GOLD]

TROPHY_THRESHOLDS = {
    BRONZE: 60,
    SILVER: 75,
    GOLD: 85,
}

TROPHY_COLORS = {
    NONE: "#4A4A58",
    BRONZE: "#CD7F32",
    SILVER: "#C0C0C0",
    GOLD: "#FFD700",
}

TROPHY_NAMES = {
    NONE: "No Trophy",
    BRONZE: "Bronze",
    SILVER: "Silver",
    GOLD: "Gold",
}


@dataclass(frozen=True)
class NextTrophy:
    tier: str
    threshold: int
    percentage_needed: float


@dataclass(frozen=True)
class TrophyGap:
    tier: str
    completions_needed: int


def get_trophy_tier(percentage: float) -> str:
    if percentage >= TROPHY_THRESHOLDS[GOLD]:
        return GOLD
    if percentage >= TROPHY_THRESHOLDS[SILVER]:
        return SILVER
    if percentage >= TROPHY_THRESHOLDS[BRONZE]:
        return BRONZE
    return NONE


def tier_rank(tier: str) -> int:
    return TIER_ORDER.index(tier)


def has_trophy(percentage: float) -> bool:
    return get_trophy_tier(percentage) != NONE


def get_next_trophy(percentage: float) -> Optional[NextTrophy]:
    for tier in (BRONZE, SILVER, GOLD):
        threshold = TROPHY_THRESHOLDS[tier]
        if threshold > percentage:
            return NextTrophy(tier=tier, threshold=threshold, percentage_needed=threshold - percentage)
    return None


def completions_needed_for_next_trophy(current_completions: int, possible_completions: int) -> Optional[TrophyGap]:
    percentage = 100 * current_completions / possible_completions if possible_completions > 0 else 0.0
    next_trophy = get_next_trophy(percentage)
    if next_trophy is None:
        return None

    # integer ceil(threshold / 100 * possible)
    required = -(-next_trophy.threshold * possible_completions // 100)
    return TrophyGap(tier=next_trophy.tier, completions_needed=max(0, required - current_completions))


def trophy_info_for_tier(tier: str) -> dict[str, Any]:
    return {
        "tier": tier,
        "name": TROPHY_NAMES[tier],
        "color": TROPHY_COLORS[tier],
        "threshold": TROPHY_THRESHOLDS.get(tier, 0),
    }


def trophy_info(percentage: float) -> dict[str, Any]:
    return trophy_info_for_tier(get_trophy_tier(percentage))
