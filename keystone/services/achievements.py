"""Achievement catalog and unlock rules.

The catalog is a static table loaded once at import. Unlocking is
threshold-based (counters crossing a value) or pattern-based (trophy history
across recent weeks), and every grant is check-then-create so a code is
recorded at most once per user. Catalog rewards are informational only and are
not credited to ``UserStats.total_xp``.
"""

import logging
from dataclasses import dataclass
from datetime import date
from typing import Iterable, Iterator, Optional, Sequence

from sqlalchemy.orm import Session

from keystone import crud
from keystone.services import trophies

logger = logging.getLogger(__name__)

CATEGORIES = ("habits", "streaks", "completions", "trophies", "milestones", "special")

CONSISTENCY_WEEKS = 4


@dataclass(frozen=True)
class AchievementDefinition:
    code: str
    name: str
    description: str
    icon: str
    xp_reward: int
    category: str


ACHIEVEMENTS: tuple[AchievementDefinition, ...] = (
    AchievementDefinition("first_habit", "First Step", "Create your first habit", "footprints", 50, "habits"),
    AchievementDefinition("five_habits", "Building Momentum", "Create 5 habits", "layers", 100, "habits"),
    AchievementDefinition("ten_habits", "Habit Builder", "Create 10 habits", "construction", 200, "habits"),
    AchievementDefinition("streak_3", "Getting Started", "Reach a 3-day streak on any habit", "flame", 50, "streaks"),
    AchievementDefinition("streak_7", "One Week Strong", "Reach a 7-day streak on any habit", "zap", 100, "streaks"),
    AchievementDefinition("streak_14", "Two Week Warrior", "Reach a 14-day streak on any habit", "trophy", 200, "streaks"),
    AchievementDefinition("streak_30", "Monthly Master", "Reach a 30-day streak on any habit", "crown", 500, "streaks"),
    AchievementDefinition("streak_100", "Century Club", "Reach a 100-day streak on any habit", "star", 1000, "streaks"),
    AchievementDefinition("first_completion", "Day One", "Complete your first habit", "check", 25, "completions"),
    AchievementDefinition("completions_50", "Halfway There", "Complete 50 total habit completions", "target", 150, "completions"),
    AchievementDefinition("completions_100", "Century", "Complete 100 total habit completions", "medal", 300, "completions"),
    AchievementDefinition("completions_500", "Dedicated", "Complete 500 total habit completions", "award", 750, "completions"),
    AchievementDefinition("completions_1000", "Legendary", "Complete 1000 total habit completions", "gem", 1500, "completions"),
    AchievementDefinition(
        "first_bronze", "Bronze Beginner", "Earn your first bronze trophy (60%+ weekly completion)", "trophy", 50, "trophies"
    ),
    AchievementDefinition(
        "first_silver", "Silver Seeker", "Earn your first silver trophy (75%+ weekly completion)", "trophy", 100, "trophies"
    ),
    AchievementDefinition(
        "first_gold", "Gold Standard", "Earn your first gold trophy (85%+ weekly completion)", "trophy", 200, "trophies"
    ),
    AchievementDefinition("gold_5", "Golden Streak", "Earn 5 gold trophies", "medal", 500, "trophies"),
    AchievementDefinition("gold_10", "Gold Rush", "Earn 10 gold trophies", "crown", 1000, "trophies"),
    AchievementDefinition("total_trophies_10", "Trophy Collector", "Earn 10 total trophies (any tier)", "package", 150, "trophies"),
    AchievementDefinition("total_trophies_25", "Trophy Hunter", "Earn 25 total trophies (any tier)", "warehouse", 400, "trophies"),
    AchievementDefinition("weeks_4", "Monthly Tracker", "Track habits for 4 weeks", "calendar", 100, "milestones"),
    AchievementDefinition("weeks_12", "Quarterly Commitment", "Track habits for 12 weeks", "calendar-days", 300, "milestones"),
    AchievementDefinition("weeks_26", "Half Year Hero", "Track habits for 26 weeks", "calendar-range", 600, "milestones"),
    AchievementDefinition("weeks_52", "Year of Growth", "Track habits for 52 weeks", "calendar-heart", 1500, "milestones"),
    AchievementDefinition("level_5", "Rising Star", "Reach level 5", "trending-up", 100, "milestones"),
    AchievementDefinition("level_10", "Experienced", "Reach level 10", "award", 250, "milestones"),
    AchievementDefinition("level_25", "Veteran", "Reach level 25", "shield", 500, "milestones"),
    AchievementDefinition("level_50", "Elite", "Reach level 50", "sword", 1000, "milestones"),
    AchievementDefinition(
        "comeback_kid", "Comeback Kid", "Improve from no trophy to any trophy week over week", "trending-up", 75, "special"
    ),
    AchievementDefinition("consistency_king", "Consistency King", "Earn a trophy for 4 consecutive weeks", "crown", 300, "special"),
    AchievementDefinition("upgrade_week", "Level Up", "Upgrade your trophy tier from the previous week", "arrow-up", 100, "special"),
)

HABIT_COUNT_THRESHOLDS = ((1, "first_habit"), (5, "five_habits"), (10, "ten_habits"))
STREAK_THRESHOLDS = ((3, "streak_3"), (7, "streak_7"), (14, "streak_14"), (30, "streak_30"), (100, "streak_100"))
COMPLETION_THRESHOLDS = (
    (1, "first_completion"),
    (50, "completions_50"),
    (100, "completions_100"),
    (500, "completions_500"),
    (1000, "completions_1000"),
)
WEEK_THRESHOLDS = ((4, "weeks_4"), (12, "weeks_12"), (26, "weeks_26"), (52, "weeks_52"))
LEVEL_THRESHOLDS = ((5, "level_5"), (10, "level_10"), (25, "level_25"), (50, "level_50"))
GOLD_COUNT_THRESHOLDS = ((5, "gold_5"), (10, "gold_10"))
TROPHY_COUNT_THRESHOLDS = ((10, "total_trophies_10"), (25, "total_trophies_25"))


class AchievementCatalog:
    def __init__(self, definitions: Iterable[AchievementDefinition]) -> None:
        self._definitions = tuple(definitions)
        self._by_code = {item.code: item for item in self._definitions}
        if len(self._by_code) != len(self._definitions):
            raise ValueError("duplicate achievement code in catalog")

    def __iter__(self) -> Iterator[AchievementDefinition]:
        return iter(self._definitions)

    def __len__(self) -> int:
        return len(self._definitions)

    def __contains__(self, code: object) -> bool:
        return code in self._by_code

    def get(self, code: str) -> Optional[AchievementDefinition]:
        return self._by_code.get(code)


def is_consistent(percentages: Sequence[Optional[float]], weeks: int = CONSISTENCY_WEEKS) -> bool:
    """True when each of the ``weeks`` most recent weeks earned at least bronze."""
    recent = list(percentages[:weeks])
    if len(recent) < weeks:
        return False
    return all(p is not None and trophies.has_trophy(p) for p in recent)


def is_comeback(tiers: Sequence[str]) -> bool:
    if len(tiers) < 2:
        return False
    return tiers[0] != trophies.NONE and tiers[1] == trophies.NONE


def is_tier_upgrade(tiers: Sequence[str]) -> bool:
    if len(tiers) < 2:
        return False
    return trophies.tier_rank(tiers[0]) > trophies.tier_rank(tiers[1])


class AchievementEngine:
    def __init__(self, catalog: AchievementCatalog) -> None:
        self.catalog = catalog

    def grant(self, db: Session, user_id: int, code: str) -> bool:
        if code not in self.catalog:
            raise KeyError(f"unknown achievement code: {code}")
        if crud.find_achievement(db, user_id, code) is not None:
            return False
        crud.create_achievement(db, user_id, code)
        logger.info("Achievement unlocked user_id=%s code=%s", user_id, code)
        return True

    def _unlock(self, db: Session, user_id: int, code: str) -> bool:
        # Rules only fire for codes the injected catalog carries.
        return code in self.catalog and self.grant(db, user_id, code)

    def _grant_thresholds(self, db: Session, user_id: int, value: int, thresholds: Iterable[tuple[int, str]]) -> list[str]:
        return [code for minimum, code in thresholds if value >= minimum and self._unlock(db, user_id, code)]

    def check_habit_count(self, db: Session, user_id: int, habit_count: int) -> list[str]:
        return self._grant_thresholds(db, user_id, habit_count, HABIT_COUNT_THRESHOLDS)

    def check_streak(self, db: Session, user_id: int, streak: int) -> list[str]:
        return self._grant_thresholds(db, user_id, streak, STREAK_THRESHOLDS)

    def check_completions(self, db: Session, user_id: int, total_completions: int) -> list[str]:
        return self._grant_thresholds(db, user_id, total_completions, COMPLETION_THRESHOLDS)

    def check_level(self, db: Session, user_id: int, level: int) -> list[str]:
        return self._grant_thresholds(db, user_id, level, LEVEL_THRESHOLDS)

    def check_weeks_tracked(self, db: Session, user_id: int, weeks_completed: int) -> list[str]:
        return self._grant_thresholds(db, user_id, weeks_completed, WEEK_THRESHOLDS)

    def check_week_patterns(self, db: Session, user_id: int, before: date) -> list[str]:
        """Evaluate trophy patterns over the weeks that started before ``before``."""
        percentages = crud.week_percentages_before(db, user_id, before)
        tiers = [trophies.get_trophy_tier(p) if p is not None else trophies.NONE for p in percentages]

        unlocked: list[str] = []
        if is_consistent(percentages) and self._unlock(db, user_id, "consistency_king"):
            unlocked.append("consistency_king")
        if is_comeback(tiers) and self._unlock(db, user_id, "comeback_kid"):
            unlocked.append("comeback_kid")
        if is_tier_upgrade(tiers) and self._unlock(db, user_id, "upgrade_week"):
            unlocked.append("upgrade_week")

        best = max((trophies.tier_rank(t) for t in tiers), default=0)
        for tier, code in ((trophies.BRONZE, "first_bronze"), (trophies.SILVER, "first_silver"), (trophies.GOLD, "first_gold")):
            if best >= trophies.tier_rank(tier) and self._unlock(db, user_id, code):
                unlocked.append(code)

        gold_count = sum(1 for t in tiers if t == trophies.GOLD)
        trophy_count = sum(1 for t in tiers if t != trophies.NONE)
        unlocked += self._grant_thresholds(db, user_id, gold_count, GOLD_COUNT_THRESHOLDS)
        unlocked += self._grant_thresholds(db, user_id, trophy_count, TROPHY_COUNT_THRESHOLDS)
        return unlocked

    def overview(self, db: Session, user_id: int) -> dict:
        unlocked = {item.code: item.unlocked_at for item in crud.list_achievements(db, user_id)}
        items = [
            {
                "code": item.code,
                "name": item.name,
                "description": item.description,
                "icon": item.icon,
                "xp_reward": item.xp_reward,
                "category": item.category,
                "unlocked": item.code in unlocked,
                "unlocked_at": unlocked[item.code].isoformat() if item.code in unlocked else None,
            }
            for item in self.catalog
        ]
        total_unlocked = sum(1 for item in items if item["unlocked"])
        return {
            "achievements": items,
            "grouped": {category: [item for item in items if item["category"] == category] for category in CATEGORIES},
            "total_unlocked": total_unlocked,
            "total_achievements": len(self.catalog),
            "progress": total_unlocked / len(self.catalog) if len(self.catalog) else 0.0,
        }


catalog = AchievementCatalog(ACHIEVEMENTS)
default_engine = AchievementEngine(catalog)
