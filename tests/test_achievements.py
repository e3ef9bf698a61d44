
import pytest
from sqlalchemy import func, select

from keystone import crud
from keystone.models import UserAchievement
from keystone.services import achievements, completions, week_engine
from keystone.services.achievements import AchievementCatalog, AchievementDefinition, AchievementEngine


def _codes(db, user_id):
    return {item.code for item in crud.list_achievements(db, user_id)}


def _fill_week(db, user, habit, week, days, now):
    for day in range(days):
        completions.toggle_completion(db, user, habit.id, day, week_id=week.id, now=now)


class TestCatalog:
    def test_codes_are_unique_and_categorised(self):
        codes = [item.code for item in achievements.catalog]
        assert len(codes) == len(set(codes)) == 31
        assert {item.category for item in achievements.catalog} == set(achievements.CATEGORIES)

    def test_duplicate_codes_rejected(self):
        item = AchievementDefinition("x", "X", "x", "star", 1, "special")
        with pytest.raises(ValueError):
            AchievementCatalog([item, item])

    def test_unknown_code_cannot_be_granted(self, db, user):
        with pytest.raises(KeyError):
            achievements.default_engine.grant(db, user.id, "not_a_code")

    def test_injected_catalog(self, db, user):
        engine = AchievementEngine(AchievementCatalog([achievements.catalog.get("first_habit")]))
        assert engine.check_habit_count(db, user.id, 5) == ["first_habit"]


class TestThresholds:
    def test_grant_is_idempotent(self, db, user):
        engine = achievements.default_engine
        assert engine.grant(db, user.id, "streak_3") is True
        assert engine.grant(db, user.id, "streak_3") is False
        count = db.scalar(select(func.count()).select_from(UserAchievement).where(UserAchievement.user_id == user.id))
        assert count == 1

    def test_habit_count(self, db, user, habit_factory):
        for i in range(5):
            habit_factory(user, name=f"Habit {i}")
        assert {"first_habit", "five_habits"} <= _codes(db, user.id)
        assert "ten_habits" not in _codes(db, user.id)

    def test_streak_and_completion(self, db, user, habit_factory, now):
        habit = habit_factory(user)
        for day in (1, 2, 3):
            completions.toggle_completion(db, user, habit.id, day, now=now)
        assert {"first_completion", "streak_3"} <= _codes(db, user.id)
        assert "streak_7" not in _codes(db, user.id)

    def test_level(self, db, user):
        engine = achievements.default_engine
        assert engine.check_level(db, user.id, 12) == ["level_5", "level_10"]

    def test_weeks_tracked(self, db, user, habit_factory, now):
        habit_factory(user)
        for weeks_ago in range(1, 5):
            week_engine.create_past_week(db, user, weeks_ago, now)
        assert "weeks_4" in _codes(db, user.id)

    def test_rewards_are_not_credited(self, db, user, habit_factory):
        habit_factory(user)
        assert "first_habit" in _codes(db, user.id)
        assert crud.get_stats(db, user.id).total_xp == 0


@pytest.mark.parametrize(
    "percentages, expected",
    [
        ([60, 75, 85, 100], True),
        ([60, 75, 85, 100, 0], True),
        ([60, 75, 59.9, 100], False),
        ([60, 75, 85], False),
        ([None, 75, 85, 100], False),
    ],
)
def test_consistency_pattern(percentages, expected):
    assert achievements.is_consistent(percentages) is expected


def test_comeback_and_upgrade_patterns():
    assert achievements.is_comeback(["bronze", "none"])
    assert not achievements.is_comeback(["bronze", "bronze"])
    assert achievements.is_tier_upgrade(["gold", "silver"])
    assert not achievements.is_tier_upgrade(["silver", "silver"])
    assert not achievements.is_tier_upgrade(["gold"])


class TestWeekPatterns:
    def test_consistency_granted_once_across_re_evaluation(self, db, user, habit_factory, now):
        habit = habit_factory(user)
        weeks = [week_engine.create_past_week(db, user, weeks_ago, now) for weeks_ago in range(1, 5)]
        for week in weeks:
            _fill_week(db, user, habit, week, 5, now)
        assert "consistency_king" not in _codes(db, user.id)

        week_engine.create_past_week(db, user, 5, now)
        week_engine.create_past_week(db, user, 6, now)

        count = db.scalar(
            select(func.count())
            .select_from(UserAchievement)
            .where(UserAchievement.user_id == user.id, UserAchievement.code == "consistency_king")
        )
        assert count == 1
        assert "first_bronze" in _codes(db, user.id)

    def test_comeback_upgrade_and_first_trophies(self, db, user, habit_factory, now):
        habit = habit_factory(user)
        older = week_engine.create_past_week(db, user, 2, now)
        newer = week_engine.create_past_week(db, user, 1, now)
        _fill_week(db, user, habit, older, 2, now)
        _fill_week(db, user, habit, newer, 6, now)

        week_engine.get_or_create_current_week(db, user, now)

        codes = _codes(db, user.id)
        assert {"comeback_kid", "upgrade_week", "first_bronze", "first_silver", "first_gold"} <= codes
        assert "consistency_king" not in codes

    def test_current_week_is_not_judged(self, db, user, habit_factory, now):
        habit = habit_factory(user)
        for day in range(7):
            completions.toggle_completion(db, user, habit.id, day, now=now)
        week_engine.create_past_week(db, user, 1, now)

        assert "first_gold" not in _codes(db, user.id)


def test_overview_groups_by_category(db, user, habit_factory):
    habit_factory(user)
    overview = achievements.default_engine.overview(db, user.id)

    assert overview["total_achievements"] == 31
    assert overview["total_unlocked"] == 1
    assert overview["progress"] == pytest.approx(1 / 31)
    first = next(item for item in overview["grouped"]["habits"] if item["code"] == "first_habit")
    assert first["unlocked"] is True
    assert first["unlocked_at"] is not None
