from datetime import date

import pytest
from sqlalchemy import func, select

from keystone import crud
from keystone.db import session_scope
from keystone.errors import ConflictError, NotFoundError, ValidationError
from keystone.models import Week, WeekHabitSnapshot, XPLog
from keystone.services import completions, week_engine
from keystone.services import habits as habit_service


class TestCurrentWeek:
    def test_lazy_creation_snapshots_active_habits(self, db, user, habit_factory, now):
        habit_factory(user, name="Read")
        habit_factory(user, name="Run")

        week, bounds = week_engine.get_or_create_current_week(db, user, now)

        assert week.start_date == date(2026, 10, 11)
        assert bounds.day_index == 3
        assert [s.name for s in crud.list_snapshots(db, week.id)] == ["Read", "Run"]
        score = crud.get_score(db, week.id)
        assert score.possible_completions == 14
        assert score.total_completions == 0
        assert score.percentage == 0
        assert crud.get_stats(db, user.id).weeks_completed == 1

    def test_second_lookup_reuses_week(self, db, user, habit_factory, now):
        habit_factory(user)
        first, _ = week_engine.get_or_create_current_week(db, user, now)
        second, _ = week_engine.get_or_create_current_week(db, user, now)

        assert first.id == second.id
        assert db.scalar(select(func.count()).select_from(Week)) == 1
        assert crud.get_stats(db, user.id).weeks_completed == 1

    def test_week_without_habits_scores_zero(self, db, user, now):
        week, _ = week_engine.get_or_create_current_week(db, user, now)
        assert crud.get_score(db, week.id).possible_completions == 0
        assert week_engine.compute_percentage(0, 0) == 0.0

    def test_empty_week_view_points_at_bronze(self, db, user, now):
        view = week_engine.current_week_view(db, user, now)
        assert view["next_trophy"] == {"tier": "bronze", "completions_needed": 0}

    def test_monday_preference(self, db, user_factory, now):
        monday_user = user_factory(week_start_day=1)
        week, bounds = week_engine.get_or_create_current_week(db, monday_user, now)
        assert week.start_date == date(2026, 10, 12)
        assert bounds.day_index == 2

    def test_preference_change_keeps_existing_week_boundaries(self, db, user, habit_factory, now):
        habit_factory(user)
        sunday_week, _ = week_engine.get_or_create_current_week(db, user, now)

        user.week_start_day = 1
        db.flush()
        monday_week, _ = week_engine.get_or_create_current_week(db, user, now)

        assert sunday_week.id != monday_week.id
        assert sunday_week.start_date == date(2026, 10, 11)
        assert monday_week.start_date == date(2026, 10, 12)

    def test_view_includes_completion_map_and_day_index(self, db, user, habit_factory, now):
        habit = habit_factory(user)
        completions.toggle_completion(db, user, habit.id, 1, now=now)

        view = week_engine.current_week_view(db, user, now)

        assert view["current_day_index"] == 3
        assert view["completion_map"] == {habit.id: {1: True}}
        assert view["day_names"][0] == "Sun"
        assert view["timezone"] == "America/New_York"
        assert view["score"]["total_completions"] == 1
        assert view["next_trophy"] == {"tier": "bronze", "completions_needed": 4}


class TestPastWeek:
    def test_creates_week_in_the_past(self, db, user, habit_factory, now):
        habit_factory(user)
        week = week_engine.create_past_week(db, user, 2, now)
        assert week.start_date == date(2026, 9, 27)
        assert crud.get_score(db, week.id).possible_completions == 7

    def test_existing_week_is_a_conflict(self, db, user, habit_factory, now):
        habit_factory(user)
        existing = week_engine.create_past_week(db, user, 1, now)

        with pytest.raises(ConflictError) as excinfo:
            week_engine.create_past_week(db, user, 1, now)

        assert excinfo.value.week.id == existing.id
        assert db.scalar(select(func.count()).select_from(Week)) == 1

    def test_no_active_habits_is_a_conflict(self, db, user, now):
        with pytest.raises(ConflictError):
            week_engine.create_past_week(db, user, 1, now)

    @pytest.mark.parametrize("weeks_ago", [0, 53, -1])
    def test_weeks_ago_range(self, db, user, habit_factory, now, weeks_ago):
        habit_factory(user)
        with pytest.raises(ValidationError):
            week_engine.create_past_week(db, user, weeks_ago, now)


class TestDeleteWeek:
    def test_reverses_week_contribution(self, db, user, habit_factory, now):
        read = habit_factory(user, name="Read", xp_value=10)
        run = habit_factory(user, name="Run", xp_value=25)
        week, _ = week_engine.get_or_create_current_week(db, user, now)
        for day in (0, 1, 2):
            completions.toggle_completion(db, user, read.id, day, now=now)
        completions.toggle_completion(db, user, run.id, 3, now=now)

        before = crud.get_stats(db, user.id)
        xp_before, count_before = before.total_xp, before.total_completions

        removed = week_engine.delete_week(db, user, week.id)

        stats = crud.get_stats(db, user.id)
        assert removed == {"xp_removed": 55, "completions_removed": 4}
        assert stats.total_xp == xp_before - 55
        assert stats.total_completions == count_before - 4
        assert crud.find_user_week(db, user.id, week.id) is None
        assert db.scalar(select(func.count()).select_from(WeekHabitSnapshot)) == 0
        assert crud.get_score(db, week.id) is None
        assert db.scalar(select(XPLog.amount).where(XPLog.source == "WEEK_DELETED")) == -55

    def test_weeks_completed_is_not_decremented(self, db, user, habit_factory, now):
        habit_factory(user)
        week, _ = week_engine.get_or_create_current_week(db, user, now)
        week_engine.delete_week(db, user, week.id)
        assert crud.get_stats(db, user.id).weeks_completed == 1

    def test_other_users_week_is_not_found(self, db, user, user_factory, habit_factory, now):
        habit_factory(user)
        week, _ = week_engine.get_or_create_current_week(db, user, now)
        stranger = user_factory()

        with pytest.raises(NotFoundError):
            week_engine.delete_week(db, stranger, week.id)


def test_history_is_newest_first_and_paginated(db, user, habit_factory, now):
    habit_factory(user)
    week_engine.get_or_create_current_week(db, user, now)
    for weeks_ago in (1, 2, 3):
        week_engine.create_past_week(db, user, weeks_ago, now)

    page = week_engine.week_history(db, user, limit=2, offset=0)
    assert [w["start_date"] for w in page["weeks"]] == ["2026-10-11", "2026-10-04"]
    assert page["total"] == 4
    assert page["has_more"] is True

    last = week_engine.week_history(db, user, limit=2, offset=2)
    assert [w["start_date"] for w in last["weeks"]] == ["2026-09-27", "2026-09-20"]
    assert last["has_more"] is False


class TestConcurrentCreation:
    """A second request that read "no week" before the first one committed."""

    @pytest.fixture()
    def user_id(self, session_factory, now):
        with session_scope(session_factory) as db:
            owner = crud.upsert_user(db, "race@example.com", "Race", timezone="America/New_York")
            habit_service.create_habit(db, owner, {"name": "Read"}, now=now)
            return owner.id

    @pytest.fixture()
    def stale_first_lookup(self, monkeypatch):
        real_find_week = crud.find_week
        calls = []

        def find_week(db, user_id, start_date):
            calls.append(start_date)
            if len(calls) == 1:
                return None
            return real_find_week(db, user_id, start_date)

        def activate():
            monkeypatch.setattr(crud, "find_week", find_week)

        return activate

    def test_loser_gets_winners_current_week(self, session_factory, user_id, stale_first_lookup, now):
        with session_scope(session_factory) as first:
            winner, _ = week_engine.get_or_create_current_week(first, crud.get_user(first, user_id), now)
            winner_id = winner.id

        stale_first_lookup()
        with session_scope(session_factory) as second:
            week, _ = week_engine.get_or_create_current_week(second, crud.get_user(second, user_id), now)
            assert week.id == winner_id

        with session_scope(session_factory) as db:
            assert crud.count_weeks(db, user_id) == 1
            assert crud.get_stats(db, user_id).weeks_completed == 1
            assert len(crud.list_snapshots(db, winner_id)) == 1

    def test_loser_of_past_week_race_gets_conflict(self, session_factory, user_id, stale_first_lookup, now):
        with session_scope(session_factory) as first:
            winner = week_engine.create_past_week(first, crud.get_user(first, user_id), 1, now)
            winner_id = winner.id

        stale_first_lookup()
        with pytest.raises(ConflictError) as excinfo:
            with session_scope(session_factory) as second:
                week_engine.create_past_week(second, crud.get_user(second, user_id), 1, now)

        assert excinfo.value.week.id == winner_id
        with session_scope(session_factory) as db:
            assert crud.count_weeks(db, user_id) == 1
            assert crud.get_stats(db, user_id).weeks_completed == 1
