import pytest

from keystone import crud
from keystone.db import _normalize_database_url, session_scope
from keystone.errors import ConflictError
from keystone.services import habits as habit_service
from keystone.services import week_engine


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("postgres://u:p@host/db", "postgresql+psycopg://u:p@host/db"),
        ("postgresql://u:p@host/db", "postgresql+psycopg://u:p@host/db"),
        ("postgresql+psycopg://u:p@host/db", "postgresql+psycopg://u:p@host/db"),
        (" sqlite:///./keystone.db ", "sqlite:///./keystone.db"),
    ],
)
def test_normalize_database_url(raw, expected):
    assert _normalize_database_url(raw) == expected


def test_session_scope_commits(session_factory, now):
    with session_scope(session_factory) as db:
        user = crud.upsert_user(db, "scope@example.com", "Scope", timezone="UTC")
        habit_service.create_habit(db, user, {"name": "Read"}, now=now)
        user_id = user.id

    with session_scope(session_factory) as db:
        assert len(crud.list_habits(db, user_id, include_archived=True)) == 1
        assert crud.get_stats(db, user_id).total_habits_created == 1


def test_failed_unit_of_work_leaves_nothing_behind(session_factory, now):
    with session_scope(session_factory) as db:
        user = crud.upsert_user(db, "scope@example.com", "Scope", timezone="UTC")
        habit_service.create_habit(db, user, {"name": "Read"}, now=now)
        week_engine.create_past_week(db, user, 1, now)
        user_id = user.id

    with pytest.raises(ConflictError):
        with session_scope(session_factory) as db:
            user = crud.get_user(db, user_id)
            week_engine.create_past_week(db, user, 2, now)
            week_engine.create_past_week(db, user, 1, now)

    with session_scope(session_factory) as db:
        assert crud.count_weeks(db, user_id) == 1
        assert crud.get_stats(db, user_id).weeks_completed == 1
