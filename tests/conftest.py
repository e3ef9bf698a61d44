"""Shared fixtures: an isolated in-memory database per test plus small factories."""

from datetime import datetime, timezone

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from keystone import crud
from keystone.db import enable_sqlite_transactions
from keystone.models import Base
from keystone.services import habits as habit_service

# Wednesday 2026-10-14 12:00 in New York; day index 3 for Sunday-first weeks.
FIXED_NOW = datetime(2026, 10, 14, 16, 0, tzinfo=timezone.utc)


@pytest.fixture()
def db_engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_transactions(engine)
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture()
def session_factory(db_engine):
    return sessionmaker(bind=db_engine, autoflush=False, future=True)


@pytest.fixture()
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture()
def now():
    return FIXED_NOW


@pytest.fixture()
def user_factory(db):
    counter = {"n": 0}

    def _create(**overrides):
        counter["n"] += 1
        values = {
            "email": f"user{counter['n']}@example.com",
            "name": f"User {counter['n']}",
            "timezone": "America/New_York",
            "week_start_day": 0,
        }
        values.update(overrides)
        return crud.upsert_user(
            db,
            values["email"],
            values["name"],
            timezone=values["timezone"],
            week_start_day=values["week_start_day"],
        )

    return _create


@pytest.fixture()
def user(user_factory):
    return user_factory()


@pytest.fixture()
def habit_factory(db, now):
    def _create(owner, **overrides):
        values = {"name": "Read", "xp_value": 10}
        values.update(overrides)
        return habit_service.create_habit(db, owner, values, now=now)

    return _create
