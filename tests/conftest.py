# tests/conftest.py
"""
Shared fixtures: an in-memory SQLite database per test, a controllable clock,
and an AlertService wired to a mocked notifier.
"""

from datetime import datetime, timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from apigestion.database import create_tables
from apigestion.services.alert_service import AlertService
from apigestion.services.notification_service import NotificationResult

from tests.factories import NOW


class FakeClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    create_tables(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def clock():
    return FakeClock(NOW)


@pytest.fixture
def notifier():
    notifier = MagicMock()
    notifier.notify = AsyncMock(return_value=NotificationResult.SENT)
    return notifier


@pytest.fixture
def alert_service(notifier, clock):
    return AlertService(notifier, clock=clock)
