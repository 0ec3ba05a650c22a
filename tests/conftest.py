"""
Fixtures for the check-in tests: an app bound to in-memory SQLite, an
organizer account, a pinned clock and an event factory.
"""

import typing as t
from datetime import datetime

import pytest
import pytz
from flask import Flask
from flask.testing import FlaskClient
from flask_jwt_extended import create_access_token

from checkin import create_app
from checkin.extensions import db
from checkin.models import Event, User
from checkin.repositories import UserRepository
from checkin.services import EventService
from checkin.utils.clock import FixedClock

NOW = datetime(2026, 10, 18, 9, 30, tzinfo=pytz.UTC)


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(NOW)


@pytest.fixture
def app(clock: FixedClock) -> t.Iterator[Flask]:
    app = create_app(
        {
            "TESTING": True,
            "SQLALCHEMY_DATABASE_URI": "sqlite://",
            "JWT_SECRET_KEY": "test-secret-key-with-enough-length-for-hs256",
            "RATELIMIT_ENABLED": False,
            "CLOCK": clock,
        }
    )
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app: Flask) -> FlaskClient:
    return app.test_client()


@pytest.fixture
def user(app: Flask) -> User:
    return UserRepository.create({"email": "organizer@example.com", "name": "Door Team"})


@pytest.fixture
def auth_headers(user: User) -> dict:
    token = create_access_token(identity=str(user.id))
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def make_event(user: User) -> t.Callable[..., Event]:
    def _make(**overrides: t.Any) -> Event:
        data = {"name": "Sunday Gathering", "date": "2026-10-18", **overrides}
        return EventService.create_event(data, user.id)

    return _make


@pytest.fixture
def event(make_event: t.Callable[..., Event]) -> Event:
    return make_event()


def naive(instant: datetime) -> datetime:
    """SQLite hands timestamps back without tzinfo; compare on the UTC wall time."""
    if instant.tzinfo is not None:
        instant = instant.astimezone(pytz.UTC).replace(tzinfo=None)
    return instant
