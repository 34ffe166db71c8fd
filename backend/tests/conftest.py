"""Shared fixtures.

Every test runs against one in-memory SQLite database (StaticPool, so the
TestClient thread sees the same connection). Services commit, so tables are
emptied after each test instead of relying on rollback.
"""

import os
from datetime import datetime, timedelta

import pytest

# Override DATABASE_URL before any app imports
os.environ["DATABASE_URL"] = "sqlite://"

from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

import energy_portal.database  # noqa: E402
from energy_portal.database import SessionLocal, get_db  # noqa: E402
from energy_portal.models import (  # noqa: E402
    Base, Building, City, ContactPreference, Message, MessageKind, Channel, Recipient,
)
from energy_portal.schemas.forecast import ForecastPoint  # noqa: E402

_engine = create_engine(
    "sqlite://",
    echo=False,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
energy_portal.database.engine = _engine
SessionLocal.configure(bind=_engine)

from energy_portal.main import app  # noqa: E402

Base.metadata.create_all(bind=_engine)

NOW = datetime(2026, 1, 15, 12, 0, 0)


@pytest.fixture()
def db_session():
    session = SessionLocal()
    yield session
    session.rollback()
    for table in reversed(Base.metadata.sorted_tables):
        session.execute(table.delete())
    session.commit()
    session.close()


@pytest.fixture()
def client(db_session):
    """FastAPI TestClient with get_db overridden to use the test session."""

    def _override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = _override_get_db

    from fastapi.testclient import TestClient

    with TestClient(app) as c:
        yield c

    app.dependency_overrides.clear()


@pytest.fixture()
def now():
    return NOW


def make_city(db, name="Boston", office="BOX", delta=10.0, window=6, active=True):
    city = City(
        name=name, state="MA", nws_office=office, nws_grid_x=71, nws_grid_y=90,
        alert_temp_delta=delta, alert_window_hours=window, is_active=active,
    )
    db.add(city)
    db.commit()
    return city


def make_building(db, city, name="Harbor Lofts", active=True, paused=False):
    building = Building(city_id=city.id, name=name, address="1 Main St", is_active=active, is_paused=paused)
    db.add(building)
    db.commit()
    return building


def make_recipient(db, building, preference=ContactPreference.EMAIL, email="super@example.com",
                   phone=None, active=True):
    recipient = Recipient(
        building_id=building.id, name="Superintendent", email=email, phone=phone,
        preference=preference, is_active=active,
    )
    db.add(recipient)
    db.commit()
    return recipient


def make_message(db, building, recipient, sent_at=None, kind=MessageKind.ALERT, token=None,
                 delivered=True, created_at=None):
    message = Message(
        building_id=building.id, recipient_id=recipient.id, kind=kind, channel=Channel.EMAIL,
        content="Adjust your heat", upload_token=token, sent_at=sent_at, delivered=delivered,
        delivery_status="delivered" if delivered else "pending",
        created_at=created_at or sent_at or NOW,
    )
    db.add(message)
    db.commit()
    return message


def make_forecast(temps, start=NOW):
    return [ForecastPoint(time=start + timedelta(hours=i), temp_f=t) for i, t in enumerate(temps)]


@pytest.fixture()
def city(db_session):
    return make_city(db_session)


@pytest.fixture()
def building(db_session, city):
    return make_building(db_session, city)


@pytest.fixture()
def recipient(db_session, building):
    return make_recipient(db_session, building)
