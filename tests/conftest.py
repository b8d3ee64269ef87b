"""
Shared fixtures: an in-memory SQLite store with the schema created, and
small factories for organizations, places and check-ins.
"""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import math
import uuid
import pytest
from datetime import datetime, timedelta
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from app.database import create_tables
from app.models import Organization, Place, CheckIn
from app.services.gauge_policy import gauge_level, gauge_percent

T0 = datetime(2026, 3, 1, 12, 0, 0)


def _null_safe(fn):
    return lambda *args: None if any(a is None for a in args) else fn(*args)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # Haversine needs these whether or not the local SQLite ships math functions
    @event.listens_for(engine, "connect")
    def _register_math(dbapi_conn, _record):
        for name, fn in (("radians", math.radians), ("sin", math.sin), ("cos", math.cos),
                         ("asin", math.asin), ("sqrt", math.sqrt)):
            dbapi_conn.create_function(name, 1, _null_safe(fn))

    create_tables(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(bind=engine, autocommit=False, autoflush=False)()
    yield session
    session.close()


@pytest.fixture
def make_org(db):
    def _make(name="Cafe Group", disabled=False):
        org = Organization(name=name, confirmed=True, disabled=disabled)
        db.add(org)
        db.commit()
        return org
    return _make


@pytest.fixture
def make_place(db, make_org):
    counter = {"n": 0}

    def _make(org=None, latitude=None, longitude=None, maximum_gauge=None,
              maximum_duration=60, disabled=False, name=None, created_at=None):
        counter["n"] += 1
        org = org or make_org()
        place = Place(
            organization_id=org.id,
            name=name or f"Place {counter['n']}",
            latitude=latitude,
            longitude=longitude,
            average_duration=min(30, maximum_duration),
            maximum_duration=maximum_duration,
            maximum_gauge=maximum_gauge,
            current_gauge=0,
            current_gauge_level=gauge_level(0, maximum_gauge).value,
            current_gauge_percent=gauge_percent(0, maximum_gauge),
            disabled=disabled,
            created_at=created_at or T0 + timedelta(seconds=counter["n"]),
            updated_at=T0,
        )
        db.add(place)
        db.commit()
        return place
    return _make


@pytest.fixture
def make_checkin(db):
    def _make(place, start=T0, minutes=60, number=1):
        checkin = CheckIn(
            place_id=place.id,
            session_id=uuid.uuid4(),
            start_timestamp=start,
            end_timestamp=start + timedelta(minutes=minutes),
            duration=minutes,
            number=number,
        )
        db.add(checkin)
        db.commit()
        return checkin
    return _make
