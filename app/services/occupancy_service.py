"""
Interval Aggregator: how many people are at a place at a given instant.

A check-in counts toward occupancy at `at` when
start_timestamp <= at < end_timestamp. The same predicate backs the
correlated aggregation used by gauge_service, so a persisted gauge always
equals occupancy() for the same instant.
"""

from datetime import datetime
from uuid import UUID
from sqlalchemy import select, func, Integer, cast
from sqlalchemy.orm import Session
from app.models.checkin import CheckIn
from app.errors import store_errors
from app.services import place_service


def active_at(at: datetime):
    return (CheckIn.start_timestamp <= at) & (CheckIn.end_timestamp > at)


def active_count_sql(place_id, at: datetime):
    """Correlated SUM(number) of check-ins active at `at` for `place_id` (column or value)."""
    total = (
        select(cast(func.sum(CheckIn.number), Integer))
        .where(CheckIn.place_id == place_id, active_at(at))
        .scalar_subquery()
    )
    return func.coalesce(total, 0, type_=Integer)


def occupancy(db: Session, place_id: UUID, at: datetime) -> int:
    """Sum of `number` over check-ins active at `at`. 0 when nobody is there."""
    with store_errors(db):
        total = db.execute(select(active_count_sql(place_id, at))).scalar()
    return int(total or 0)


def place_occupancy(db: Session, place_id: UUID, at: datetime) -> int:
    """occupancy() for an enabled place; NotFound otherwise."""
    place_service.get_place(db, place_id)
    return occupancy(db, place_id, at)
