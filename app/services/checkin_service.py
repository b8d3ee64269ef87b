"""
Check-in submission.
The stored interval is [start, start + min(requested, place.maximum_duration)).
Occupancy is derived at read time, so concurrent check-ins at the same place
are independent inserts.
"""

from datetime import datetime, timedelta
from sqlalchemy import select
from sqlalchemy.orm import Session
from app.models.checkin import CheckIn
from app.models.place import Place
from app.schemas.checkin import CheckInCreate, CheckInOut
from app.errors import store_errors, NotFound, InvalidArgument
from app.utils.logger import get_logger

logger = get_logger(__name__)


def checkin_window(start: datetime, requested_minutes: int, maximum_minutes: int):
    """(end, duration) of a visit, clamped to the place maximum."""
    if requested_minutes <= 0:
        raise InvalidArgument("duration must be positive")
    minutes = min(requested_minutes, maximum_minutes)
    return start + timedelta(minutes=minutes), minutes


def create_checkin(db: Session, body: CheckInCreate) -> CheckInOut:
    if body.number < 1:
        raise InvalidArgument("number must be at least 1")
    start = body.start_timestamp or datetime.utcnow()

    with store_errors(db):
        maximum_duration = db.execute(
            select(Place.maximum_duration).where(Place.id == body.place_id, Place.disabled.is_(False))
        ).scalar_one_or_none()
        if maximum_duration is None:
            raise NotFound("Place")

        end, minutes = checkin_window(start, body.duration, maximum_duration)
        checkin = CheckIn(
            place_id=body.place_id,
            session_id=body.session_id,
            user_id=body.user_id,
            start_timestamp=start,
            end_timestamp=end,
            duration=minutes,
            number=body.number,
            confirmed=False,
            potential_infection=False,
            created_at=datetime.utcnow(),
            updated_at=datetime.utcnow(),
        )
        db.add(checkin)
        db.commit()
        db.refresh(checkin)

    logger.info(f"[CHECKIN] place={body.place_id} number={body.number} {start.isoformat()} -> {end.isoformat()}")
    return CheckInOut.model_validate(checkin)
