"""
Infection records.
An organization flags [start, end) over some of its own places; every
check-in at those places overlapping the window is marked
potential_infection. Ownership is checked first and the record plus the
flags are written in one transaction.
"""

from datetime import datetime
from uuid import UUID
from sqlalchemy import update
from sqlalchemy.orm import Session
from app.models.checkin import CheckIn
from app.models.infection import Infection, InfectionPlace
from app.schemas.infection import InfectionCreate, InfectionOut
from app.errors import store_errors, InvalidArgument
from app.services.place_service import validate_places_owned
from app.utils.logger import get_logger

logger = get_logger(__name__)


def create_infection(db: Session, organization_id: UUID, body: InfectionCreate) -> InfectionOut:
    if body.end_timestamp <= body.start_timestamp:
        raise InvalidArgument("end_timestamp must be after start_timestamp")

    places_ids = sorted(set(body.places_ids), key=str)
    validate_places_owned(db, organization_id, places_ids)

    now = datetime.utcnow()
    infection = Infection(
        organization_id=organization_id,
        start_timestamp=body.start_timestamp,
        end_timestamp=body.end_timestamp,
        places=[InfectionPlace(place_id=place_id) for place_id in places_ids],
        created_at=now,
        updated_at=now,
    )
    flag = (
        update(CheckIn)
        .where(
            CheckIn.place_id.in_(places_ids),
            CheckIn.start_timestamp < body.end_timestamp,
            CheckIn.end_timestamp > body.start_timestamp,
        )
        .values(potential_infection=True, updated_at=now)
        .execution_options(synchronize_session=False)
    )

    with store_errors(db):
        db.add(infection)
        db.flush()
        infection_id = infection.id
        flagged = db.execute(flag).rowcount
        db.commit()

    logger.warning(
        f"[INFECTION] {infection_id} org={organization_id} places={len(places_ids)} "
        f"flagged {flagged} check-ins"
    )
    return InfectionOut(
        id=infection_id,
        organization_id=organization_id,
        places_ids=places_ids,
        start_timestamp=body.start_timestamp,
        end_timestamp=body.end_timestamp,
        flagged_checkins=flagged,
    )
