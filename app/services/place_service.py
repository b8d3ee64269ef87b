"""
Place Lifecycle + Ownership Validator.

Reads filter out disabled places. Mutations are single conditional UPDATEs
that re-check ownership and the disabled flag in the same statement, so two
concurrent writers can never both act on a place they no longer own.
A mutation touching 0 rows is NotFound; more than 1 is an InvariantViolation.
"""

from datetime import datetime
from typing import Iterable
from uuid import UUID
from sqlalchemy import select, update, func, literal, Integer
from sqlalchemy.orm import Session
from app.models.organization import Organization
from app.models.place import Place
from app.schemas.place import (
    PlaceCreate, PlaceUpdate, PlaceOut, PlaceWithOrganization, OrganizationSummary,
)
from app.errors import store_errors, expect_one, NotFound, InvalidArgument
from app.services.gauge_policy import gauge_level, gauge_percent, gauge_level_sql, gauge_percent_sql
from app.utils.geo import validate_coordinate
from app.utils.logger import get_logger

logger = get_logger(__name__)


def _check_fields(fields):
    if (fields.latitude is None) != (fields.longitude is None):
        raise InvalidArgument("latitude and longitude must be given together")
    if fields.latitude is not None and not validate_coordinate(fields.longitude, fields.latitude):
        raise InvalidArgument(f"Invalid coordinate ({fields.longitude}, {fields.latitude})")
    if fields.average_duration > fields.maximum_duration:
        raise InvalidArgument("average_duration cannot exceed maximum_duration")


def _with_organization(place: Place, organization: Organization) -> PlaceWithOrganization:
    return PlaceWithOrganization(
        **PlaceOut.model_validate(place).model_dump(),
        organization=OrganizationSummary.model_validate(organization),
    )


def get_place(db: Session, place_id: UUID, include_disabled: bool = False) -> PlaceOut:
    """Enabled place by id. `include_disabled` is for admin lookups only."""
    stmt = select(Place).where(Place.id == place_id)
    if not include_disabled:
        stmt = stmt.where(Place.disabled.is_(False))

    with store_errors(db):
        place = db.execute(stmt).scalar_one_or_none()
    if place is None:
        raise NotFound("Place")
    return PlaceOut.model_validate(place)


def get_place_with_organization(db: Session, place_id: UUID) -> PlaceWithOrganization:
    stmt = (
        select(Place, Organization)
        .join(Organization, Place.organization_id == Organization.id)
        .where(Place.id == place_id, Place.disabled.is_(False))
    )
    with store_errors(db):
        row = db.execute(stmt).first()
    if row is None:
        raise NotFound("Place")
    return _with_organization(*row)


def list_places_for_organization(db: Session, organization_id: UUID) -> list[PlaceWithOrganization]:
    """Enabled places of an organization, newest first."""
    stmt = (
        select(Place, Organization)
        .join(Organization, Place.organization_id == Organization.id)
        .where(Organization.id == organization_id, Place.disabled.is_(False))
        .order_by(Place.created_at.desc(), Place.id)
    )
    with store_errors(db):
        rows = db.execute(stmt).all()
    return [_with_organization(place, organization) for place, organization in rows]


def create_place(db: Session, organization_id: UUID, fields: PlaceCreate) -> UUID:
    _check_fields(fields)
    now = datetime.utcnow()

    place = Place(
        organization_id=organization_id,
        **fields.model_dump(),
        current_gauge=0,
        current_gauge_level=gauge_level(0, fields.maximum_gauge).value,
        current_gauge_percent=gauge_percent(0, fields.maximum_gauge),
        disabled=False,
        created_at=now,
        updated_at=now,
    )
    with store_errors(db):
        exists = db.execute(
            select(Organization.id).where(Organization.id == organization_id, Organization.disabled.is_(False))
        ).first()
        if exists is None:
            raise NotFound("Organization")
        db.add(place)
        db.flush()
        place_id = place.id
        db.commit()

    logger.info(f"[PLACE] created {place_id} for organization {organization_id}")
    return place_id


def _owned_enabled(place_id: UUID, organization_id: UUID):
    return (
        (Place.id == place_id)
        & (Place.organization_id == organization_id)
        & Place.disabled.is_(False)
    )


def update_place(db: Session, place_id: UUID, organization_id: UUID, fields: PlaceUpdate):
    """Replace the editable fields; gauge level/percent follow the new capacity."""
    _check_fields(fields)

    values = fields.model_dump()
    capacity = literal(fields.maximum_gauge, Integer)
    stmt = (
        update(Place)
        .where(_owned_enabled(place_id, organization_id))
        .values(
            **values,
            current_gauge_level=gauge_level_sql(Place.current_gauge, capacity),
            current_gauge_percent=gauge_percent_sql(Place.current_gauge, capacity),
            updated_at=datetime.utcnow(),
        )
        .execution_options(synchronize_session=False)
    )

    with store_errors(db):
        expect_one(db.execute(stmt).rowcount, "Place")
        db.commit()
    logger.info(f"[PLACE] updated {place_id}")


def disable_place(db: Session, place_id: UUID, organization_id: UUID):
    stmt = (
        update(Place)
        .where(_owned_enabled(place_id, organization_id))
        .values(disabled=True, updated_at=datetime.utcnow())
        .execution_options(synchronize_session=False)
    )
    with store_errors(db):
        expect_one(db.execute(stmt).rowcount, "Place")
        db.commit()
    logger.info(f"[PLACE] disabled {place_id}")


def validate_places_owned(db: Session, organization_id: UUID, place_ids: Iterable[UUID]):
    """
    Succeeds only if every distinct id belongs to `organization_id`.
    Raises NotFound without saying which id failed.
    """
    ids = set(place_ids)
    if not ids:
        return

    stmt = select(func.count(Place.id)).where(
        Place.organization_id == organization_id, Place.id.in_(list(ids))
    )
    with store_errors(db):
        count = db.execute(stmt).scalar()
    if count != len(ids):
        logger.warning(f"[PLACE] ownership check failed for organization {organization_id}")
        raise NotFound("Place")
