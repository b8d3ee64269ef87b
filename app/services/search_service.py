"""
Proximity Search: enabled places within a radius of a point, nearest first.

Pagination is offset based. One extra row is fetched past the page to learn
whether a next page exists, so no COUNT query is needed. Ties on distance are
broken by place id to keep pages disjoint and deterministic.
"""

from typing import Optional, Tuple
from sqlalchemy import select
from sqlalchemy.orm import Session
from app.config import settings
from app.models.organization import Organization
from app.models.place import Place
from app.schemas.place import PlaceOut, PlaceSearchResult, OrganizationSummary, Pagination
from app.errors import store_errors, InvalidArgument
from app.utils.geo import validate_coordinate, distance_meters_sql, bounding_box, MAX_DISTANCE_METERS
from app.utils.logger import get_logger

logger = get_logger(__name__)

_MAX_SQL_INTEGER = 2 ** 63 - 1


def _check_request(center, radius_meters, page, page_size):
    longitude, latitude = center
    if not validate_coordinate(longitude, latitude):
        raise InvalidArgument(f"Invalid coordinate ({longitude}, {latitude})")
    if not radius_meters > 0:
        raise InvalidArgument("radius must be positive")
    if page < 1:
        raise InvalidArgument("page starts at 1")
    if page_size <= 0 or page_size > settings.SEARCH_MAX_PAGE_SIZE:
        raise InvalidArgument(f"page_size must be between 1 and {settings.SEARCH_MAX_PAGE_SIZE}")


def search_places(db: Session, center: Tuple[float, float], radius_meters: int,
                  page: int = 1, page_size: Optional[int] = None
                  ) -> Tuple[list[PlaceSearchResult], Pagination]:
    """
    Places within `radius_meters` of `center` = (longitude, latitude),
    ordered by distance. Returns the page of results and its pagination.
    """
    page_size = page_size if page_size is not None else settings.SEARCH_DEFAULT_PAGE_SIZE
    _check_request(center, radius_meters, page, page_size)
    longitude, latitude = center
    radius_meters = min(radius_meters, MAX_DISTANCE_METERS)

    offset = (page - 1) * page_size
    if offset + page_size + 1 > _MAX_SQL_INTEGER:
        # No store can hold that many rows; the page is past the end
        return [], Pagination(page=page, next_page=None)

    distance = distance_meters_sql(Place.longitude, Place.latitude, longitude, latitude).label("distance")
    stmt = (
        select(Place, Organization.id, Organization.name, distance)
        .join(Organization, Place.organization_id == Organization.id)
        .where(
            Place.disabled.is_(False),
            Organization.disabled.is_(False),
            Place.latitude.is_not(None),
            Place.longitude.is_not(None),
        )
    )

    lat_range, lon_range = bounding_box(longitude, latitude, radius_meters)
    if lat_range:
        stmt = stmt.where(Place.latitude.between(*lat_range))
    if lon_range:
        stmt = stmt.where(Place.longitude.between(*lon_range))

    stmt = (
        stmt.where(distance_meters_sql(Place.longitude, Place.latitude, longitude, latitude) <= radius_meters)
        .order_by(distance, Place.id)
        .limit(page_size + 1)
        .offset(offset)
    )

    with store_errors(db):
        rows = db.execute(stmt).all()

    next_page = None
    if len(rows) == page_size + 1:
        rows = rows[:-1]
        next_page = page + 1

    places = [
        PlaceSearchResult(
            **PlaceOut.model_validate(place).model_dump(),
            organization=OrganizationSummary(id=org_id, name=org_name),
            distance=float(meters),
        )
        for place, org_id, org_name, meters in rows
    ]
    logger.debug(
        f"[SEARCH] ({longitude}, {latitude}) r={radius_meters}m page={page} "
        f"-> {len(places)} places, next={next_page}"
    )
    return places, Pagination(page=page, next_page=next_page)
