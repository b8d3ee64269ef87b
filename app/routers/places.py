"""Places — lifecycle, lookup, proximity search and live occupancy."""

from datetime import datetime
from typing import Optional
from uuid import UUID
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from app.config import settings
from app.database import get_db
from app.routers.dependencies import get_organization_id
from app.schemas.place import (
    PlaceCreate, PlaceUpdate, PlaceCreated, PlaceOut, PlaceWithOrganization,
    PlaceSearchResponse, OccupancyOut,
)
from app.services import place_service, search_service, occupancy_service

router = APIRouter()


@router.get("/places/search", response_model=PlaceSearchResponse, summary="Places near a point")
def search_places(
    longitude: float,
    latitude: float,
    radius: int = Query(..., description="meters"),
    page: int = 1,
    page_size: int = settings.SEARCH_DEFAULT_PAGE_SIZE,
    db: Session = Depends(get_db),
):
    places, pagination = search_service.search_places(db, (longitude, latitude), radius, page, page_size)
    return PlaceSearchResponse(pagination=pagination, places=places)


@router.get("/places", response_model=list[PlaceWithOrganization], summary="Places of the caller organization")
def list_places(organization_id: UUID = Depends(get_organization_id), db: Session = Depends(get_db)):
    return place_service.list_places_for_organization(db, organization_id)


@router.post("/places", response_model=PlaceCreated, status_code=201, summary="Register a place")
def create_place(body: PlaceCreate, organization_id: UUID = Depends(get_organization_id),
                 db: Session = Depends(get_db)):
    return PlaceCreated(id=place_service.create_place(db, organization_id, body))


@router.get("/places/{place_id}", response_model=PlaceWithOrganization)
def get_place(place_id: UUID, db: Session = Depends(get_db)):
    return place_service.get_place_with_organization(db, place_id)


@router.put("/places/{place_id}", response_model=PlaceOut, summary="Replace a place's fields")
def update_place(place_id: UUID, body: PlaceUpdate, organization_id: UUID = Depends(get_organization_id),
                 db: Session = Depends(get_db)):
    place_service.update_place(db, place_id, organization_id, body)
    return place_service.get_place(db, place_id)


@router.delete("/places/{place_id}", summary="Disable a place")
def disable_place(place_id: UUID, organization_id: UUID = Depends(get_organization_id),
                  db: Session = Depends(get_db)):
    place_service.disable_place(db, place_id, organization_id)
    return {"id": str(place_id), "status": "disabled"}


@router.get("/places/{place_id}/occupancy", response_model=OccupancyOut)
def get_occupancy(place_id: UUID, at: Optional[datetime] = None, db: Session = Depends(get_db)):
    """People at the place now, or at `at` when given."""
    at = at or datetime.utcnow()
    return OccupancyOut(place_id=place_id, at=at,
                        occupancy=occupancy_service.place_occupancy(db, place_id, at))
