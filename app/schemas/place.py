from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional
from uuid import UUID
from app.services.gauge_policy import GaugeLevel


class PlaceFields(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    description: Optional[str] = None
    address: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    average_duration: int = Field(ge=1)      # minutes
    maximum_duration: int = Field(ge=1)      # minutes
    maximum_gauge: Optional[int] = Field(default=None, ge=1)


class PlaceCreate(PlaceFields):
    pass


class PlaceUpdate(PlaceFields):
    """Full replacement: omitted optional fields are cleared."""


class OrganizationSummary(BaseModel):
    id: UUID
    name: str

    class Config:
        from_attributes = True


class PlaceOut(BaseModel):
    id: UUID
    organization_id: UUID
    name: str
    description: Optional[str]
    address: Optional[str]
    latitude: Optional[float]
    longitude: Optional[float]
    average_duration: int
    maximum_duration: int
    maximum_gauge: Optional[int]
    current_gauge: int
    current_gauge_level: GaugeLevel
    current_gauge_percent: Optional[int]
    disabled: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class PlaceWithOrganization(PlaceOut):
    organization: OrganizationSummary


class PlaceSearchResult(PlaceWithOrganization):
    distance: float                          # meters from the search center


class Pagination(BaseModel):
    page: int
    next_page: Optional[int]


class PlaceSearchResponse(BaseModel):
    pagination: Pagination
    places: list[PlaceSearchResult]


class PlaceCreated(BaseModel):
    id: UUID


class OccupancyOut(BaseModel):
    place_id: UUID
    at: datetime
    occupancy: int
