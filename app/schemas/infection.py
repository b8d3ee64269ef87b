from pydantic import BaseModel, Field
from datetime import datetime
from uuid import UUID


class InfectionCreate(BaseModel):
    places_ids: list[UUID] = Field(min_length=1)
    start_timestamp: datetime
    end_timestamp: datetime


class InfectionOut(BaseModel):
    id: UUID
    organization_id: UUID
    places_ids: list[UUID]
    start_timestamp: datetime
    end_timestamp: datetime
    flagged_checkins: int = 0

    class Config:
        from_attributes = True
