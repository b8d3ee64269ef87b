from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional
from uuid import UUID


class CheckInCreate(BaseModel):
    place_id: UUID
    session_id: UUID
    user_id: Optional[UUID] = None
    duration: int = Field(ge=1)              # requested minutes, clamped to the place maximum
    number: int = Field(default=1, ge=1)
    start_timestamp: Optional[datetime] = None


class CheckInOut(BaseModel):
    id: UUID
    place_id: UUID
    session_id: UUID
    user_id: Optional[UUID]
    start_timestamp: datetime
    end_timestamp: datetime
    duration: int
    number: int
    confirmed: bool
    potential_infection: bool

    class Config:
        from_attributes = True
