"""Infection declarations by an organization over its own places."""

from uuid import UUID
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from app.database import get_db
from app.routers.dependencies import get_organization_id
from app.schemas.infection import InfectionCreate, InfectionOut
from app.services.infection_service import create_infection

router = APIRouter()


@router.post("/infections", response_model=InfectionOut, status_code=201, summary="Declare an infection window")
def declare_infection(body: InfectionCreate, organization_id: UUID = Depends(get_organization_id),
                      db: Session = Depends(get_db)):
    return create_infection(db, organization_id, body)
