"""Check-in submission."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from app.database import get_db
from app.schemas.checkin import CheckInCreate, CheckInOut
from app.services.checkin_service import create_checkin

router = APIRouter()


@router.post("/checkins", response_model=CheckInOut, status_code=201, summary="Check in to a place")
def check_in(body: CheckInCreate, db: Session = Depends(get_db)):
    return create_checkin(db, body)
