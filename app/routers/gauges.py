"""On-demand gauge refresh (the periodic refresher calls the same service)."""

from datetime import datetime
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from app.database import get_db
from app.schemas.gauge import GaugeRefreshOut
from app.services.gauge_service import refresh_all_gauges

router = APIRouter()


@router.post("/gauges/refresh", response_model=GaugeRefreshOut, summary="Recompute every place gauge")
def refresh_gauges(db: Session = Depends(get_db)):
    now = datetime.utcnow()
    return GaugeRefreshOut(refreshed_at=now, rows_updated=refresh_all_gauges(db, now))
