from pydantic import BaseModel
from datetime import datetime


class GaugeRefreshOut(BaseModel):
    refreshed_at: datetime
    rows_updated: int
