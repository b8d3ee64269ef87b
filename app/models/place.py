"""
Place table.
Venue registered by an organization. Gauge columns are derived and written
by gauge_service.refresh_all_gauges; everything else by place_service.
Never deleted: `disabled` is a terminal soft-delete flag.
"""

import uuid
from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, Boolean, Float, Text, Uuid, ForeignKey, Index
from app.database import Base
from app.services.gauge_policy import GaugeLevel


class Place(Base):
    __tablename__ = "place"
    __table_args__ = (
        Index("ix_place_location", "latitude", "longitude"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    organization_id = Column(Uuid, ForeignKey("organization.id"), nullable=False, index=True)
    name = Column(String(200), nullable=False)
    description = Column(Text)
    address = Column(Text)
    latitude = Column(Float)
    longitude = Column(Float)
    average_duration = Column(Integer, nullable=False)   # minutes
    maximum_duration = Column(Integer, nullable=False)   # minutes
    maximum_gauge = Column(Integer)                      # capacity, optional
    current_gauge = Column(Integer, default=0, nullable=False)
    current_gauge_level = Column(String(16), default=GaugeLevel.EMPTY.value, nullable=False)
    current_gauge_percent = Column(Integer)
    disabled = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<Place {self.id} name={self.name} gauge={self.current_gauge}/{self.maximum_gauge}>"
