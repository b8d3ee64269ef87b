"""
Infection records.
An organization flags a time window over some of its places. The place id
array is stored as association rows in infection_place.
"""

import uuid
from datetime import datetime
from sqlalchemy import Column, DateTime, Uuid, ForeignKey
from sqlalchemy.orm import relationship
from app.database import Base


class Infection(Base):
    __tablename__ = "infection"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    organization_id = Column(Uuid, ForeignKey("organization.id"), nullable=False, index=True)
    start_timestamp = Column(DateTime, nullable=False)
    end_timestamp = Column(DateTime, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    places = relationship("InfectionPlace", cascade="all, delete-orphan")

    @property
    def places_ids(self):
        return [p.place_id for p in self.places]

    def __repr__(self):
        return f"<Infection {self.id} org={self.organization_id} places={len(self.places)}>"


class InfectionPlace(Base):
    __tablename__ = "infection_place"

    infection_id = Column(Uuid, ForeignKey("infection.id"), primary_key=True)
    place_id = Column(Uuid, ForeignKey("place.id"), primary_key=True)
