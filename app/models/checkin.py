"""
Check-in table.
One visit interval [start_timestamp, end_timestamp) at a place, counting
`number` people. Kept forever as the contact-tracing audit trail.
"""

import uuid
from datetime import datetime
from sqlalchemy import Column, Integer, DateTime, Boolean, Uuid, ForeignKey, Index, CheckConstraint
from app.database import Base


class CheckIn(Base):
    __tablename__ = "checkin"
    __table_args__ = (
        CheckConstraint("end_timestamp > start_timestamp", name="ck_checkin_interval"),
        CheckConstraint("number >= 1", name="ck_checkin_number"),
        Index("ix_checkin_place_window", "place_id", "start_timestamp", "end_timestamp"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    place_id = Column(Uuid, ForeignKey("place.id"), nullable=False)
    session_id = Column(Uuid, nullable=False)
    user_id = Column(Uuid)
    start_timestamp = Column(DateTime, nullable=False)
    end_timestamp = Column(DateTime, nullable=False)
    duration = Column(Integer, nullable=False)           # minutes, after clamping
    number = Column(Integer, default=1, nullable=False)
    confirmed = Column(Boolean, default=False, nullable=False)
    potential_infection = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<CheckIn {self.id} place={self.place_id} number={self.number}>"
