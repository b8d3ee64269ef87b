"""
Organization table.
Owns places; only its id and name are exposed alongside place results.
"""

import uuid
from datetime import datetime
from sqlalchemy import Column, String, DateTime, Boolean, Uuid
from app.database import Base


class Organization(Base):
    __tablename__ = "organization"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid)                    # owner account, managed by the auth layer
    name = Column(String(200), nullable=False)
    confirmed = Column(Boolean, default=False, nullable=False)
    disabled = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<Organization {self.id} name={self.name}>"
