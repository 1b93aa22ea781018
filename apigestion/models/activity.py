# apigestion/models/activity.py
"""
Activity feed / audit trail. One row per notable event (alert raised, inspection done).
Written by activity_service; failures there never block the caller.
"""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from apigestion.database import Base


class Activity(Base):
    __tablename__ = "activities"

    id = Column(Integer, primary_key=True, autoincrement=True)
    kind = Column(String(50), nullable=False)            # alert | inspection
    title = Column(String(255), nullable=False)
    description = Column(Text)
    entity_type = Column(String(20))
    entity_id = Column(Integer)
    entity_name = Column(String(200))
    status = Column(String(20), default="success", nullable=False)   # success | warning
    owner_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    created_at = Column(DateTime, nullable=False, index=True)

    def __repr__(self):
        return f"<Activity {self.id} kind={self.kind} status={self.status}>"
