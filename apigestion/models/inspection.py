# apigestion/models/inspection.py
"""
Sanitary inspections of a hive.
Creating or updating one derives situational alerts (see AlertService.derive_inspection_alerts).
"""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship
from apigestion.database import Base


class Inspection(Base):
    __tablename__ = "inspections"

    id = Column(Integer, primary_key=True, autoincrement=True)
    inspected_at = Column(DateTime, nullable=False)
    sanitary_status = Column(String(20), default="healthy", nullable=False)  # healthy | diseased | quarantine
    treatments = Column(Text)
    population = Column(String(20))     # High | Medium | Low
    production = Column(String(20))     # High | Medium | Low
    observations = Column(Text)
    hive_id = Column(Integer, ForeignKey("hives.id"))
    owner_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    created_at = Column(DateTime)

    hive = relationship("Hive")

    @property
    def hive_name(self):
        return self.hive.name if self.hive else None

    def __repr__(self):
        return f"<Inspection {self.id} hive={self.hive_id} status={self.sanitary_status}>"
