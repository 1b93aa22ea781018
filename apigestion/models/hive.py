# apigestion/models/hive.py
"""
Hives table.
queen_date drives the queen replacement milestones; recurring_alerts_enabled
and last_control_alert_at are read and written by the recurring alert sweep.
"""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship
from apigestion.database import Base


class Hive(Base):
    __tablename__ = "hives"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(200), nullable=False)
    status = Column(String(20), default="active", nullable=False, index=True)  # active | inactive | abandoned
    installed_at = Column(DateTime)
    frames = Column(Integer)
    queen_type = Column(String(100))
    queen_date = Column(DateTime)
    recurring_alerts_enabled = Column(Boolean, default=True, nullable=False)
    last_control_alert_at = Column(DateTime)
    owner_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    apiary_id = Column(Integer, ForeignKey("apiaries.id"))
    created_at = Column(DateTime)

    apiary = relationship("Apiary")

    def __repr__(self):
        return f"<Hive {self.id} {self.name} status={self.status}>"
