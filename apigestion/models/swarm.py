# apigestion/models/swarm.py
from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Text
from apigestion.database import Base


class Swarm(Base):
    __tablename__ = "swarms"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(200), nullable=False)
    status = Column(String(20), default="active", nullable=False)  # active | inactive | divided | merged
    notes = Column(Text)
    recurring_alerts_enabled = Column(Boolean, default=True, nullable=False)
    last_control_alert_at = Column(DateTime)
    hive_id = Column(Integer, ForeignKey("hives.id"))
    owner_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    created_at = Column(DateTime)

    def __repr__(self):
        return f"<Swarm {self.id} {self.name} status={self.status}>"
