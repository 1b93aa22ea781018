# apigestion/models/nucleus.py
"""
Nuclei table. A nucleus has no owner column; it belongs to the owner of its hive.
Status values follow the field sheet: Nuevo | Bueno | Regular | Malo.
"""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship
from apigestion.database import Base


class Nucleus(Base):
    __tablename__ = "nuclei"

    id = Column(Integer, primary_key=True, autoincrement=True)
    number = Column(Integer, nullable=False)
    frame_type = Column(String(50), default="Langstroth", nullable=False)
    status = Column(String(20), default="Nuevo", nullable=False)
    installed_at = Column(DateTime)
    recurring_alerts_enabled = Column(Boolean, default=True, nullable=False)
    last_control_alert_at = Column(DateTime)
    hive_id = Column(Integer, ForeignKey("hives.id"), nullable=False)
    created_at = Column(DateTime)

    hive = relationship("Hive")

    @property
    def display_name(self) -> str:
        return f"Núcleo {self.number} - {self.frame_type}"

    def __repr__(self):
        return f"<Nucleus {self.id} #{self.number} status={self.status}>"
