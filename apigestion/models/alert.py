# apigestion/models/alert.py
"""
Alerts table: stores both fired alerts and recurring alert templates.

A template (is_recurring=True) is a schedule linked to a monitored entity; it
is never listed to the user. Each time next_due_at elapses the scheduler sweep
copies it into a fired alert (is_recurring=False) and moves next_due_at forward.
Templates are never deleted, only switched to active=False.
"""

import enum

from sqlalchemy import Boolean, Column, DateTime, Enum, ForeignKey, Index, Integer, String, Text
from apigestion.database import Base


class AlertKind(str, enum.Enum):
    INSPECTION = "inspection"
    PRODUCTION = "production"
    SANITARY = "sanitary"
    MAINTENANCE = "maintenance"
    ROUTINE_CONTROL = "routine_control"
    OTHER = "other"


class AlertPriority(str, enum.Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    @property
    def is_urgent(self) -> bool:
        return self in (AlertPriority.HIGH, AlertPriority.CRITICAL)


def _values(enum_cls):
    return [member.value for member in enum_cls]


class Alert(Base):
    __tablename__ = "alerts"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)
    kind = Column(Enum(AlertKind, name="alert_kind", values_callable=_values), nullable=False, index=True)
    priority = Column(Enum(AlertPriority, name="alert_priority", values_callable=_values), nullable=False)
    owner_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    is_read = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, nullable=False, index=True)

    # Recurrence (templates only; fired copies keep entity_type/entity_id/frequency_days)
    is_recurring = Column(Boolean, default=False, nullable=False)
    frequency_days = Column(Integer)
    entity_type = Column(String(20))            # hive | swarm | nucleus
    entity_id = Column(Integer)
    next_due_at = Column(DateTime)
    last_fired_at = Column(DateTime)
    active = Column(Boolean)

    __table_args__ = (
        Index("idx_alert_due", "is_recurring", "active", "next_due_at"),
        Index("idx_alert_entity", "entity_type", "entity_id"),
    )

    def __repr__(self):
        kind = "template" if self.is_recurring else "fired"
        return f"<Alert {self.id} {kind} priority={self.priority} owner={self.owner_id}>"
