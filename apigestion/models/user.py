# apigestion/models/user.py
"""
Users table: beekeepers and administrators.
Alerts, hives, swarms and inspections are owned by a user.
"""

from sqlalchemy import Boolean, Column, DateTime, Integer, String
from apigestion.database import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(200), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    role = Column(String(20), default="beekeeper", nullable=False)   # beekeeper | admin
    is_active = Column(Boolean, default=True, nullable=False)
    email_notifications = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime)

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"

    def __repr__(self):
        return f"<User {self.id} {self.email} role={self.role}>"
