# apigestion/models/apiary.py
from sqlalchemy import Column, DateTime, ForeignKey, Integer, String
from apigestion.database import Base


class Apiary(Base):
    __tablename__ = "apiaries"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(200), nullable=False)
    city = Column(String(100))
    country = Column(String(100))
    owner_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    created_at = Column(DateTime)

    def __repr__(self):
        return f"<Apiary {self.id} {self.name}>"
