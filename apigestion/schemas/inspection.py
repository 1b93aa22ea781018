# apigestion/schemas/inspection.py
from pydantic import BaseModel
from datetime import datetime
from typing import Literal, Optional

SanitaryStatus = Literal["healthy", "diseased", "quarantine"]
Level = Literal["High", "Medium", "Low"]


class InspectionCreate(BaseModel):
    hive_id: int
    inspected_at: Optional[datetime] = None
    sanitary_status: SanitaryStatus = "healthy"
    treatments: Optional[str] = None
    population: Optional[Level] = None
    production: Optional[Level] = None
    observations: Optional[str] = None


class InspectionUpdate(BaseModel):
    sanitary_status: Optional[SanitaryStatus] = None
    treatments: Optional[str] = None
    population: Optional[Level] = None
    production: Optional[Level] = None
    observations: Optional[str] = None


class InspectionOut(BaseModel):
    id: int
    hive_id: Optional[int]
    inspected_at: datetime
    sanitary_status: str
    treatments: Optional[str]
    population: Optional[str]
    production: Optional[str]
    observations: Optional[str]
    owner_id: int

    class Config:
        from_attributes = True
