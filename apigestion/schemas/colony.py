# apigestion/schemas/colony.py: hives, swarms and nuclei
from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional


class HiveCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    status: str = "active"
    installed_at: Optional[datetime] = None
    frames: Optional[int] = None
    queen_type: Optional[str] = None
    queen_date: Optional[datetime] = None
    recurring_alerts_enabled: bool = True
    apiary_id: Optional[int] = None


class HiveOut(BaseModel):
    id: int
    name: str
    status: str
    installed_at: Optional[datetime]
    queen_date: Optional[datetime]
    recurring_alerts_enabled: bool
    last_control_alert_at: Optional[datetime]
    owner_id: int
    apiary_id: Optional[int]

    class Config:
        from_attributes = True


class SwarmCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    status: str = "active"
    notes: Optional[str] = None
    recurring_alerts_enabled: bool = True
    hive_id: Optional[int] = None


class SwarmOut(BaseModel):
    id: int
    name: str
    status: str
    notes: Optional[str]
    recurring_alerts_enabled: bool
    last_control_alert_at: Optional[datetime]
    hive_id: Optional[int]
    owner_id: int

    class Config:
        from_attributes = True


class NucleusCreate(BaseModel):
    number: int
    frame_type: str = "Langstroth"
    status: str = "Nuevo"
    installed_at: Optional[datetime] = None
    hive_id: int


class NucleusOut(BaseModel):
    id: int
    number: int
    frame_type: str
    status: str
    installed_at: Optional[datetime]
    recurring_alerts_enabled: bool
    last_control_alert_at: Optional[datetime]
    hive_id: int

    class Config:
        from_attributes = True
