# apigestion/routers/inspections.py
"""
Sanitary inspections: create and update derive situational alerts.
Alert derivation and activity logging never fail the request.
"""

from datetime import datetime
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from apigestion.database import get_db
from apigestion.dependencies import get_alert_service, get_current_user
from apigestion.models.hive import Hive
from apigestion.models.inspection import Inspection
from apigestion.models.user import User
from apigestion.schemas.inspection import InspectionCreate, InspectionOut, InspectionUpdate
from apigestion.services.activity_service import record_activity
from apigestion.services.alert_service import AlertService
from apigestion.utils.logger import get_logger

router = APIRouter()
logger = get_logger(__name__)


async def _derive_alerts(alerts: AlertService, db: Session, inspection: Inspection, owner_id: int):
    try:
        created = await alerts.derive_inspection_alerts(db, inspection, owner_id)
        if created:
            logger.info(f"Inspection {inspection.id} raised {len(created)} alerts")
    except Exception as e:
        logger.error(f"Could not derive alerts for inspection {inspection.id}: {e}")


@router.post("/inspections", response_model=InspectionOut, status_code=201, summary="Record an inspection")
async def create_inspection(
    body: InspectionCreate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
    alerts: AlertService = Depends(get_alert_service),
):
    hive = db.query(Hive).filter(Hive.id == body.hive_id, Hive.owner_id == user.id).first()
    if not hive:
        raise HTTPException(status_code=404, detail="Hive not found")

    data = body.model_dump()
    data["inspected_at"] = data["inspected_at"] or datetime.utcnow()
    inspection = Inspection(**data, owner_id=user.id, created_at=datetime.utcnow())
    db.add(inspection)
    db.commit()
    db.refresh(inspection)

    await _derive_alerts(alerts, db, inspection, user.id)

    try:
        record_activity(
            db, kind="inspection", title="Inspección sanitaria completada",
            description=f"Inspección sanitaria completada - Estado: {inspection.sanitary_status}",
            owner_id=user.id, entity_type="hive", entity_id=hive.id, entity_name=hive.name,
            status="warning" if inspection.sanitary_status in ("diseased", "quarantine") else "success",
        )
    except Exception as e:
        db.rollback()
        logger.error(f"Could not record activity for inspection {inspection.id}: {e}")

    return inspection


@router.put("/inspections/{inspection_id}", response_model=InspectionOut, summary="Update an inspection")
async def update_inspection(
    inspection_id: int,
    body: InspectionUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
    alerts: AlertService = Depends(get_alert_service),
):
    inspection = db.query(Inspection).filter(
        Inspection.id == inspection_id, Inspection.owner_id == user.id
    ).first()
    if not inspection:
        raise HTTPException(status_code=404, detail="Inspection not found")

    for field, value in body.model_dump(exclude_unset=True).items():
        setattr(inspection, field, value)
    db.commit()
    db.refresh(inspection)

    await _derive_alerts(alerts, db, inspection, user.id)
    return inspection
