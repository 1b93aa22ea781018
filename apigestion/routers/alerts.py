# apigestion/routers/alerts.py
"""
Alerts: list, manual creation, mark as read, and scheduler control.

GET  /alerts                   caller's alerts, newest first
POST /alerts                   manual one-off alert
PUT  /alerts/{id}/read         mark as read (404 for unknown or foreign alerts)
GET  /alerts/scheduler         scheduler status
POST /alerts/scheduler/sweep   admin, run a sweep cycle now
"""

from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from apigestion.database import get_db
from apigestion.dependencies import get_admin_user, get_alert_service, get_current_user, get_scheduler
from apigestion.models.user import User
from apigestion.schemas.alert import AlertCreate, AlertOut, SchedulerStatus, SweepResult
from apigestion.services.alert_service import AlertService
from apigestion.services.errors import AlertNotFoundError
from apigestion.services.scheduler_service import AlertScheduler

router = APIRouter()


@router.get("/alerts", response_model=list[AlertOut], summary="List my alerts")
async def list_alerts(
    limit: Optional[int] = Query(None, ge=1, le=500),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
    alerts: AlertService = Depends(get_alert_service),
):
    return await alerts.list_alerts(db, user.id, limit)


@router.post("/alerts", response_model=AlertOut, status_code=201, summary="Create a manual alert")
async def create_alert(
    body: AlertCreate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
    alerts: AlertService = Depends(get_alert_service),
):
    return await alerts.create_alert(db, body.title, body.message, body.kind, body.priority, user.id)


@router.put("/alerts/{alert_id}/read", summary="Mark an alert as read")
async def mark_alert_read(
    alert_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
    alerts: AlertService = Depends(get_alert_service),
):
    try:
        await alerts.mark_as_read(db, alert_id, user.id)
    except AlertNotFoundError:
        raise HTTPException(status_code=404, detail="Alert not found")
    return {"id": alert_id, "status": "read"}


@router.get("/alerts/scheduler", response_model=SchedulerStatus, summary="Alert scheduler status")
def scheduler_status(
    user: User = Depends(get_current_user),
    scheduler: AlertScheduler = Depends(get_scheduler),
):
    return SchedulerStatus(is_active=scheduler.is_active(), interval_seconds=scheduler.interval_seconds)


@router.post("/alerts/scheduler/sweep", response_model=SweepResult, summary="Run an alert sweep now")
async def force_sweep(
    admin: User = Depends(get_admin_user),
    scheduler: AlertScheduler = Depends(get_scheduler),
):
    return SweepResult(generated=await scheduler.force_sweep())
